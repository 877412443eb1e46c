"""
Scenario loading from CSV: readers, carrier sources and devices with their positions.

Each row needs a ``role`` column (reader / carrier / active / monostatic /
bistatic) and either ``x, y, z`` columns (meters) or a ``WKT`` column holding
an ``x y z`` triplet, e.g. ``POINT Z (120.5 -40 0)``. ``name`` is optional.
"""

import re
import numpy as np
import pandas as pd
from typing import Dict, List, Tuple

from ambient_iot.utils.errors import ConfigurationError

ROLES = ('reader', 'carrier', 'active', 'monostatic', 'bistatic')

# ----------------------
# Parsing helpers
# ----------------------
_wkt_triplet = re.compile(r'(-?[\d\.]+(?:[eE][-+]?\d+)?)\s+(-?[\d\.]+(?:[eE][-+]?\d+)?)\s+(-?[\d\.]+(?:[eE][-+]?\d+)?)')


def parse_wkt_triplets(wkt: str) -> List[Tuple[float, float, float]]:
    """Parse a WKT-like string that contains space-separated x y z triplets."""
    if not isinstance(wkt, str):
        return []
    return [(float(m.group(1)), float(m.group(2)), float(m.group(3))) for m in _wkt_triplet.finditer(wkt)]


def _row_position(row, line_no):
    if all(c in row and pd.notna(row[c]) for c in ('x', 'y', 'z')):
        return np.array([row['x'], row['y'], row['z']], dtype=float)
    pts = parse_wkt_triplets(row.get('WKT'))
    if not pts:
        raise ConfigurationError(f"Scenario row {line_no}: no x/y/z columns and no WKT point")
    # 多个三元组时取第一个
    return np.array(pts[0], dtype=float)

# ----------------------
# Scenario loading
# ----------------------

def load_scenario(csv_path: str) -> Dict[str, list]:
    """
    Reads a scenario CSV into positions grouped by role.

    Returns:
        dict: role -> list of np.ndarray positions (all ROLES present as keys),
              plus 'reader_names' with the reader names in file order.
    """
    df = pd.read_csv(csv_path)
    if 'role' not in df.columns:
        raise ConfigurationError(f"{csv_path}: missing 'role' column")

    scenario = {role: [] for role in ROLES}
    scenario['reader_names'] = []
    for idx, row in df.iterrows():
        role = str(row['role']).strip().lower()
        if role not in ROLES:
            raise ConfigurationError(f"Scenario row {idx}: unknown role '{row['role']}'")
        pos = _row_position(row, idx)
        scenario[role].append(pos)
        if role == 'reader':
            name = row.get('name')
            scenario['reader_names'].append(str(name) if pd.notna(name) else None)

    print(f"[scenario_loader] Loaded {csv_path}: "
          + ", ".join(f"{len(scenario[r])} {r}" for r in ROLES))
    return scenario
