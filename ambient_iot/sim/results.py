import os
import json
import pandas as pd

from ambient_iot.core.AmbientDevice import DeviceRole

DECISION_COLUMNS = ['device_id', 'role', 'time', 'eligible']


def decisions_to_frame(decisions):
    """One row per eligibility decision, role as its string value."""
    rows = [{'device_id': d.device_id, 'role': d.role.value, 'time': d.time, 'eligible': d.eligible}
            for d in decisions]
    return pd.DataFrame(rows, columns=DECISION_COLUMNS)


def summarize_decisions(decisions):
    """
    Per-role attempt and transmission counts.

    Returns:
        pd.DataFrame: indexed by role value (every role present), with columns
        attempts, transmissions, success_ratio.
    """
    df = decisions_to_frame(decisions)
    summary = df.groupby('role')['eligible'].agg(attempts='count', transmissions='sum')
    summary = summary.reindex([r.value for r in DeviceRole], fill_value=0)
    summary['attempts'] = summary['attempts'].astype(int)
    summary['transmissions'] = summary['transmissions'].astype(int)
    attempts = summary['attempts'].where(summary['attempts'] > 0)
    summary['success_ratio'] = (summary['transmissions'] / attempts).fillna(0.0)
    summary.index.name = 'role'
    return summary


def device_table(registry):
    """Final state of every device."""
    rows = []
    for device in registry:
        x, y, z = device.position
        rows.append({
            'device_id': device.device_id,
            'role': device.role.value,
            'x': x, 'y': y, 'z': z,
            'reader_id': device.reader_id,
            'carrier_id': device.carrier_id,
            'harvest_rate': device.harvest_rate,
            'current_energy': device.current_energy,
            'attempts': device.attempts,
            'transmissions': device.transmissions,
        })
    return pd.DataFrame(rows)


def save_results(decisions, registry, out_dir='results'):
    """Writes decisions.csv, devices.csv and summary.json; returns the summary frame."""
    os.makedirs(out_dir, exist_ok=True)
    decisions_to_frame(decisions).to_csv(os.path.join(out_dir, 'decisions.csv'), index=False)
    device_table(registry).to_csv(os.path.join(out_dir, 'devices.csv'), index=False)
    summary = summarize_decisions(decisions)
    with open(os.path.join(out_dir, 'summary.json'), 'w', encoding='utf-8') as f:
        json.dump(summary.reset_index().to_dict(orient='records'), f, ensure_ascii=False, indent=2)
    return summary
