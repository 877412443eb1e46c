"""
Distance and nearest-neighbor helpers used to bind devices to readers and
carrier sources.
"""

import numpy as np

from ambient_iot.utils.errors import NoCandidatesError


def distance(a, b) -> float:
    """
    Calculate the Euclidean distance between two 3D points.

    :param a: First point [x, y, z].
    :param b: Second point [x, y, z].
    :return: The Euclidean distance (meters).
    """
    pos1 = np.asarray(a, dtype=float)
    pos2 = np.asarray(b, dtype=float)
    if pos1.shape != (3,) or pos2.shape != (3,):
        raise ValueError(f"Expected 3D points, got shapes {pos1.shape} and {pos2.shape}")
    return float(np.linalg.norm(pos1 - pos2))


def nearest(point, candidates):
    """
    Find the candidate closest to a point.

    Candidates are scanned in order and only a strictly smaller distance
    replaces the current best, so the first of several equidistant
    candidates wins.

    Args:
        point (array-like): 3D coordinates [x, y, z].
        candidates (Sequence): Objects exposing a ``position`` attribute.

    Returns:
        tuple: (closest candidate, distance in meters).

    Raises:
        NoCandidatesError: If ``candidates`` is empty.
        ValueError: If a distance is not finite (NaN or infinite coordinates).
    """
    if len(candidates) == 0:
        raise NoCandidatesError("No candidates to choose from")

    best = None
    min_dist = float('inf')
    for candidate in candidates:
        dist = distance(point, candidate.position)
        if not np.isfinite(dist):
            raise ValueError(f"Non-finite distance to candidate at {np.asarray(candidate.position).tolist()}")
        if dist < min_dist:
            min_dist = dist
            best = candidate
    return best, min_dist
