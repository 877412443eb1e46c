"""
Node placement sampling. The topology only ever sees the resulting positions.
"""

import numpy as np


def random_disc_positions(count, rng, center=(0.0, 0.0), rho_min=0.0, rho_max=1.0, z=0.0):
    """
    Places nodes on a disc around ``center``.

    The radius is drawn uniformly in [rho_min, rho_max] and the angle uniformly
    in [0, 2*pi), so nodes are denser towards the center.

    Args:
        count (int): Number of positions.
        rng (np.random.Generator): Random number generator.
        center (tuple): Disc center (x, y) in meters.
        rho_min (float): Minimum radius in meters.
        rho_max (float): Maximum radius in meters.
        z (float): Height of every node in meters.

    Returns:
        list[np.ndarray]: 3D positions.
    """
    if rho_min < 0 or rho_max < rho_min:
        raise ValueError(f"Invalid radius range [{rho_min}, {rho_max}]")
    rho = rng.uniform(rho_min, rho_max, size=count)
    theta = rng.uniform(0.0, 2 * np.pi, size=count)
    x = center[0] + rho * np.cos(theta)
    y = center[1] + rho * np.sin(theta)
    return [np.array([x[i], y[i], z]) for i in range(count)]


def grid_positions(count, min_x=0.0, min_y=0.0, delta_x=1.0, delta_y=1.0, grid_width=1, z=0.0):
    """
    Places nodes row by row on a regular grid ``grid_width`` columns wide.
    """
    if grid_width < 1:
        raise ValueError(f"Grid width must be at least 1, got {grid_width}")
    positions = []
    for i in range(count):
        row, col = divmod(i, grid_width)
        positions.append(np.array([min_x + col * delta_x, min_y + row * delta_y, z]))
    return positions


def list_positions(points):
    """Fixed positions, e.g. from configuration."""
    return [np.array(p, dtype=float) for p in points]
