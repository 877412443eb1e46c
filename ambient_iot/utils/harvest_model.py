"""
Physics model for ambient RF energy harvesting.
This is a simplified inverse-square model, suitable for system-level simulation.
"""

from ambient_iot.config.simulation_config import HarvestConfig
from ambient_iot.utils.errors import ConfigurationError


def calculate_harvest_rate(energy_density, distance_m):
    """
    Calculates the rate at which a device harvests ambient energy.

    Args:
        energy_density (float): Ambient energy density in J/(s*cm^2).
        distance_m (float): Distance to the energy source in meters.

    Returns:
        float: Harvest rate in J/s.
    """
    # 距离过小时取下限，避免除以零
    effective_distance = max(distance_m, HarvestConfig.MIN_DISTANCE_M)
    return energy_density / (effective_distance ** 2)


class AmbientEnergySource:
    def __init__(self, energy_density=None):
        """
        Ambient RF energy available to harvesting devices.

        Args:
            energy_density (float, optional): J/(s*cm^2). Defaults to HarvestConfig.ENERGY_DENSITY.
        """
        self._energy_density = None
        self.energy_density = energy_density if energy_density is not None else HarvestConfig.ENERGY_DENSITY

    @property
    def energy_density(self):
        return self._energy_density

    @energy_density.setter
    def energy_density(self, density):
        if density < 0:
            raise ConfigurationError(f"Energy density must be non-negative, got {density}")
        self._energy_density = float(density)

    def harvest_rate(self, distance_m):
        """Harvest rate (J/s) for a device at ``distance_m`` from the source."""
        return calculate_harvest_rate(self._energy_density, distance_m)

    def __repr__(self):
        return f"AmbientEnergySource(Density={self._energy_density}J/s/cm^2)"
