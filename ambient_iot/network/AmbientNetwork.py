"""
Topology builder: creates readers and ambient devices, binds every device to
its nearest reader (and carrier source) and sets its harvest rate.
"""

import numpy as np

from ambient_iot.core.AmbientDevice import DeviceRole
from ambient_iot.core.ReaderNode import ReaderNode
from ambient_iot.network.DeviceRegistry import DeviceRegistry
from ambient_iot.network import placement
from ambient_iot.utils.errors import ConfigurationError
from ambient_iot.utils.geometry import nearest
from ambient_iot.utils.harvest_model import AmbientEnergySource
from ambient_iot.utils.scenario_loader import load_scenario
from ambient_iot.utils.simulation_logger import NullObserver
from ambient_iot.config.simulation_config import (
    ReaderConfig, CarrierConfig, DeviceConfig, SimConfig,
)


class AmbientNetwork:
    def __init__(self, readers, registry):
        """
        A fully bound topology.

        Args:
            readers (list[ReaderNode]): Reader nodes, indexed by reader_id.
            registry (DeviceRegistry): All ambient devices.
        """
        self.readers = readers
        self.registry = registry

    def reader_of(self, device):
        if device.reader_id is None:
            return None
        return self.readers[device.reader_id]

    @classmethod
    def from_config(cls, rng=None, observer=None):
        """
        Builds the default scenario from the configuration classes, with
        devices scattered on discs around DeviceConfig.DISC_CENTER.
        """
        if rng is None:
            rng = np.random.default_rng(SimConfig.RANDOM_SEED)
        z = DeviceConfig.DEVICE_HEIGHT
        center = DeviceConfig.DISC_CENTER
        readers = [ReaderNode(i, pos) for i, pos in enumerate(placement.list_positions(ReaderConfig.POSITIONS))]
        return build_topology(
            readers,
            carrier_positions=placement.list_positions(CarrierConfig.POSITIONS),
            active_positions=placement.random_disc_positions(
                DeviceConfig.NUM_ACTIVE, rng, center, *DeviceConfig.ACTIVE_RHO, z=z),
            monostatic_positions=placement.random_disc_positions(
                DeviceConfig.NUM_MONOSTATIC, rng, center, *DeviceConfig.MONOSTATIC_RHO, z=z),
            bistatic_positions=placement.random_disc_positions(
                DeviceConfig.NUM_BISTATIC, rng, center, *DeviceConfig.BISTATIC_RHO, z=z),
            observer=observer,
        )

    @classmethod
    def from_scenario_csv(cls, csv_path, observer=None, energy_density=None):
        """Builds the topology described by a scenario CSV file."""
        scenario = load_scenario(csv_path)
        readers = [ReaderNode(i, pos, name=name)
                   for i, (pos, name) in enumerate(zip(scenario['reader'], scenario['reader_names']))]
        return build_topology(
            readers,
            carrier_positions=scenario['carrier'],
            active_positions=scenario['active'],
            monostatic_positions=scenario['monostatic'],
            bistatic_positions=scenario['bistatic'],
            energy_density=energy_density,
            observer=observer,
        )

    def __repr__(self):
        return f"AmbientNetwork(Readers={len(self.readers)}, {self.registry})"


def _validate(readers, carrier_positions, active_positions, monostatic_positions, bistatic_positions):
    needs_reader = len(active_positions) + len(monostatic_positions) + len(bistatic_positions)
    if needs_reader and not readers:
        raise ConfigurationError(f"{needs_reader} devices need a reader but no readers were given")
    if len(bistatic_positions) and not len(carrier_positions):
        raise ConfigurationError(
            f"{len(bistatic_positions)} bistatic devices need a carrier source but none were given")


def build_topology(readers,
                   carrier_positions=(),
                   active_positions=(),
                   monostatic_positions=(),
                   bistatic_positions=(),
                   energy_density=None,
                   observer=None,
                   energy_source=None):
    """
    Creates and binds all devices.

    Carrier sources are created first so bistatic devices can bind to them,
    then active, monostatic and bistatic devices in that order. Everything is
    validated before the first device exists, so a configuration error never
    leaves a partial topology behind.

    Args:
        readers (list[ReaderNode]): Candidate readers.
        carrier_positions, active_positions, monostatic_positions, bistatic_positions:
            3D positions of each device population.
        energy_density (float, optional): Ambient density, defaults to HarvestConfig.ENERGY_DENSITY.
        observer (SimulationObserver, optional): Receives a creation event per device.
        energy_source (AmbientEnergySource, optional): Shared ambient source; built from
            ``energy_density`` if None.

    Returns:
        AmbientNetwork: The bound topology.

    Raises:
        ConfigurationError: If a population needs readers or carrier sources that do not exist,
            or the energy density is negative.
    """
    _validate(readers, carrier_positions, active_positions, monostatic_positions, bistatic_positions)
    if energy_source is None:
        energy_source = AmbientEnergySource(energy_density)
    if observer is None:
        observer = NullObserver()

    registry = DeviceRegistry()

    # 载波源不需要能量收集 - 假设有电源供电
    carriers = []
    for pos in carrier_positions:
        device = registry.create(DeviceRole.CARRIER_SOURCE, pos)
        carriers.append(device)
        observer.on_device_created(device)

    # 主动设备与单站式反向散射设备：绑定最近的读取器
    for role, positions in ((DeviceRole.ACTIVE_TRANSMITTER, active_positions),
                            (DeviceRole.MONOSTATIC_BACKSCATTER, monostatic_positions)):
        for pos in positions:
            device = registry.create(role, pos)
            reader, dist = nearest(device.position, readers)
            device.bind_reader(reader.reader_id)
            device.enable_energy_harvester(energy_source.harvest_rate(dist))
            observer.on_device_created(device)

    # 双站式反向散射设备：读取器与载波源分别取最近
    for pos in bistatic_positions:
        device = registry.create(DeviceRole.BISTATIC_BACKSCATTER, pos)
        reader, dist_reader = nearest(device.position, readers)
        carrier, dist_carrier = nearest(device.position, carriers)
        device.bind_reader(reader.reader_id)
        device.bind_carrier(carrier)
        # 从物理上更近的源采集能量
        device.enable_energy_harvester(energy_source.harvest_rate(min(dist_reader, dist_carrier)))
        observer.on_device_created(device)

    network = AmbientNetwork(readers, registry)
    print("[AmbientNetwork] initialized with:")
    print(f"- {len(readers)} readers")
    for role in DeviceRole:
        print(f"  > {role.value}: {len(registry.by_role(role))} devices")
    return network
