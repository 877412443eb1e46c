"""
Ambient IoT device with a lazily accrued energy account.
"""

from enum import Enum

import numpy as np

from ambient_iot.config.simulation_config import DeviceConfig
from ambient_iot.utils.errors import ConfigurationError


class DeviceRole(Enum):
    ACTIVE_TRANSMITTER = "active"           # 由环境能量供电的主动传输设备
    MONOSTATIC_BACKSCATTER = "monostatic"   # 单站式反向散射（读取器同时作为载波源）
    BISTATIC_BACKSCATTER = "bistatic"       # 双站式反向散射（读取器和载波源不同）
    CARRIER_SOURCE = "carrier"              # 提供载波的源设备

    @property
    def tx_cost_j(self):
        """Energy needed (and spent) per transmission; None for carrier sources."""
        if self is DeviceRole.ACTIVE_TRANSMITTER:
            return DeviceConfig.ACTIVE_TX_COST_J
        if self in (DeviceRole.MONOSTATIC_BACKSCATTER, DeviceRole.BISTATIC_BACKSCATTER):
            return DeviceConfig.BACKSCATTER_TX_COST_J
        return None


class AmbientDevice:
    def __init__(self,
                 device_id: int,
                 role: DeviceRole,
                 position,
                 initial_energy: float = None,
                 start_time: float = 0.0):
        """
        Initializes an ambient IoT device.

        :param device_id: Index of the device in the device registry
        :param role: DeviceRole of the device
        :param position: Device position [x, y, z] (meters), read-only
        :param initial_energy: Stored energy at creation (Joules), defaults to DeviceConfig.INITIAL_ENERGY_J
        :param start_time: Simulation time the energy account starts accruing from (s)
        """
        if initial_energy is None:
            initial_energy = DeviceConfig.INITIAL_ENERGY_J
        if initial_energy < 0:
            raise ConfigurationError(f"Initial energy must be non-negative, got {initial_energy}")

        self.device_id = device_id
        self.role = DeviceRole(role)
        self.position = np.array(position, dtype=float)
        self.position.flags.writeable = False

        # Energy account
        self.harvesting_enabled = False
        self.harvest_rate = 0.0  # J/s
        self.current_energy = float(initial_energy)
        self.last_harvest_time = float(start_time)

        # Non-owning bindings, stored as registry indices
        self._reader_id = None
        self._carrier_id = None

        # Statistics
        self.attempts = 0
        self.transmissions = 0
        self.energy_history = []  # [(time, stored energy after check)]

    @property
    def name(self):
        return f"{self.role.value}_{self.device_id}"

    @property
    def reader_id(self):
        return self._reader_id

    @property
    def carrier_id(self):
        return self._carrier_id

    def bind_reader(self, reader_id):
        """Bind the reader node this device reports to. Can only be done once."""
        if self.role is DeviceRole.CARRIER_SOURCE:
            raise ConfigurationError(f"Carrier source {self.name} has no reader")
        if self._reader_id is not None:
            raise ConfigurationError(f"Device {self.name} is already bound to reader {self._reader_id}")
        self._reader_id = reader_id

    def bind_carrier(self, carrier):
        """
        Bind the carrier source a bistatic device backscatters. Can only be done once.

        :param carrier: The carrier source AmbientDevice
        """
        if self.role is not DeviceRole.BISTATIC_BACKSCATTER:
            raise ConfigurationError(f"Only bistatic devices use a carrier source, not {self.name}")
        if carrier.role is not DeviceRole.CARRIER_SOURCE:
            raise ConfigurationError(f"Device {carrier.name} is not a carrier source")
        if self._carrier_id is not None:
            raise ConfigurationError(f"Device {self.name} is already bound to carrier {self._carrier_id}")
        self._carrier_id = carrier.device_id

    def enable_energy_harvester(self, harvest_rate):
        """Start harvesting at ``harvest_rate`` J/s."""
        if self.role is DeviceRole.CARRIER_SOURCE:
            raise ConfigurationError(f"Carrier source {self.name} is mains powered and does not harvest")
        if harvest_rate < 0:
            raise ConfigurationError(f"Harvest rate must be non-negative, got {harvest_rate}")
        self.harvesting_enabled = True
        self.harvest_rate = float(harvest_rate)

    def accrue(self, now):
        """
        Add the energy harvested since the last accrual.

        :param now: Current simulation time (s)
        :return: The harvested energy (J)
        """
        if not self.harvesting_enabled:
            return 0.0
        elapsed = now - self.last_harvest_time
        if elapsed < 0:
            raise ValueError(f"Clock went backwards for {self.name}: {now} < {self.last_harvest_time}")
        harvested = self.harvest_rate * elapsed
        self.current_energy += harvested
        self.last_harvest_time = now
        return harvested

    def check_and_consume(self, now, carrier=None):
        """
        Decide whether the device can transmit now, spending the energy if so.

        Energy is accrued first, then the role rule is applied. A bistatic
        device also needs its carrier source to be transmitting; it only pays
        its own cost and pays nothing if either condition fails.

        Not being able to transmit is a False result, never an exception;
        the errors raised below only flag invalid calls.

        :param now: Current simulation time (s)
        :param carrier: The bound carrier source (bistatic devices only)
        :return: True if the device transmits
        :raises ValueError: If ``now`` is earlier than the last accrual
        :raises ConfigurationError: If a bistatic device is not given its bound carrier
        """
        self.accrue(now)

        cost = self.role.tx_cost_j
        if self.role is DeviceRole.CARRIER_SOURCE:
            # 载波源假定有稳定的电源
            return True
        elif self.role is DeviceRole.BISTATIC_BACKSCATTER:
            if carrier is None or carrier.device_id != self._carrier_id:
                raise ConfigurationError(f"Bistatic device {self.name} checked without its bound carrier")
            can_transmit = self.current_energy >= cost and carrier.check_and_consume(now)
        else:
            can_transmit = self.current_energy >= cost

        if can_transmit:
            self.current_energy -= cost
            self.transmissions += 1
        self.attempts += 1
        self.energy_history.append((now, self.current_energy))
        return can_transmit

    def __repr__(self):
        return (f"AmbientDevice(ID={self.device_id}, Role={self.role.value}, "
                f"Energy={self.current_energy:.4f}J, Rate={self.harvest_rate:.3e}J/s)")
