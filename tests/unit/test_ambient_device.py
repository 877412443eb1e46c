"""Unit tests for AmbientDevice energy accounting and eligibility."""

import pytest

from ambient_iot.config.simulation_config import DeviceConfig
from ambient_iot.core.AmbientDevice import AmbientDevice, DeviceRole
from ambient_iot.utils.errors import ConfigurationError


def make_device(role, device_id=1, initial_energy=0.0, harvest_rate=None):
    device = AmbientDevice(device_id, role, [0.0, 0.0, 0.0], initial_energy=initial_energy)
    if harvest_rate is not None:
        device.enable_energy_harvester(harvest_rate)
    return device


def make_bistatic(initial_energy, harvest_rate=None):
    carrier = AmbientDevice(0, DeviceRole.CARRIER_SOURCE, [10.0, 0.0, 0.0])
    device = make_device(DeviceRole.BISTATIC_BACKSCATTER, initial_energy=initial_energy,
                         harvest_rate=harvest_rate)
    device.bind_carrier(carrier)
    return device, carrier


class TestDeviceRole:
    """Tests for the per-role transmission cost."""

    def test_costs(self):
        assert DeviceRole.ACTIVE_TRANSMITTER.tx_cost_j == 0.1
        assert DeviceRole.MONOSTATIC_BACKSCATTER.tx_cost_j == 0.01
        assert DeviceRole.BISTATIC_BACKSCATTER.tx_cost_j == 0.01
        assert DeviceRole.CARRIER_SOURCE.tx_cost_j is None

    def test_lookup_by_value(self):
        assert DeviceRole("bistatic") is DeviceRole.BISTATIC_BACKSCATTER


class TestActiveTransmitter:
    """Tests for the active transmission rule."""

    def test_concrete_scenario(self):
        device = make_device(DeviceRole.ACTIVE_TRANSMITTER, harvest_rate=1e-5)

        assert device.check_and_consume(1000.0) is False
        assert device.current_energy == pytest.approx(0.01)

        assert device.check_and_consume(11000.0) is True
        assert device.current_energy == pytest.approx(0.01)
        assert device.attempts == 2
        assert device.transmissions == 1

    def test_exact_threshold_transmits(self):
        device = make_device(DeviceRole.ACTIVE_TRANSMITTER, initial_energy=0.1)
        assert device.check_and_consume(5.0) is True
        assert device.current_energy == pytest.approx(0.0)

    def test_below_threshold_keeps_energy(self):
        device = make_device(DeviceRole.ACTIVE_TRANSMITTER, initial_energy=0.09)
        assert device.check_and_consume(5.0) is False
        assert device.current_energy == pytest.approx(0.09)

    def test_without_harvester_energy_does_not_grow(self):
        device = make_device(DeviceRole.ACTIVE_TRANSMITTER, initial_energy=0.05)
        device.check_and_consume(1e6)
        assert device.current_energy == pytest.approx(0.05)
        assert device.last_harvest_time == 0.0


class TestMonostaticBackscatter:
    """Tests for the monostatic rule."""

    def test_transmits_with_backscatter_cost(self):
        device = make_device(DeviceRole.MONOSTATIC_BACKSCATTER, initial_energy=0.025)
        assert device.check_and_consume(1.0) is True
        assert device.current_energy == pytest.approx(0.015)
        assert device.check_and_consume(1.0) is True
        assert device.check_and_consume(1.0) is False
        assert device.current_energy == pytest.approx(0.005)


class TestBistaticBackscatter:
    """Tests for the bistatic conjunction rule."""

    def test_enough_energy_and_carrier(self):
        device, carrier = make_bistatic(0.02)
        assert device.check_and_consume(100.0, carrier=carrier) is True
        assert device.current_energy == pytest.approx(0.01)

    def test_not_enough_energy(self):
        device, carrier = make_bistatic(0.005)
        assert device.check_and_consume(100.0, carrier=carrier) is False
        assert device.current_energy == pytest.approx(0.005)

    def test_carrier_refusal_deducts_nothing(self):
        class SilentCarrier:
            device_id = 0

            def check_and_consume(self, now):
                return False

        device, _ = make_bistatic(0.02)
        assert device.check_and_consume(100.0, carrier=SilentCarrier()) is False
        assert device.current_energy == pytest.approx(0.02)

    def test_carrier_not_consulted_below_threshold(self):
        class CountingCarrier:
            device_id = 0
            calls = 0

            def check_and_consume(self, now):
                self.calls += 1
                return True

        device, _ = make_bistatic(0.001)
        counting = CountingCarrier()
        device.check_and_consume(100.0, carrier=counting)
        assert counting.calls == 0

    def test_missing_carrier_raises(self):
        device, _ = make_bistatic(0.02)
        with pytest.raises(ConfigurationError):
            device.check_and_consume(100.0)

    def test_wrong_carrier_raises(self):
        device, _ = make_bistatic(0.02)
        other = AmbientDevice(5, DeviceRole.CARRIER_SOURCE, [0.0, 0.0, 0.0])
        with pytest.raises(ConfigurationError):
            device.check_and_consume(100.0, carrier=other)

    def test_carrier_energy_untouched(self):
        device, carrier = make_bistatic(0.02)
        device.check_and_consume(100.0, carrier=carrier)
        assert carrier.current_energy == 0.0
        assert carrier.harvesting_enabled is False


class TestCarrierSource:
    """Tests for the always-on carrier source."""

    def test_always_eligible(self):
        carrier = make_device(DeviceRole.CARRIER_SOURCE, device_id=0)
        for now in (0.0, 10.0, 10.0, 3600.0):
            assert carrier.check_and_consume(now) is True
        assert carrier.current_energy == 0.0

    def test_cannot_harvest_or_bind(self):
        carrier = make_device(DeviceRole.CARRIER_SOURCE, device_id=0)
        with pytest.raises(ConfigurationError):
            carrier.enable_energy_harvester(1e-5)
        with pytest.raises(ConfigurationError):
            carrier.bind_reader(0)


class TestAccrual:
    """Tests for lazy energy accrual."""

    def test_zero_elapsed_is_idempotent(self):
        device = make_device(DeviceRole.MONOSTATIC_BACKSCATTER, harvest_rate=1e-4)
        device.check_and_consume(150.0)  # 0.015 J, transmits -> 0.005 J
        after_first = device.current_energy
        device.check_and_consume(150.0)
        assert device.current_energy == pytest.approx(after_first)
        assert device.last_harvest_time == 150.0

    def test_accrue_returns_harvested(self):
        device = make_device(DeviceRole.ACTIVE_TRANSMITTER, harvest_rate=2e-3)
        assert device.accrue(10.0) == pytest.approx(0.02)
        assert device.accrue(10.0) == 0.0

    def test_clock_going_backwards_raises(self):
        device = make_device(DeviceRole.ACTIVE_TRANSMITTER, harvest_rate=1e-3)
        device.accrue(50.0)
        with pytest.raises(ValueError):
            device.check_and_consume(40.0)

    def test_energy_history_records_each_check(self):
        device = make_device(DeviceRole.ACTIVE_TRANSMITTER, harvest_rate=1e-5)
        device.check_and_consume(1000.0)
        device.check_and_consume(11000.0)
        times = [t for t, _ in device.energy_history]
        assert times == [1000.0, 11000.0]


class TestBindings:
    """Tests for the write-once reader and carrier bindings."""

    def test_reader_binding_is_immutable(self):
        device = make_device(DeviceRole.ACTIVE_TRANSMITTER)
        device.bind_reader(2)
        assert device.reader_id == 2
        with pytest.raises(ConfigurationError):
            device.bind_reader(1)
        assert device.reader_id == 2

    def test_carrier_binding_is_immutable(self):
        device, carrier = make_bistatic(0.0)
        other = AmbientDevice(9, DeviceRole.CARRIER_SOURCE, [0.0, 0.0, 0.0])
        with pytest.raises(ConfigurationError):
            device.bind_carrier(other)
        assert device.carrier_id == carrier.device_id

    def test_carrier_must_be_a_carrier_source(self):
        device = make_device(DeviceRole.BISTATIC_BACKSCATTER)
        not_a_carrier = make_device(DeviceRole.ACTIVE_TRANSMITTER, device_id=3)
        with pytest.raises(ConfigurationError):
            device.bind_carrier(not_a_carrier)

    def test_only_bistatic_devices_take_a_carrier(self):
        carrier = make_device(DeviceRole.CARRIER_SOURCE, device_id=0)
        device = make_device(DeviceRole.MONOSTATIC_BACKSCATTER)
        with pytest.raises(ConfigurationError):
            device.bind_carrier(carrier)


class TestConstruction:
    """Tests for device construction."""

    def test_position_is_read_only(self):
        device = make_device(DeviceRole.ACTIVE_TRANSMITTER)
        with pytest.raises(ValueError):
            device.position[0] = 5.0

    def test_negative_initial_energy_rejected(self):
        with pytest.raises(ConfigurationError):
            make_device(DeviceRole.ACTIVE_TRANSMITTER, initial_energy=-0.1)

    def test_initial_energy_defaults_to_current_config(self, monkeypatch):
        monkeypatch.setattr(DeviceConfig, "INITIAL_ENERGY_J", 0.05)
        device = AmbientDevice(2, DeviceRole.ACTIVE_TRANSMITTER, [0.0, 0.0, 0.0])
        assert device.current_energy == 0.05

    def test_negative_harvest_rate_rejected(self):
        with pytest.raises(ConfigurationError):
            make_device(DeviceRole.ACTIVE_TRANSMITTER, harvest_rate=-1.0)

    def test_name(self):
        assert make_device(DeviceRole.BISTATIC_BACKSCATTER, device_id=4).name == "bistatic_4"
