"""Unit tests for CSV scenario loading."""

import pytest

from ambient_iot.core.AmbientDevice import DeviceRole
from ambient_iot.network.AmbientNetwork import AmbientNetwork
from ambient_iot.utils.errors import ConfigurationError
from ambient_iot.utils.scenario_loader import load_scenario, parse_wkt_triplets


@pytest.fixture
def scenario_csv(tmp_path):
    path = tmp_path / "scenario.csv"
    path.write_text(
        "name,role,x,y,z,WKT\n"
        "BS_north,reader,0,100,30,\n"
        "BS_south,Reader,0,-100,30,\n"
        "CW_0,carrier,,,,POINT Z (50 0 10)\n"
        "tag_0,active,0,90,0,\n"
        "tag_1,monostatic,0,-95,0,\n"
        "tag_2,bistatic,45,0,0,\n"
    )
    return path


class TestParseWkt:
    """Tests for WKT triplet parsing."""

    def test_point_z(self):
        assert parse_wkt_triplets("POINT Z (1.5 -2 3e1)") == [(1.5, -2.0, 30.0)]

    def test_non_string(self):
        assert parse_wkt_triplets(float("nan")) == []


class TestLoadScenario:
    """Tests for load_scenario."""

    def test_groups_by_role(self, scenario_csv):
        scenario = load_scenario(str(scenario_csv))
        assert len(scenario['reader']) == 2
        assert scenario['reader_names'] == ['BS_north', 'BS_south']
        assert scenario['carrier'][0].tolist() == [50.0, 0.0, 10.0]
        assert len(scenario['active']) == 1
        assert len(scenario['monostatic']) == 1
        assert len(scenario['bistatic']) == 1

    def test_unknown_role(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("role,x,y,z\nsatellite,0,0,0\n")
        with pytest.raises(ConfigurationError):
            load_scenario(str(path))

    def test_missing_role_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("x,y,z\n0,0,0\n")
        with pytest.raises(ConfigurationError):
            load_scenario(str(path))

    def test_missing_coordinates(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("role,WKT\nactive,\n")
        with pytest.raises(ConfigurationError):
            load_scenario(str(path))


class TestNetworkFromScenario:
    """Tests for AmbientNetwork.from_scenario_csv."""

    def test_builds_bound_topology(self, scenario_csv):
        network = AmbientNetwork.from_scenario_csv(str(scenario_csv))
        assert [r.name for r in network.readers] == ['BS_north', 'BS_south']

        active = network.registry.by_role(DeviceRole.ACTIVE_TRANSMITTER)[0]
        mono = network.registry.by_role(DeviceRole.MONOSTATIC_BACKSCATTER)[0]
        bistatic = network.registry.by_role(DeviceRole.BISTATIC_BACKSCATTER)[0]
        assert network.reader_of(active).name == 'BS_north'
        assert network.reader_of(mono).name == 'BS_south'
        assert bistatic.carrier_id == 0
        # 载波源 (50, 0, 10) 距离约 11.18 m，比读取器更近
        assert bistatic.harvest_rate == pytest.approx(0.001 / (5 ** 2 + 10 ** 2))
