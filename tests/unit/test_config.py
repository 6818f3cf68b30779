"""
Tests for engine configuration
"""

import json

import pytest

from leo_mesh import MeshConfig, MeshNetwork, load_config


def test_defaults():
    config = MeshConfig()
    assert config.max_ttl == 32
    assert config.max_hop_count == 16
    assert config.initial_reliability == 0.9
    assert config.reliability_decay == 0.95
    assert config.table_refresh_interval == 10


@pytest.mark.parametrize("overrides", [
    {"max_ttl": 0},
    {"max_hop_count": 1},
    {"initial_reliability": 1.5},
    {"reliability_decay": -0.1},
    {"table_refresh_interval": 0},
    {"battery_drain_per_second": -1.0},
])
def test_invalid_values(overrides):
    with pytest.raises(ValueError):
        MeshConfig(**overrides)


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="bogus"):
        MeshConfig.from_dict({"bogus": 1})


def test_save_and_load(tmp_path):
    path = tmp_path / "mesh.json"
    MeshConfig(max_ttl=8, seed=3).save(str(path))

    with open(path) as f:
        assert json.load(f)["max_ttl"] == 8

    loaded = load_config(str(path))
    assert loaded.max_ttl == 8
    assert loaded.seed == 3


def test_load_rejects_non_object(tmp_path):
    path = tmp_path / "mesh.json"
    path.write_text("[1, 2]")

    with pytest.raises(ValueError):
        load_config(str(path))


def test_engine_uses_config_ttl():
    net = MeshNetwork(MeshConfig(max_ttl=4))
    assert net.forwarder.create_packet(1, 2).ttl == 4
