import dataclasses

import pytest

from isobus_support.isoconf import IsoConfig


def test_defaults_match_sample_configuration():
    config = IsoConfig()
    assert config.can_nodes == 1
    assert config.can_vt == 0
    assert config.first_free_sa == 200
    assert config.last_free_sa == 220
    assert config.tp_parallel_max == 10
    assert config.block_size_j1939 == 223
    assert config.vtc_pool_buffer_size == 25000
    assert config.aux_entries_max == 25


def test_enabled_parts_default():
    config = IsoConfig()
    assert (config.lay78, config.lay6) == (True, True)
    assert (config.lay10, config.lay13, config.lay14, config.nmea) == (
        False,
        False,
        False,
        False,
    )


def test_derived_limits_follow_working_sets():
    config = IsoConfig(working_sets=4)
    assert config.vtc_connections_max == config.working_sets * 2
    assert config.aux_instances_max == config.working_sets


def test_derived_command_instance_limit():
    config = IsoConfig(vtc_cmd_buffer_max=40)
    assert config.vtc_cmd_instance_max == 40


def test_derived_aux_entries():
    config = IsoConfig(aux_entries_max=None, working_sets=2, aux_entries_instance_max=7)
    assert config.aux_entries_max == (
        config.aux_entries_instance_max * config.aux_instances_max
    )


def test_explicit_limits_kept():
    config = IsoConfig(vtc_connections_max=3, aux_instances_max=1)
    assert config.vtc_connections_max == 3
    assert config.aux_instances_max == 1


def test_frozen():
    config = IsoConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.can_nodes = 2
    assert config.can_nodes == 1


def test_validate_accepts_defaults():
    config = IsoConfig()
    assert config.validate() is None
    assert dataclasses.replace(config) == config


@pytest.mark.parametrize(
    "changes",
    [
        {"can_nodes": 0},
        {"can_nodes": 2, "can_vt": 2},
        {"first_free_sa": 100},
        {"last_free_sa": 248},
        {"first_free_sa": 230, "last_free_sa": 220},
        {"user_max": 0},
        {"tp_parallel_max": 0, "tp_reduced_max": 0},
        {"tp_reduced_max": 11},
        {"block_size_j1939": 8},
        {"block_size_j1939": 1786},
        {"lay14": True, "lay6": False},
        {"working_sets": 0},
        {"vtc_cmd_instance_max": 101},
        {"vtc_cmd_instance_max": 0},
        {"vtc_cmd_str_block_size": 0},
        {"scd_size": -1},
        {"process_data_max": "many"},
    ],
)
def test_invalid_configurations_rejected(changes):
    with pytest.raises(ValueError):
        IsoConfig(**changes)


def test_replace_revalidates():
    config = IsoConfig()
    with pytest.raises(ValueError):
        dataclasses.replace(config, can_vt=1)


@pytest.mark.parametrize("size", [9, 1785])
def test_block_size_bounds_accepted(size):
    assert IsoConfig(block_size_j1939=size).block_size_j1939 == size


def test_address_range_bounds_accepted():
    config = IsoConfig(first_free_sa=128, last_free_sa=247)
    assert (config.first_free_sa, config.last_free_sa) == (128, 247)


def test_second_node_for_vt():
    config = IsoConfig(can_nodes=2, can_vt=1)
    assert config.can_vt < config.can_nodes


def test_sequence_control_with_vt_client():
    config = IsoConfig(lay14=True, lay6=True)
    assert config.lay14 and config.lay6