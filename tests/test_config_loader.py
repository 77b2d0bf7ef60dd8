import json

import pytest

from setpoint_gen.config_loader import (
    config_from_properties,
    load_config,
    properties_to_ini,
    read_properties,
    write_properties,
)
from setpoint_gen.generator import ConfigError, SetPointConfig

PROPERTIES = """\
# benchmark parameters
MAX_CHANGE_RATE_PER_STEP_SETPOINT = 0.1
MAX_SEQUENCE_LENGTH=30
SetPoint_MIN: 0
SetPoint_MAX = 100
SETPOINT_STEP_SIZE = 1
! unrelated benchmark keys are ignored
CRD = 15.0
"""


def _props(**overrides):
    props = {
        "MAX_CHANGE_RATE_PER_STEP_SETPOINT": "1.0",
        "MAX_SEQUENCE_LENGTH": "5",
        "SetPoint_MIN": "0",
        "SetPoint_MAX": "100",
        "SETPOINT_STEP_SIZE": "1.0",
    }
    props.update(overrides)
    return {k: v for k, v in props.items() if v is not None}


def test_load_java_properties(tmp_path):
    path = tmp_path / "sim.properties"
    path.write_text(PROPERTIES)
    config = load_config(path)
    assert config == SetPointConfig(
        max_change_rate_per_step=0.1,
        max_sequence_length=30,
        min_setpoint=0.0,
        max_setpoint=100.0,
        step_size=1.0,
    )
    assert read_properties(path)["CRD"] == "15.0"


def test_load_ini_section(tmp_path):
    path = tmp_path / "sim.ini"
    path.write_text("[other]\nfoo = 1\n\n[setpoint]\n" + PROPERTIES + "STATIONARY_SETPOINT = 42.5\n")
    config = load_config(path)
    assert config.stationary
    assert config.stationary_value == 42.5


def test_load_json(tmp_path):
    path = tmp_path / "sim.json"
    path.write_text(
        json.dumps(
            {
                "MAX_CHANGE_RATE_PER_STEP_SETPOINT": 0.5,
                "MAX_SEQUENCE_LENGTH": 10,
                "SetPoint_MIN": 10,
                "SetPoint_MAX": 90,
                "SETPOINT_STEP_SIZE": 2,
            }
        )
    )
    config = load_config(path)
    assert config.max_sequence_length == 10
    assert config.min_setpoint == 10.0
    assert config.step_size == 2.0
    assert not config.stationary


def test_write_properties_can_be_loaded(tmp_path):
    path = tmp_path / "out.properties"
    config = SetPointConfig(0.25, 7, -5.0, 5.0, 0.5, stationary=True, stationary_value=3.0)
    write_properties(config, path)
    assert load_config(path) == config


def test_stationary_key_presence_makes_setpoint_stationary():
    config = config_from_properties(_props(STATIONARY_SETPOINT="50"))
    assert config.stationary
    assert config.stationary_value == 50.0


@pytest.mark.parametrize("value", ["-0.1", "100.5"])
def test_stationary_value_out_of_range(value):
    with pytest.raises(ConfigError, match="range"):
        config_from_properties(_props(STATIONARY_SETPOINT=value))


@pytest.mark.parametrize(
    "key",
    [
        "MAX_CHANGE_RATE_PER_STEP_SETPOINT",
        "MAX_SEQUENCE_LENGTH",
        "SetPoint_MIN",
        "SetPoint_MAX",
        "SETPOINT_STEP_SIZE",
    ],
)
def test_missing_key(key):
    with pytest.raises(ConfigError, match=key):
        config_from_properties(_props(**{key: None}))


@pytest.mark.parametrize(
    "overrides",
    [
        {"MAX_CHANGE_RATE_PER_STEP_SETPOINT": "fast"},
        {"MAX_SEQUENCE_LENGTH": "5.0"},
        {"MAX_SEQUENCE_LENGTH": "1"},
        {"MAX_CHANGE_RATE_PER_STEP_SETPOINT": "0"},
        {"SetPoint_MIN": "60", "SetPoint_MAX": "40"},
        {"SETPOINT_STEP_SIZE": "nan"},
        {"STATIONARY_SETPOINT": "half"},
    ],
)
def test_malformed_values(overrides):
    with pytest.raises(ConfigError):
        config_from_properties(_props(**overrides))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "nope.properties")


def test_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError):
        load_config(path)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        SetPointConfig(stationary=True).validate()
    with pytest.raises(ValueError):
        SetPointConfig(stationary_value=10.0).validate()


def test_whitespace_separated_property(tmp_path):
    path = tmp_path / "sim.properties"
    path.write_text(PROPERTIES.replace("SetPoint_MIN: 0", "SetPoint_MIN   5"))
    assert load_config(path).min_setpoint == 5.0


def test_repeated_property_keeps_last_value(tmp_path):
    path = tmp_path / "sim.properties"
    path.write_text(PROPERTIES + "SetPoint_MIN = 5\nSetPoint_MIN = 7\n")
    assert load_config(path).min_setpoint == 7.0


def test_continued_property_line(tmp_path):
    path = tmp_path / "sim.properties"
    path.write_text(PROPERTIES.replace("SETPOINT_STEP_SIZE = 1", "SETPOINT_STEP_SIZE = 0.\\\n    25"))
    assert load_config(path).step_size == 0.25


def test_properties_to_ini_separators():
    text = "# comment\na=1\nb: 2\nc 3\nd\n  e = x y\n"
    assert properties_to_ini(text) == "[setpoint]\na = 1\nb = 2\nc = 3\nd = \ne = x y\n"
