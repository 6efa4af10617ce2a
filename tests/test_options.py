"""Tests for transformation option validation."""

import pytest
from pydantic import ValidationError

from pacefix.errors import InvalidConfigurationError
from pacefix.models.options import LapMode, TransformOptions


@pytest.mark.parametrize("raw", [
    {},
    {"speed": 3.0, "speeds": [3.0]},
    {"speeds": [3.0, 4.0], "keep_laps": True},
    {"speeds": [3.0, 4.0], "keepLaps": True},
    {"speeds": [3.0], "autolap": True},
    {"speed": 3.0, "autolap": True, "keep_laps": True},
    {"speed": 0},
    {"speed": -2.5},
    {"speed": "3.5"},
    {"speed": True},
    {"speeds": 3.0},
    {"speeds": [3.0, -1.0]},
    {"speed": float("nan")},
    {"speed": float("inf")},
    {"speeds": [float("nan"), 3.0]},
    {"speeds": [3.0, float("inf")]},
    {"speed": 3.0, "auto_lap_distance": float("inf")},
    {"speed": 3.0, "auto_lap_distance": 0},
    {"speed": 3.0, "colour": "red"},
])
def test_invalid_configuration(raw):
    """Missing, contradictory or mistyped options are rejected."""
    with pytest.raises(InvalidConfigurationError):
        TransformOptions.from_options(raw)


def test_neither_speed_nor_speeds_message():
    with pytest.raises(InvalidConfigurationError, match="either a speed or speeds"):
        TransformOptions.from_options({"autolap": True})


def test_lap_modes():
    assert TransformOptions(speed=3.0).lap_mode == LapMode.OMIT
    assert TransformOptions(speed=3.0, keep_laps=True).lap_mode == LapMode.PASSTHROUGH
    assert TransformOptions(speed=3.0, autolap=True).lap_mode == LapMode.AUTO
    assert TransformOptions(speeds=[3.0, 4.0]).lap_mode == LapMode.PER_LAP


def test_camel_case_option_names():
    options = TransformOptions.from_options({"speed": 3.0, "keepLaps": True, "autoLapDistance": 400})
    assert options.keep_laps is True
    assert options.auto_lap_distance == 400


def test_defaults():
    options = TransformOptions.from_options({"speed": 3})
    assert options.speed == 3.0
    assert options.autolap is False
    assert options.keep_laps is False
    assert options.auto_lap_distance == 1000


def test_zero_speed_allowed_per_lap():
    """Rest laps may be given a speed of zero."""
    options = TransformOptions.from_options({"speeds": [3.0, 0, 3.0]})
    assert options.speed_for_lap(1) == 0


def test_from_options_passes_instances_through():
    options = TransformOptions(speed=3.0)
    assert TransformOptions.from_options(options) is options


def test_options_are_frozen():
    options = TransformOptions(speed=3.0)
    with pytest.raises(ValidationError):
        options.speed = 4.0


def test_non_finite_speed_message():
    with pytest.raises(InvalidConfigurationError, match="finite"):
        TransformOptions.from_options({"speeds": [float("nan"), 3.0]})
