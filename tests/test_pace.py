"""Tests for pace/speed conversion."""

import pytest

from pacefix.errors import InvalidFormatError
from pacefix.models.pace import (
    DistanceUnit, format_distance, format_duration, format_pace,
    pace_minutes_per_km, pace_to_speed, parse_pace_seconds, speed_to_pace,
)


def test_pace_to_speed_per_kilometer():
    """5:00/km is 1000 m in 300 s."""
    assert pace_to_speed("5:00") == pytest.approx(1000 / 300)
    assert pace_to_speed("05:00", 1000) == pytest.approx(1000 / 300)


def test_pace_to_speed_per_mile():
    """8:00/mile uses 1609.34 m."""
    assert pace_to_speed("8:00", DistanceUnit.MILE) == pytest.approx(1609.34 / 480)


@pytest.mark.parametrize("pace", ["5:60", "abc", "5", "123:00", "5:0", "", "-5:00", "5:00:00"])
def test_pace_to_speed_rejects_malformed(pace):
    """Anything but M:SS / MM:SS with seconds 00-59 is rejected."""
    with pytest.raises(InvalidFormatError):
        pace_to_speed(pace)


def test_zero_pace_rejected():
    with pytest.raises(InvalidFormatError):
        pace_to_speed("0:00")


def test_invalid_format_is_value_error():
    """Callers catching ValueError also see pace errors."""
    with pytest.raises(ValueError):
        parse_pace_seconds("four minutes")


@pytest.mark.parametrize("speed", [0, 0.0, -1.5, None])
def test_speed_to_pace_undefined_when_not_moving(speed):
    assert speed_to_pace(speed) is None


def test_speed_to_pace_formats_minutes_and_seconds():
    assert speed_to_pace(1000 / 300) == "05:00"
    assert speed_to_pace(1000 / 285) == "04:45"
    assert speed_to_pace(1609.34 / 480, DistanceUnit.MILE) == "08:00"


@pytest.mark.parametrize("unit", [DistanceUnit.KILOMETER, DistanceUnit.MILE, 400.0])
@pytest.mark.parametrize("pace", ["3:30", "4:45", "5:00", "6:15", "9:59", "12:07"])
def test_round_trip_within_one_second(pace, unit):
    """Converting to speed and back lands within a second of the input pace."""
    back = speed_to_pace(pace_to_speed(pace, unit), unit)
    assert abs(parse_pace_seconds(back) - parse_pace_seconds(pace)) <= 1


def test_distance_unit_parse():
    assert DistanceUnit.parse("km") is DistanceUnit.KILOMETER
    assert DistanceUnit.parse("MI") is DistanceUnit.MILE
    assert DistanceUnit.parse(DistanceUnit.MILE) is DistanceUnit.MILE
    assert DistanceUnit.MILE.label == "mile"
    with pytest.raises(InvalidFormatError):
        DistanceUnit.parse("furlong")


def test_display_helpers():
    assert format_distance(12346) == "12.35 km"
    assert format_distance(None) == "0.00 km"
    assert format_duration(3725) == "62:05"
    assert format_duration(0) == "0:00"
    assert format_pace(5.5) == "5:30"
    assert format_pace(0) == "0:00"
    assert pace_minutes_per_km(1000, 300) == pytest.approx(5.0)
    assert pace_minutes_per_km(0, 300) == 0.0
