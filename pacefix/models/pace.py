"""Pace and speed conversions plus display helpers."""

import re
from enum import Enum
from typing import Optional

from pacefix.config import METERS_PER_KILOMETER, METERS_PER_MILE
from pacefix.errors import InvalidFormatError

PACE_PATTERN = re.compile(r"^(\d{1,2}):([0-5]\d)$")


class DistanceUnit(float, Enum):
    """Distance a pace is expressed against, in meters."""
    KILOMETER = METERS_PER_KILOMETER
    MILE = METERS_PER_MILE

    @property
    def label(self) -> str:
        return "km" if self is DistanceUnit.KILOMETER else "mile"

    @classmethod
    def parse(cls, value) -> "DistanceUnit":
        """Resolve ``km``/``mi``/``mile`` (or an existing unit)."""
        if isinstance(value, DistanceUnit):
            return value
        name = str(value).strip().lower()
        if name in ("km", "kilometer", "kilometre"):
            return cls.KILOMETER
        if name in ("mi", "mile", "miles"):
            return cls.MILE
        raise InvalidFormatError(f"Unknown distance unit: {value!r}")


def parse_pace_seconds(pace: str) -> int:
    """Total seconds of an ``MM:SS`` pace string."""
    match = PACE_PATTERN.match(pace.strip()) if isinstance(pace, str) else None
    if not match:
        raise InvalidFormatError(f"Pace must be in format MM:SS, got {pace!r}")
    minutes, seconds = int(match.group(1)), int(match.group(2))
    return minutes * 60 + seconds


def pace_to_speed(pace: str, unit_meters: float = METERS_PER_KILOMETER) -> float:
    """Convert an ``MM:SS`` pace per distance unit to meters/second.

    Args:
        pace: Pace string, e.g. ``"5:00"``
        unit_meters: Length of the distance unit in meters

    Returns:
        Speed in m/s
    """
    total_seconds = parse_pace_seconds(pace)
    if total_seconds == 0:
        raise InvalidFormatError("Pace of 0:00 has no corresponding speed")
    return float(unit_meters) / total_seconds


def speed_to_pace(speed: float, unit_meters: float = METERS_PER_KILOMETER) -> Optional[str]:
    """Convert meters/second to an ``MM:SS`` pace, or ``None`` when not moving."""
    if speed is None or speed <= 0:
        return None
    total_seconds = int(round(float(unit_meters) / speed))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def pace_minutes_per_km(distance: Optional[float], time: Optional[float]) -> float:
    """Average pace in decimal minutes per kilometer."""
    if not distance or not time:
        return 0.0
    return time / 60 / (distance / METERS_PER_KILOMETER)


def format_distance(meters: Optional[float]) -> str:
    if not meters:
        return "0.00 km"
    return f"{meters / METERS_PER_KILOMETER:.2f} km"


def format_duration(seconds: Optional[float]) -> str:
    if not seconds:
        return "0:00"
    minutes = int(seconds // 60)
    remaining = int(seconds % 60)
    return f"{minutes}:{remaining:02d}"


def format_pace(pace_minutes: Optional[float]) -> str:
    """Format decimal minutes (e.g. 5.5) as ``M:SS``."""
    if not pace_minutes:
        return "0:00"
    minutes = int(pace_minutes)
    seconds = int((pace_minutes - minutes) * 60)
    return f"{minutes}:{seconds:02d}"
