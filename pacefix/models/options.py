"""Options accepted by the pace transformation."""

import math
from enum import Enum
from typing import Any, List, Mapping, Optional, Union

from pydantic import (
    AliasChoices, BaseModel, ConfigDict, Field, ValidationError,
    field_validator, model_validator,
)

from pacefix.config import AUTO_LAP_DISTANCE
from pacefix.errors import InvalidConfigurationError


class LapMode(str, Enum):
    """How laps are produced for the output file."""
    PASSTHROUGH = "passthrough"  # keep recorded laps untouched
    PER_LAP = "per_lap"  # recorded laps, speeds overridden per lap
    AUTO = "auto"  # new laps every auto_lap_distance meters
    OMIT = "omit"  # no laps at all


def _reject_non_numbers(v):
    # bools and numeric strings are not speeds
    if isinstance(v, (bool, str)):
        raise ValueError("must be a number")
    return v


class TransformOptions(BaseModel):
    """Validated options for one transformation.

    Exactly one of ``speed`` (uniform, m/s) or ``speeds`` (one per recorded
    lap, m/s) must be given.
    """
    model_config = ConfigDict(extra='forbid', frozen=True, populate_by_name=True)

    speed: Optional[float] = None
    speeds: Optional[List[float]] = None
    autolap: bool = False
    keep_laps: bool = Field(False, validation_alias=AliasChoices('keep_laps', 'keepLaps'))
    auto_lap_distance: float = Field(
        AUTO_LAP_DISTANCE,
        gt=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices('auto_lap_distance', 'autoLapDistance'),
    )

    @field_validator('speed', mode='before')
    @classmethod
    def check_speed_type(cls, v):
        if v is None:
            return v
        return _reject_non_numbers(v)

    @field_validator('speeds', mode='before')
    @classmethod
    def check_speeds_type(cls, v):
        if v is None:
            return v
        if not isinstance(v, (list, tuple)):
            raise ValueError("speeds must be a list")
        return [_reject_non_numbers(s) for s in v]

    @model_validator(mode='after')
    def check_combination(self):
        if self.speed is None and self.speeds is None:
            raise ValueError("Please supply either a speed or speeds")
        if self.speed is not None and self.speeds is not None:
            raise ValueError("Supply only one of speed or speeds")
        if self.speed is not None and (not math.isfinite(self.speed) or self.speed <= 0):
            raise ValueError("speed must be a positive number")
        if self.speeds is not None:
            if any(not math.isfinite(s) for s in self.speeds):
                raise ValueError("speeds must be finite numbers")
            if any(s < 0 for s in self.speeds):
                raise ValueError("speeds must not be negative")
            if self.keep_laps:
                raise ValueError("keepLaps must be false when speeds are supplied")
            if self.autolap:
                raise ValueError("autolap requires a single speed, not speeds")
        if self.autolap and self.keep_laps:
            raise ValueError("autolap and keepLaps cannot be combined")
        return self

    @classmethod
    def from_options(cls, options: Union["TransformOptions", Mapping[str, Any]]) -> "TransformOptions":
        """Build options from raw values, raising InvalidConfigurationError."""
        if isinstance(options, TransformOptions):
            return options
        try:
            return cls.model_validate(dict(options or {}))
        except ValidationError as e:
            messages = "; ".join(_error_message(err) for err in e.errors())
            raise InvalidConfigurationError(messages) from e

    @property
    def lap_mode(self) -> LapMode:
        if self.keep_laps:
            return LapMode.PASSTHROUGH
        if self.speeds is not None:
            return LapMode.PER_LAP
        if self.autolap:
            return LapMode.AUTO
        return LapMode.OMIT

    def speed_for_lap(self, index: int) -> float:
        """Speed applying to recorded lap ``index``."""
        if self.speeds is not None:
            return self.speeds[index]
        return self.speed


def _error_message(err: dict) -> str:
    location = ".".join(str(part) for part in err.get("loc", ()))
    message = err.get("msg", "invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{location}: {message}" if location else message
