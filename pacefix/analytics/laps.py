"""Lap reconciliation: pass through, override per lap, or synthesize auto-laps."""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from pacefix.errors import LengthMismatchError
from pacefix.models.fit_data import FITLapData, FITRecordData, LapTrigger
from pacefix.models.options import LapMode, TransformOptions

logger = logging.getLogger(__name__)


def _round2(value: float) -> float:
    """Round half up to two decimals."""
    return math.floor(value * 100 + 0.5) / 100


@dataclass
class LapAccumulator:
    """Running statistics of the lap being built.

    A fresh accumulator is started at every lap boundary; the record that
    closes a lap counts toward that lap only.
    """
    start_time: datetime
    start_distance: float
    start_position_lat: Optional[float] = None
    start_position_long: Optional[float] = None
    sample_count: int = 0
    max_speed: float = 0.0
    heart_rate_sum: int = 0
    heart_rate_count: int = 0
    min_heart_rate: Optional[int] = None
    max_heart_rate: int = 0
    cadence_sum: int = 0
    cadence_count: int = 0
    min_cadence: Optional[int] = None
    max_cadence: int = 0

    @classmethod
    def starting_at(cls, record: FITRecordData) -> "LapAccumulator":
        return cls(
            start_time=record.timestamp,
            start_distance=record.distance or 0.0,
            start_position_lat=record.position_lat,
            start_position_long=record.position_long,
        )

    def add(self, record: FITRecordData) -> None:
        self.sample_count += 1

        speed = max(record.speed or 0.0, record.enhanced_speed or 0.0)
        if speed > self.max_speed:
            self.max_speed = speed

        # zero readings mean the sensor had no value
        if record.heart_rate:
            self.heart_rate_sum += record.heart_rate
            self.heart_rate_count += 1
            self.max_heart_rate = max(self.max_heart_rate, record.heart_rate)
            if self.min_heart_rate is None or record.heart_rate < self.min_heart_rate:
                self.min_heart_rate = record.heart_rate

        if record.cadence:
            self.cadence_sum += record.cadence
            self.cadence_count += 1
            self.max_cadence = max(self.max_cadence, record.cadence)
            if self.min_cadence is None or record.cadence < self.min_cadence:
                self.min_cadence = record.cadence

    def distance_to(self, record: FITRecordData) -> float:
        return (record.distance or 0.0) - self.start_distance

    def close(self, record: FITRecordData, message_index: int) -> FITLapData:
        """Build the lap summary ending at ``record``."""
        distance = self.distance_to(record)
        elapsed = (record.timestamp - self.start_time).total_seconds()
        avg_speed = distance / elapsed if elapsed > 0 else 0.0

        return FITLapData(
            timestamp=record.timestamp,
            start_time=self.start_time,
            lap_trigger=LapTrigger.DISTANCE,
            total_elapsed_time=elapsed,
            total_timer_time=elapsed,
            total_distance=distance,
            avg_speed=avg_speed,
            max_speed=self.max_speed,
            enhanced_avg_speed=avg_speed,
            enhanced_max_speed=self.max_speed,
            min_heart_rate=self.min_heart_rate,
            avg_heart_rate=(self.heart_rate_sum / self.heart_rate_count
                            if self.heart_rate_count > 0 else 0),
            max_heart_rate=self.max_heart_rate,
            min_cadence=self.min_cadence,
            avg_cadence=(self.cadence_sum / self.cadence_count
                         if self.cadence_count > 0 else 0),
            max_cadence=self.max_cadence,
            start_position_lat=self.start_position_lat,
            start_position_long=self.start_position_long,
            end_position_lat=record.position_lat,
            end_position_long=record.position_long,
            message_index=message_index,
        )


class LapReconciler:
    """Produces the output laps for the configured lap mode."""

    def __init__(self, options: TransformOptions):
        self.options = options

    @property
    def mode(self) -> LapMode:
        return self.options.lap_mode

    def reconcile(self, laps: Sequence[FITLapData], records: Sequence[FITRecordData]) -> List[FITLapData]:
        """Build output laps.

        Args:
            laps: Laps recorded in the input file
            records: Resampled records

        Returns:
            Output laps, possibly empty
        """
        mode = self.mode

        if mode == LapMode.PASSTHROUGH:
            result = list(laps)
        elif mode == LapMode.PER_LAP:
            result = self.override_laps(laps)
        elif mode == LapMode.AUTO:
            result = self.auto_laps(records)
        else:
            result = []

        logger.info(f"Lap mode '{mode.value}': {len(result)} laps")
        return result

    def override_laps(self, laps: Sequence[FITLapData]) -> List[FITLapData]:
        """Apply per-lap speeds to recorded laps, keeping their timing."""
        speeds = self.options.speeds or []
        if len(speeds) != len(laps):
            raise LengthMismatchError(len(speeds), len(laps))

        overridden = []
        for lap, speed in zip(laps, speeds):
            overridden.append(lap.model_copy(update={
                "avg_speed": speed,
                "max_speed": speed,
                "enhanced_avg_speed": speed,
                "enhanced_max_speed": speed,
                "total_distance": speed * (lap.total_timer_time or 0.0),
            }))
        return overridden

    def auto_laps(self, records: Sequence[FITRecordData]) -> List[FITLapData]:
        """Split resampled records into laps of ``auto_lap_distance`` meters.

        The trailing lap is always emitted, even when shorter than the
        threshold, unless the final record itself closed a lap.
        """
        if not records:
            return []

        threshold = self.options.auto_lap_distance
        laps: List[FITLapData] = []
        current = LapAccumulator.starting_at(records[0])

        for record in records:
            current.add(record)
            if _round2(current.distance_to(record)) >= threshold:
                lap = current.close(record, len(laps))
                logger.debug(
                    f"Auto-lap {len(laps)} closed at {record.timestamp.isoformat()} "
                    f"({lap.total_distance:.1f} m)"
                )
                laps.append(lap)
                current = LapAccumulator.starting_at(record)

        if current.sample_count > 0:
            laps.append(current.close(records[-1], len(laps)))

        return laps
