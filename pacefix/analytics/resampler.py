"""Rewrite record distance and speed for a new speed assignment."""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from pacefix.errors import InvalidConfigurationError, LengthMismatchError
from pacefix.models.fit_data import FITRecordData, LapWindow
from pacefix.models.options import TransformOptions

logger = logging.getLogger(__name__)


class RecordResampler:
    """Integrates a speed assignment over the record timeline.

    Only distance, speed and enhanced speed change; heart rate, cadence,
    position and timestamps are carried over as recorded.
    """

    def __init__(self, options: TransformOptions, lap_windows: Optional[Sequence[LapWindow]] = None):
        """Initialize resampler.

        Args:
            options: Validated transformation options
            lap_windows: Recorded lap time ranges, required for per-lap speeds
        """
        self.options = options
        self.lap_windows = list(lap_windows or [])

        if options.speeds is not None and len(options.speeds) != len(self.lap_windows):
            raise LengthMismatchError(len(options.speeds), len(self.lap_windows))

    def resample(self, records: Sequence[FITRecordData]) -> List[FITRecordData]:
        """Resample records in timestamp order.

        The first record keeps its recorded distance (0 when absent); each
        following record adds ``elapsed * speed`` to the previous one.

        Args:
            records: Records sorted by timestamp

        Returns:
            New record models; the input is not modified
        """
        if not records:
            logger.info("No records to resample")
            return []

        if self.options.speeds is not None and not self.options.speeds:
            raise InvalidConfigurationError("speeds is empty but the activity has records")

        resampled: List[FITRecordData] = []
        lap_index = 0
        previous_time: Optional[datetime] = None
        distance = records[0].distance or 0.0

        for record in records:
            lap_index = self._advance_lap(lap_index, record.timestamp)
            speed = self.options.speed_for_lap(lap_index)

            if previous_time is not None:
                elapsed = (record.timestamp - previous_time).total_seconds()
                distance += max(elapsed, 0.0) * speed

            resampled.append(record.model_copy(update={
                "distance": distance,
                "speed": speed,
                "enhanced_speed": speed,
            }))
            previous_time = record.timestamp

        logger.info(
            f"Resampled {len(resampled)} records, final distance {distance:.1f} m"
        )
        return resampled

    def _advance_lap(self, lap_index: int, timestamp: datetime) -> int:
        """Move the lap cursor forward past every boundary at or before ``timestamp``."""
        if self.options.speeds is None:
            return lap_index
        while (lap_index + 1 < len(self.lap_windows)
               and timestamp >= self.lap_windows[lap_index + 1].start_time):
            lap_index += 1
        return lap_index
