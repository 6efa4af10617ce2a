"""Whole-activity totals recomputed after resampling."""

import logging
from typing import Optional, Sequence

from pacefix.errors import DegenerateActivityError
from pacefix.models.fit_data import FITLapData, FITRecordData, FITSessionData

logger = logging.getLogger(__name__)


class SessionAggregator:
    """Builds the single output session.

    Timer time is never altered; distance and speeds follow the resampled
    records and the output laps.
    """

    def aggregate(
        self,
        session: Optional[FITSessionData],
        records: Sequence[FITRecordData],
        laps: Sequence[FITLapData],
    ) -> FITSessionData:
        """Recompute session totals.

        Args:
            session: Session recorded in the input, if any
            records: Resampled records
            laps: Output laps

        Returns:
            Updated session model
        """
        if session is None:
            session = self._session_from_records(records)

        timer_time = session.total_timer_time or 0.0
        if timer_time <= 0:
            raise DegenerateActivityError(
                "Session total timer time is zero; average speed is undefined"
            )

        total_distance = (records[-1].distance or 0.0) if records else 0.0
        max_speed = max((lap.max_speed or 0.0 for lap in laps), default=0.0)
        avg_speed = total_distance / timer_time

        update = {
            "total_distance": total_distance,
            "avg_speed": avg_speed,
            "max_speed": max_speed,
            "enhanced_avg_speed": avg_speed,
            "enhanced_max_speed": max_speed,
            "num_laps": len(laps),
        }

        logger.info(
            f"Session: {total_distance:.1f} m in {timer_time:.0f} s "
            f"(avg {avg_speed:.3f} m/s, max {max_speed:.3f} m/s)"
        )
        return session.model_copy(update=update)

    def _session_from_records(self, records: Sequence[FITRecordData]) -> FITSessionData:
        """Session spanning the records, for files recorded without one."""
        if not records:
            raise DegenerateActivityError("Activity has neither a session nor records")

        logger.warning("No session message in input; deriving one from records")
        elapsed = (records[-1].timestamp - records[0].timestamp).total_seconds()
        return FITSessionData(
            timestamp=records[-1].timestamp,
            start_time=records[0].timestamp,
            total_elapsed_time=elapsed,
            total_timer_time=elapsed,
        )
