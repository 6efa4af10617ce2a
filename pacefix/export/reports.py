"""Workout summaries of decoded activities."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import polars as pl

from pacefix.models.fit_data import DecodedActivity
from pacefix.models.pace import (
    format_distance, format_duration, format_pace, pace_minutes_per_km,
)

logger = logging.getLogger(__name__)


class WorkoutReport:
    """Summary of one activity: type, start, totals and per-lap pace."""

    def __init__(self, decoded: DecodedActivity):
        """Initialize report.

        Args:
            decoded: Decoded activity to summarize
        """
        self.decoded = decoded

    @property
    def activity_type(self) -> str:
        file_id = self.decoded.file_id
        return str(file_id.type) if file_id and file_id.type is not None else "Unknown"

    @property
    def start_time(self) -> Optional[datetime]:
        file_id = self.decoded.file_id
        return file_id.time_created if file_id else None

    @property
    def total_distance(self) -> float:
        session = self.decoded.session
        return (session.total_distance or 0.0) if session else 0.0

    @property
    def total_time(self) -> float:
        session = self.decoded.session
        if not session:
            return 0.0
        return session.total_elapsed_time or session.total_timer_time or 0.0

    def lap_rows(self) -> List[Dict[str, Any]]:
        """One row per recorded lap: distance (m), time (s), pace (min/km)."""
        rows = []
        for index, lap in enumerate(self.decoded.laps):
            distance = lap.total_distance or 0.0
            time = lap.total_elapsed_time or lap.total_timer_time or 0.0
            rows.append({
                "lap": index + 1,
                "distance": distance,
                "time": time,
                "avg_pace": pace_minutes_per_km(distance, time),
            })
        return rows

    def summary(self) -> Dict[str, Any]:
        return {
            "activity_type": self.activity_type,
            "start_time": self.start_time,
            "total_distance": self.total_distance,
            "total_time": self.total_time,
            "laps": self.lap_rows(),
        }

    def laps_dataframe(self) -> pl.DataFrame:
        """Lap rows as a DataFrame (empty with the expected columns when no laps)."""
        rows = self.lap_rows()
        if not rows:
            return pl.DataFrame(schema={
                "lap": pl.Int64,
                "distance": pl.Float64,
                "time": pl.Float64,
                "avg_pace": pl.Float64,
            })
        return pl.DataFrame(rows)

    def export_laps_csv(self, output_path: Union[str, Path]) -> Path:
        """Write lap rows to CSV.

        Args:
            output_path: Destination CSV path

        Returns:
            Path to exported file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.laps_dataframe().write_csv(output_path)
        logger.info(f"Lap summary exported to {output_path}")
        return output_path

    def format_lines(self) -> List[str]:
        """Human readable summary for the terminal."""
        start = self.start_time
        lines = [
            f"Activity type: {self.activity_type}",
            f"Start time:    {start.isoformat() if start else 'Unknown'}",
            f"Distance:      {format_distance(self.total_distance)}",
            f"Duration:      {format_duration(self.total_time)}",
            f"Laps:          {len(self.decoded.laps)}",
        ]
        for row in self.lap_rows():
            lines.append(
                f"  Lap {row['lap']:>2}: {format_distance(row['distance']):>10}"
                f"  {format_duration(row['time']):>7}"
                f"  {format_pace(row['avg_pace'])} /km"
            )
        return lines
