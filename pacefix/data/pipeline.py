"""
Pace transformation pipeline.

Coordinates record resampling, lap reconciliation, session aggregation and
message assembly, plus the file-to-file driver used by the CLI.
"""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from pacefix.analytics.laps import LapReconciler
from pacefix.analytics.resampler import RecordResampler
from pacefix.analytics.session import SessionAggregator
from pacefix.config import AUTO_LAP_DISTANCE, DEFAULT_DISTANCE_UNIT, OUTPUT_SUFFIX
from pacefix.data.assembler import MessageAssembler
from pacefix.errors import LengthMismatchError
from pacefix.integrations.fit_parser import FITParser
from pacefix.integrations.fit_writer import FITWriter
from pacefix.models.fit_data import DecodedActivity, TransformResult
from pacefix.models.options import LapMode, TransformOptions
from pacefix.models.pace import DistanceUnit, pace_to_speed

logger = logging.getLogger(__name__)


def transform(
    decoded: DecodedActivity,
    options: Union[TransformOptions, Mapping[str, Any]],
) -> TransformResult:
    """Change the pace of a decoded activity.

    Input validation happens before any output is built; on error nothing
    is returned.

    Args:
        decoded: Decoded input activity
        options: ``TransformOptions`` or raw option values

    Returns:
        Ordered messages ready for the FIT writer, with the rebuilt parts
    """
    options = TransformOptions.from_options(options)
    assembler = MessageAssembler()

    assembler.require_file_id(decoded)
    if options.speeds is not None and len(options.speeds) != len(decoded.laps):
        raise LengthMismatchError(len(options.speeds), len(decoded.laps))

    lap_windows = decoded.lap_windows() if options.lap_mode == LapMode.PER_LAP else None
    records = RecordResampler(options, lap_windows).resample(decoded.records)

    laps = LapReconciler(options).reconcile(decoded.laps, records)
    session = SessionAggregator().aggregate(decoded.session, records, laps)
    messages = assembler.assemble(decoded, records, laps, session)

    return TransformResult(
        messages=messages,
        records=records,
        laps=laps,
        session=session,
        lap_mode=options.lap_mode.value,
    )


def build_options(
    pace: Optional[str] = None,
    lap_paces: Optional[Sequence[str]] = None,
    unit: Union[str, DistanceUnit] = DEFAULT_DISTANCE_UNIT,
    autolap: bool = False,
    keep_laps: bool = False,
    auto_lap_distance: Optional[float] = None,
) -> TransformOptions:
    """Translate pace strings into transformation options.

    A single pace gives a uniform speed; per-lap paces give one speed per
    recorded lap.

    Args:
        pace: Target pace ``MM:SS`` per unit
        lap_paces: Target pace per recorded lap
        unit: ``km`` or ``mile``
        autolap: Synthesize distance laps (single pace only)
        keep_laps: Keep recorded laps untouched (single pace only)
        auto_lap_distance: Auto-lap threshold in meters

    Returns:
        Validated options
    """
    unit_meters = DistanceUnit.parse(unit).value

    raw = {
        "autolap": autolap,
        "keep_laps": keep_laps,
        "auto_lap_distance": AUTO_LAP_DISTANCE if auto_lap_distance is None else auto_lap_distance,
    }
    if pace is not None:
        raw["speed"] = pace_to_speed(pace, unit_meters)
    if lap_paces is not None:
        raw["speeds"] = [pace_to_speed(p, unit_meters) for p in lap_paces]

    return TransformOptions.from_options(raw)


def output_path_for(input_path: Union[str, Path]) -> Path:
    """Default output name: ``<stem><OUTPUT_SUFFIX>.fit`` beside the input."""
    input_path = Path(input_path)
    return input_path.with_name(f"{input_path.stem}{OUTPUT_SUFFIX}.fit")


def fix_fit_file(
    input_path: Union[str, Path],
    options: Union[TransformOptions, Mapping[str, Any]],
    output_path: Optional[Union[str, Path]] = None,
    parser: Optional[FITParser] = None,
    writer: Optional[FITWriter] = None,
) -> TransformResult:
    """Parse, transform, encode and write one FIT file.

    Nothing is written when any stage fails.

    Args:
        input_path: FIT file to adjust
        options: Transformation options
        output_path: Destination (default from ``output_path_for``)
        parser: Decoder to use
        writer: Encoder to use

    Returns:
        Transformation result with ``output_path`` set
    """
    parser = parser or FITParser()
    writer = writer or FITWriter()
    output_path = Path(output_path) if output_path else output_path_for(input_path)

    logger.info(f"Adjusting pace of {input_path}")
    decoded = parser.parse_fit_file(input_path)
    result = transform(decoded, options)

    written = writer.write(result.messages, output_path)
    return result.model_copy(update={"output_path": written})

