"""Command-line interface for the pace fixer."""

import sys
import argparse
import logging

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog='pacefix',
        description='Pace Fixer - Change the pace of a recorded FIT activity, keeping heart rate, cadence and timing',
        epilog='For more information on a specific command, run: pacefix <command> --help'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show debug logging'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands',
        metavar='<command>'
    )

    # Inspect command
    inspect_parser = subparsers.add_parser(
        'inspect',
        help='Show a summary of a FIT activity',
        description='Print activity type, start time, totals and per-lap pace'
    )
    inspect_parser.add_argument(
        'file',
        help='FIT file to inspect'
    )
    inspect_parser.add_argument(
        '--csv',
        help='Also export the lap summary to this CSV file'
    )

    # Fix command
    fix_parser = subparsers.add_parser(
        'fix',
        help='Write a copy of a FIT activity at a new pace',
        description='Resample distance and speed to a target pace and rebuild laps and session totals'
    )
    fix_parser.add_argument(
        'file',
        help='FIT file to adjust'
    )
    pace_group = fix_parser.add_mutually_exclusive_group(required=True)
    pace_group.add_argument(
        '--pace',
        help='Target pace for the whole activity (MM:SS per unit)'
    )
    pace_group.add_argument(
        '--lap-paces',
        nargs='+',
        metavar='MM:SS',
        help='Target pace for each recorded lap, in order'
    )
    fix_parser.add_argument(
        '--unit',
        choices=['km', 'mile'],
        default=None,
        help='Distance unit paces are given in (default: km, or PACEFIX_DEFAULT_UNIT)'
    )
    fix_parser.add_argument(
        '--autolap',
        action='store_true',
        help='Replace laps with new ones every --auto-lap-distance meters (requires --pace)'
    )
    fix_parser.add_argument(
        '--keep-laps',
        action='store_true',
        help='Keep the recorded laps unchanged (requires --pace)'
    )
    fix_parser.add_argument(
        '--auto-lap-distance',
        type=float,
        help='Auto-lap distance in meters (default: 1000, or PACEFIX_AUTO_LAP_DISTANCE)'
    )
    fix_parser.add_argument(
        '--output',
        help='Output file path (default: <input>_adjusted.fit)'
    )

    return parser


def main(argv=None):
    """Main CLI entry point."""
    from pacefix.config import LOG_FORMAT, LOG_LEVEL
    from pacefix.errors import PaceFixError

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format=LOG_FORMAT
    )
    logger = logging.getLogger("pacefix")

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == 'inspect':
            cmd_inspect(args)
        elif args.command == 'fix':
            cmd_fix(args)
    except (PaceFixError, FileNotFoundError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def cmd_inspect(args):
    """Handle inspect command."""
    from pacefix.integrations.fit_parser import FITParser
    from pacefix.export.reports import WorkoutReport

    decoded = FITParser().parse_fit_file(args.file)
    report = WorkoutReport(decoded)

    print("=" * 40)
    print("WORKOUT SUMMARY")
    print("=" * 40)
    for line in report.format_lines():
        print(line)

    if args.csv:
        path = report.export_laps_csv(args.csv)
        print(f"\nLap summary exported to {path}")


def cmd_fix(args):
    """Handle fix command."""
    from pacefix.config import DEFAULT_DISTANCE_UNIT
    from pacefix.data.pipeline import build_options, fix_fit_file
    from pacefix.models.pace import format_distance, speed_to_pace, DistanceUnit

    unit = DistanceUnit.parse(args.unit or DEFAULT_DISTANCE_UNIT)
    options = build_options(
        pace=args.pace,
        lap_paces=args.lap_paces,
        unit=unit,
        autolap=args.autolap,
        keep_laps=args.keep_laps,
        auto_lap_distance=args.auto_lap_distance,
    )

    result = fix_fit_file(args.file, options, output_path=args.output)

    session = result.session
    avg_pace = speed_to_pace(session.avg_speed or 0.0, unit.value) or "--:--"

    print("\n" + "=" * 40)
    print("PACE ADJUSTED")
    print("=" * 40)
    print(f"Output:        {result.output_path}")
    print(f"Lap mode:      {result.lap_mode}")
    print(f"Laps:          {len(result.laps)}")
    print(f"Distance:      {format_distance(result.total_distance)}")
    print(f"Average pace:  {avg_pace} /{unit.label}")


if __name__ == "__main__":
    sys.exit(main())
