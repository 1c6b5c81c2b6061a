"""CLI entry point: jpl-ephemeris info|jd|calendar|position subcommands."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import NoReturn

from dotenv import find_dotenv, load_dotenv

from jpl_ephemeris.config import get_header_path, get_initial_data_path, resolve_paths
from jpl_ephemeris.descriptor import EphemerisDescriptor
from jpl_ephemeris.errors import JplEphemerisError
from jpl_ephemeris.time_utils import (
    JulianDate,
    calendar_to_julian,
    parse_calendar,
    parse_julian,
)

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI (stderr, level from --verbose or JPL_EPHEMERIS_LOG)."""
    level = logging.DEBUG if verbose else logging.WARNING
    env_level = os.environ.get('JPL_EPHEMERIS_LOG', '').upper()
    if env_level in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )


def _load_descriptor(args: argparse.Namespace) -> EphemerisDescriptor:
    """Load from --initial-data/--header if given, else config.toml/environment."""
    strict = not args.lenient
    if args.initial_data or args.header:
        return EphemerisDescriptor.load(
            args.initial_data or get_initial_data_path(),
            args.header or get_header_path(),
            strict=strict,
        )
    paths = resolve_paths(args.config)
    return EphemerisDescriptor.load(paths.initial_data, paths.header, strict=strict)


def _info_cmd(args: argparse.Namespace) -> int:
    """Print metadata and the body roster (info subcommand)."""
    descriptor = _load_descriptor(args)
    meta = descriptor.metadata()
    print(f'Date range:             {meta.start_year} - {meta.end_year}')
    print(f'Julian date range:      {meta.julian_start:.2f} - {meta.julian_end:.2f}')
    print(f'Interval:               {meta.interval_days} days')
    print(f'Earth-Moon mass ratio:  {meta.earth_moon_ratio:.6f}')
    print(f'Coefficients/record:    {meta.coefficient_count}')
    print('Bodies:')
    for body in descriptor.bodies():
        status = 'active' if body.active else 'inactive'
        start, ncoeff, nsub = body.pointer
        print(
            f'  {body.name:<12} {status:<8} start={start:<5} ncoeff={ncoeff:<3} '
            f'nsub={nsub:<3} block={body.block_length}'
        )
    return 0


def _jd_cmd(args: argparse.Namespace) -> int:
    """Print the Julian date of a calendar date (jd subcommand)."""
    if args.ymd:
        fields = list(args.ymd)
        if len(fields) < 3 or len(fields) > 6:
            print('Error: --ymd takes Y M D [H [M [S]]]', file=sys.stderr)
            return 1
        year, month, day = (int(v) for v in fields[:3])
        hour = int(fields[3]) if len(fields) > 3 else 0
        minute = int(fields[4]) if len(fields) > 4 else 0
        second = float(fields[5]) if len(fields) > 5 else 0.0
        jd = calendar_to_julian(year, month, day, hour, minute, second)
    else:
        if not args.date:
            print('Error: give a date string or --ymd', file=sys.stderr)
            return 1
        cal = parse_calendar(' '.join(args.date))
        if cal is None:
            print(f'Error: cannot parse date {" ".join(args.date)!r}', file=sys.stderr)
            return 1
        jd = cal.to_julian()
    print(f'{jd.jd:.6f}')
    return 0


def _calendar_cmd(args: argparse.Namespace) -> int:
    """Print the calendar date of a Julian date (calendar subcommand)."""
    cal = JulianDate(args.jd).to_calendar()
    print(cal)
    return 0


def _position_cmd(args: argparse.Namespace) -> int:
    """Run a position query (position subcommand)."""
    when = parse_julian(' '.join(args.when))
    if when is None:
        print(f'Error: cannot parse time {" ".join(args.when)!r}', file=sys.stderr)
        return 1
    descriptor = _load_descriptor(args)
    pos = descriptor.position(args.body, when)
    print(
        f'{args.body}: ({pos.x:12.6f}, {pos.y:12.6f}, {pos.z:12.6f}) AU, '
        f'distance {pos.distance():.6f} AU'
    )
    return 0


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--config', type=str, default=None, help='config.toml with a [paths] table')
    parser.add_argument(
        '--initial-data', type=str, default=None, help='Initial_data.dat; env: INITIAL_DATA_DAT'
    )
    parser.add_argument('--header', type=str, default=None, help='ASCII header; env: HEADER_441')
    parser.add_argument(
        '--lenient',
        action='store_true',
        help='Log malformed records and default them to zero instead of failing',
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for jpl-ephemeris CLI (info | jd | calendar | position).

    Returns:
        Exit code 0 on success, 1 on failure.
    """
    parser = argparse.ArgumentParser(
        prog='jpl-ephemeris',
        description='JPL DE ephemeris descriptor inspection and Julian date conversion.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    info_parser = subparsers.add_parser('info', help='Show ephemeris metadata and bodies')
    _add_source_args(info_parser)

    jd_parser = subparsers.add_parser('jd', help='Calendar date to Julian date')
    jd_parser.add_argument('date', nargs='*', help='Date string, e.g. "2024-01-15 12:00"')
    jd_parser.add_argument('--ymd', nargs='+', default=None, help='Y M D [H [M [S]]]')

    cal_parser = subparsers.add_parser('calendar', help='Julian date to calendar date')
    cal_parser.add_argument('jd', type=float, help='Julian date')

    pos_parser = subparsers.add_parser('position', help='Position of a body')
    pos_parser.add_argument('body', type=str, help='Body name, e.g. Mars')
    pos_parser.add_argument('when', nargs='+', help='Julian date or date string')
    _add_source_args(pos_parser)

    args = parser.parse_args(argv)
    load_dotenv(find_dotenv(usecwd=True))
    _configure_logging(args.verbose)

    handlers = {
        'info': _info_cmd,
        'jd': _jd_cmd,
        'calendar': _calendar_cmd,
        'position': _position_cmd,
    }
    try:
        return handlers[args.command](args)
    except (JplEphemerisError, ValueError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1


def cli_main() -> NoReturn:
    """Entry point for console_scripts; calls main() and exits with its return code."""
    sys.exit(main())


if __name__ == '__main__':
    sys.exit(main())
