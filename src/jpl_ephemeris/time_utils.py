"""Calendar date <-> Julian date conversion (proleptic Gregorian, noon-based JD).

Date strings are parsed with rms-julian; the numeric conversions themselves are
exact integer arithmetic so results do not depend on leap-second tables.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass

import julian

from jpl_ephemeris.config import get_leapsecs_path
from jpl_ephemeris.constants import (
    HOURS_PER_DAY,
    MINUTES_PER_HOUR,
    SECOND_DECIMALS,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
)
from jpl_ephemeris.errors import InvalidDateError

logger = logging.getLogger(__name__)

# Leap seconds loaded once at first use.
_leapsecs_loaded = False


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (Python // floors)."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


@dataclass(frozen=True, order=True)
class JulianDate:
    """Julian day number with fractional day; .0 falls at noon."""

    jd: float

    @classmethod
    def from_calendar(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: float = 0.0,
    ) -> JulianDate:
        """Convert calendar fields to a JulianDate (see calendar_to_julian)."""
        return calendar_to_julian(year, month, day, hour, minute, second)

    def to_calendar(self) -> CalendarDate:
        """Convert to a CalendarDate (see julian_to_calendar)."""
        return julian_to_calendar(self.jd)

    def __float__(self) -> float:
        return self.jd


@dataclass(frozen=True)
class CalendarDate:
    """Calendar date and time of day; seconds may be fractional."""

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: float = 0.0

    def to_julian(self) -> JulianDate:
        """Convert to a JulianDate. Raises InvalidDateError on bad fields."""
        return calendar_to_julian(
            self.year, self.month, self.day, self.hour, self.minute, self.second
        )

    def seconds_of_day(self) -> float:
        return self.hour * SECONDS_PER_HOUR + self.minute * SECONDS_PER_MINUTE + self.second

    def __str__(self) -> str:
        return (
            f'{self.year:04d}-{self.month:02d}-{self.day:02d} '
            f'{self.hour:02d}:{self.minute:02d}:{self.second:06.3f}'
        )


def _check_fields(month: int, day: int, hour: int, minute: int, second: float) -> None:
    """Validate calendar fields against their generic bounds.

    Day is checked against 1..31 only, not the length of the given month;
    2023-02-31 is accepted and lands on 2023-03-03.
    """
    if not 1 <= month <= 12:
        raise InvalidDateError(f'Invalid month: {month}')
    if not 1 <= day <= 31:
        raise InvalidDateError(f'Invalid day: {day}')
    if not 0 <= hour <= 23:
        raise InvalidDateError(f'Invalid hour: {hour}')
    if not 0 <= minute <= 59:
        raise InvalidDateError(f'Invalid minute: {minute}')
    if not 0.0 <= second < 60.0:
        raise InvalidDateError(f'Invalid second: {second}')


def calendar_to_julian(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
) -> JulianDate:
    """Convert a proleptic Gregorian calendar date/time to a Julian date.

    Parameters:
        year: Year (astronomical numbering).
        month: 1..12.
        day: 1..31 (not checked against the month length).
        hour: 0..23.
        minute: 0..59.
        second: 0 <= second < 60, fractional allowed.

    Returns:
        JulianDate; 2000-01-01 12:00 gives 2451545.0.

    Raises:
        InvalidDateError: A field is outside its bounds.
    """
    _check_fields(month, day, hour, minute, second)
    a = _tdiv(14 - month, 12)
    y = year + 4800 - a
    m = month + 12 * a - 3
    jdn = (
        day
        + _tdiv(153 * m + 2, 5)
        + 365 * y
        + _tdiv(y, 4)
        - _tdiv(y, 100)
        + _tdiv(y, 400)
        - 32045
    )
    fraction = (hour + minute / MINUTES_PER_HOUR + second / SECONDS_PER_HOUR) / HOURS_PER_DAY
    return JulianDate(jdn + fraction - 0.5)


def julian_to_calendar(jd: JulianDate | float) -> CalendarDate:
    """Convert a Julian date to a proleptic Gregorian calendar date/time.

    Parameters:
        jd: JulianDate or plain day number.

    Returns:
        CalendarDate with fractional seconds.
    """
    value = float(jd)
    j = math.floor(value + 0.5)
    f = value + 0.5 - j

    # Snap to 0.1 ms so residue just below a minute boundary carries over.
    total_seconds = round(f * SECONDS_PER_DAY, SECOND_DECIMALS)
    if total_seconds >= SECONDS_PER_DAY:
        j += 1
        total_seconds -= SECONDS_PER_DAY

    j1 = j + 68569
    j2 = _tdiv(4 * j1, 146097)
    j3 = j1 - _tdiv(146097 * j2 + 3, 4)
    j4 = _tdiv(4000 * (j3 + 1), 1461001)
    j5 = j3 - _tdiv(1461 * j4, 4) + 31
    j6 = _tdiv(80 * j5, 2447)
    j7 = j5 - _tdiv(2447 * j6, 80)
    j8 = _tdiv(j6, 11)

    return CalendarDate(
        year=100 * (j2 - 49) + j4 + j8,
        month=j6 + 2 - 12 * j8,
        day=j7,
        hour=int(total_seconds // SECONDS_PER_HOUR),
        minute=int((total_seconds % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE),
        second=total_seconds % SECONDS_PER_MINUTE,
    )


def _ensure_leapsecs() -> None:
    """Load leap seconds for rms-julian if not already loaded.

    Uses JULIAN_LEAPSECS when set; if that file is missing or not an LSK,
    falls back to rms-julian's bundled LSK.
    """
    global _leapsecs_loaded
    if _leapsecs_loaded:
        return
    path = get_leapsecs_path()
    if path is not None:
        try:
            julian.load_lsk(path)
            _leapsecs_loaded = True
            return
        except (OSError, KeyError, ValueError) as e:
            logger.info(
                'Leap seconds from %s not used (%s); using rms-julian bundled LSK.',
                path,
                e,
            )
    julian.load_lsk()
    _leapsecs_loaded = True


def parse_calendar(string: str) -> CalendarDate | None:
    """Parse a UTC date/time string into a CalendarDate.

    Accepts anything rms-julian parses, plus a trailing ISO "Z" and the
    "YYYY HH:MM:SS" form (January 1st of that year).

    Parameters:
        string: Date/time string, e.g. "2024-01-15 12:00".

    Returns:
        CalendarDate, or None on parse failure.
    """
    _ensure_leapsecs()
    stripped = string.strip()
    candidate_strings = [stripped]
    if stripped.endswith(('Z', 'z')):
        candidate_strings.append(stripped[:-1])
    year_hms_match = re.fullmatch(r'(-?\d{1,4})\s+(\d{1,2}:\d{2}(?::\d{2}(?:\.\d*)?)?)', stripped)
    if year_hms_match is not None:
        year, hms = year_hms_match.groups()
        candidate_strings.append(f'{year}-01-01 {hms}')
    for candidate in candidate_strings:
        try:
            result = julian.day_sec_from_string(candidate)
            day, sec = int(result[0]), float(result[1])
        except (ValueError, TypeError, LookupError, OSError):
            continue
        y, m, d = julian.ymd_from_day(day)
        hour, minute, second = julian.hms_from_sec(sec)
        return CalendarDate(
            year=int(y),
            month=int(m),
            day=int(d),
            hour=int(hour),
            minute=int(minute),
            second=float(second),
        )
    logger.debug('Could not parse date string %r', string)
    return None


def parse_julian(string: str) -> JulianDate | None:
    """Parse either a bare Julian day number or a date string.

    Parameters:
        string: "2460325.5" or any form accepted by parse_calendar().

    Returns:
        JulianDate, or None if the string is neither.
    """
    try:
        return JulianDate(float(string))
    except ValueError:
        pass
    cal = parse_calendar(string)
    if cal is None:
        return None
    try:
        return cal.to_julian()
    except InvalidDateError as e:
        logger.debug('Parsed date %r out of domain: %s', string, e)
        return None
