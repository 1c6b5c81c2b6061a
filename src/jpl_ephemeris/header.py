"""ASCII header reader: coefficient count, date span, EMRAT, and body pointers.

Each header line is a record whose first token is its key. Only NCOEFF= and
GROUP 1030/1040/1041/1050 are read; everything else is skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from jpl_ephemeris.config import read_resource
from jpl_ephemeris.constants import (
    EMRAT_NAME,
    EXPONENT_FIELD_WIDTH,
    EXPONENT_MARKERS,
    GROUP_CONST_NAMES,
    GROUP_CONST_VALUES,
    GROUP_DATES,
    GROUP_KEY,
    GROUP_POINTERS,
    NCOEFF_KEY,
    POINTER_WIDTH,
)
from jpl_ephemeris.record import IssueLog, LineRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeaderData:
    """Values read from the header.

    pointers holds one row per roster body, in roster order; a row has
    POINTER_WIDTH values unless the GROUP 1050 record ran short.
    pointer_columns is how many bodies the GROUP 1050 record describes.
    """

    coefficient_count: int = 0
    julian_start: float = 0.0
    julian_end: float = 0.0
    interval_days: int = 0
    earth_moon_ratio: float = 0.0
    emrat_index: int | None = None
    pointers: tuple[tuple[int, ...], ...] = ()
    pointer_columns: int = 0


def repair_exponent(token: str, width: int = EXPONENT_FIELD_WIDTH) -> str:
    """Rewrite a FORTRAN exponent literal into Python float notation.

    The last ``width`` characters of token are the exponent field: one
    marker (D, d, E or e), a sign, then ``width - 2`` digits. The marker is
    replaced by ``E``:

        0.813005600000000D+02 -> 0.813005600000000E+02

    Parameters:
        token: Literal as written in the header.
        width: Exponent field width including the marker.

    Returns:
        Literal accepted by float().

    Raises:
        ValueError: token does not end in a well-formed exponent field of
            that width.
    """
    if width < 3:
        raise ValueError(f'Exponent field width must be at least 3, got {width}')
    if len(token) <= width:
        raise ValueError(f'{token!r} is too short for a {width}-character exponent field')
    mantissa, field = token[:-width], token[-width:]
    marker, sign, digits = field[0], field[1], field[2:]
    if marker not in EXPONENT_MARKERS:
        raise ValueError(f'{token!r}: expected exponent marker at {-width}, got {marker!r}')
    if sign not in '+-':
        raise ValueError(f'{token!r}: expected exponent sign, got {sign!r}')
    if not digits.isdigit():
        raise ValueError(f'{token!r}: exponent digits {digits!r} are not numeric')
    return f'{mantissa}E{sign}{digits}'


def fortran_float(token: str, width: int = EXPONENT_FIELD_WIDTH) -> float:
    """Parse a FORTRAN D-exponent literal (see repair_exponent)."""
    return float(repair_exponent(token, width))


def _to_float(token: str) -> float:
    try:
        return float(token)
    except ValueError:
        return fortran_float(token)


def _to_int(token: str) -> int:
    """Integer token; integral decimals such as "32." are accepted too."""
    try:
        return int(token)
    except ValueError:
        value = float(token)
        if not value.is_integer():
            raise
        return int(value)


class _HeaderReader:
    """Single pass over header records, accumulating HeaderData fields."""

    def __init__(self, body_count: int, log: IssueLog) -> None:
        self.body_count = body_count
        self.log = log
        self.coefficient_count = 0
        self.julian_start = 0.0
        self.julian_end = 0.0
        self.interval_days = 0
        self.earth_moon_ratio = 0.0
        self.emrat_index: int | None = None
        self.pointers: list[list[int]] = [[] for _ in range(body_count)]
        self.pointer_columns = 0
        self.seen: set[str] = set()

    def _bad(self, record: LineRecord, reason: str) -> None:
        self.log.add(record.line_no, record.text, reason)

    def _int(self, record: LineRecord, token: str | None, what: str) -> int:
        if token is None:
            self._bad(record, f'missing {what}')
            return 0
        try:
            return _to_int(token)
        except ValueError:
            self._bad(record, f'{what} {token!r} is not an integer')
            return 0

    def _float(self, record: LineRecord, token: str | None, what: str) -> float:
        if token is None:
            self._bad(record, f'missing {what}')
            return 0.0
        try:
            return _to_float(token)
        except ValueError:
            self._bad(record, f'{what} {token!r} is not a number')
            return 0.0

    def feed(self, record: LineRecord) -> None:
        key = record.next()
        if key == NCOEFF_KEY:
            self.seen.add(NCOEFF_KEY)
            self.coefficient_count = self._int(record, record.next(), 'NCOEFF')
        elif key == GROUP_KEY:
            group = record.next()
            if group == GROUP_DATES:
                self._dates(record)
            elif group == GROUP_CONST_NAMES:
                self._constant_names(record)
            elif group == GROUP_CONST_VALUES:
                self._constant_values(record)
            elif group == GROUP_POINTERS:
                self._pointers(record)
            if group is not None:
                self.seen.add(group)

    def _dates(self, record: LineRecord) -> None:
        self.julian_start = self._float(record, record.next(), 'julian start')
        self.julian_end = self._float(record, record.next(), 'julian end')
        self.interval_days = self._int(record, record.next(), 'interval')

    def _constant_names(self, record: LineRecord) -> None:
        count = self._int(record, record.next(), 'constant count')
        for i in range(count):
            name = record.next()
            if name is None:
                break
            if name == EMRAT_NAME:
                self.emrat_index = i
                return
        self._bad(record, f'{EMRAT_NAME} not among the {count} constant names')

    def _constant_values(self, record: LineRecord) -> None:
        index = self.emrat_index
        if index is None:
            self._bad(record, f'{EMRAT_NAME} position unknown; reading the first value')
            index = 0
        if record.skip(index) < index:
            self._bad(record, f'fewer than {index + 1} constant values')
            return
        self.earth_moon_ratio = self._emrat(record, record.next())

    def _emrat(self, record: LineRecord, token: str | None) -> float:
        if token is None:
            self._bad(record, f'missing {EMRAT_NAME} value')
            return 0.0
        try:
            return fortran_float(token)
        except ValueError as e:
            self._bad(record, f'{EMRAT_NAME} value: {e}')
            return 0.0

    def _pointers(self, record: LineRecord) -> None:
        available = record.remaining()
        self.pointer_columns = available // POINTER_WIDTH
        if available % POINTER_WIDTH:
            self._bad(record, f'{available} pointer values is not a multiple of {POINTER_WIDTH}')
        for _ in range(POINTER_WIDTH):
            for row in self.pointers:
                token = record.next()
                if token is None:
                    return
                row.append(self._int(record, token, 'pointer'))

    def result(self) -> HeaderData:
        for required in (NCOEFF_KEY, GROUP_DATES, GROUP_CONST_NAMES, GROUP_CONST_VALUES):
            if required not in self.seen:
                label = required if required == NCOEFF_KEY else f'{GROUP_KEY} {required}'
                self.log.add(0, '', f'no {label} record')
        return HeaderData(
            coefficient_count=self.coefficient_count,
            julian_start=self.julian_start,
            julian_end=self.julian_end,
            interval_days=self.interval_days,
            earth_moon_ratio=self.earth_moon_ratio,
            emrat_index=self.emrat_index,
            pointers=tuple(tuple(row) for row in self.pointers),
            pointer_columns=self.pointer_columns,
        )


def parse_header(
    text: str, body_count: int, *, strict: bool = True, source: str = '<header>'
) -> HeaderData:
    """Parse header records.

    GROUP 1050 is read as POINTER_WIDTH passes over the roster, one value per
    body per pass, so body_count must be the length of the already-parsed
    roster.

    Parameters:
        text: Whole resource contents.
        body_count: Number of bodies in the roster.
        strict: Raise on any problem; otherwise log it and leave the field at 0.
        source: Name used in messages.

    Returns:
        HeaderData.

    Raises:
        DescriptorParseError: strict and at least one record was unusable.
    """
    log = IssueLog(source, strict=strict)
    reader = _HeaderReader(body_count, log)
    for line_no, line in enumerate(text.splitlines(), start=1):
        reader.feed(LineRecord(line_no, line))
    data = reader.result()
    log.raise_if_any()
    logger.debug(
        '%s: NCOEFF=%d span %s-%s step %d EMRAT=%s',
        source,
        data.coefficient_count,
        data.julian_start,
        data.julian_end,
        data.interval_days,
        data.earth_moon_ratio,
    )
    return data


def read_header(path: str | Path, body_count: int, *, strict: bool = True) -> HeaderData:
    """Read and parse a header file (see parse_header)."""
    text = read_resource(path)
    return parse_header(text, body_count, strict=strict, source=str(path))
