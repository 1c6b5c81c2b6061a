"""Initial_data.dat reader: body roster and nominal year range."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from jpl_ephemeris.config import read_resource
from jpl_ephemeris.constants import (
    BODIES_MARKER,
    DATE_MARKER,
    END_YEAR_PREFIX,
    FALSE_TOKEN,
    START_YEAR_PREFIX,
    TRUE_TOKEN,
)
from jpl_ephemeris.record import IssueLog, LineRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterEntry:
    """One BODIES: line: body name and whether it is active."""

    name: str
    active: bool = False


@dataclass(frozen=True)
class InitialData:
    """Parsed Initial_data.dat. Body order is the canonical join order."""

    bodies: tuple[RosterEntry, ...] = ()
    start_year: int = 0
    end_year: int = 0

    @property
    def names(self) -> list[str]:
        return [b.name for b in self.bodies]


def _parse_active(record: LineRecord, log: IssueLog) -> bool:
    token = record.next()
    if token is None or token == FALSE_TOKEN:
        return False
    if token == TRUE_TOKEN:
        return True
    log.add(record.line_no, record.text, f'expected {TRUE_TOKEN} or {FALSE_TOKEN}, got {token!r}')
    return False


def _parse_year(record: LineRecord | None, prefix: str, log: IssueLog) -> int:
    """Take the last token of a '<prefix> ... <year>' line; 0 on any problem."""
    if record is None:
        log.add(0, '', f'{prefix} line missing after {DATE_MARKER}')
        return 0
    if not record.text.startswith(prefix):
        log.add(record.line_no, record.text, f'expected a {prefix} line')
        return 0
    tokens = record.text.split()
    try:
        return int(tokens[-1])
    except ValueError:
        log.add(record.line_no, record.text, f'{prefix} is not an integer')
        return 0


def parse_initial_data(
    text: str, *, strict: bool = True, source: str = '<initial data>'
) -> InitialData:
    """Parse the initial data grammar.

    BODIES: opens the roster; each line up to DATE: is "<name> <true|false>".
    DATE: is followed by a Start_year line and an End_year line whose last
    token is the year. Marker lines must match exactly.

    Parameters:
        text: Whole resource contents.
        strict: Raise on any problem; otherwise log it and leave the field at 0/False.
        source: Name used in messages.

    Returns:
        InitialData.

    Raises:
        DescriptorParseError: strict and at least one record was unusable.
    """
    log = IssueLog(source, strict=strict)
    lines = text.splitlines()
    bodies: list[RosterEntry] = []
    start_year = 0
    end_year = 0
    saw_bodies = False
    saw_date = False

    def record_at(index: int) -> LineRecord | None:
        if index >= len(lines):
            return None
        return LineRecord(index + 1, lines[index])

    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1
        if line == BODIES_MARKER:
            saw_bodies = True
            while i < len(lines):
                record = LineRecord(i + 1, lines[i])
                i += 1
                if record.text == DATE_MARKER:
                    # Hand the marker back to the outer loop.
                    i -= 1
                    break
                name = record.next()
                if name is None:
                    continue
                bodies.append(RosterEntry(name=name, active=_parse_active(record, log)))
            continue
        if line == DATE_MARKER:
            saw_date = True
            start_year = _parse_year(record_at(i), START_YEAR_PREFIX, log)
            i += 1
            end_year = _parse_year(record_at(i), END_YEAR_PREFIX, log)
            i += 1

    if not saw_bodies:
        log.add(0, '', f'no {BODIES_MARKER} block')
    elif not bodies:
        log.add(0, '', f'{BODIES_MARKER} block lists no bodies')
    if not saw_date:
        log.add(0, '', f'no {DATE_MARKER} block')
    log.raise_if_any()
    logger.debug(
        '%s: %d bodies, years %d-%d', source, len(bodies), start_year, end_year
    )
    return InitialData(bodies=tuple(bodies), start_year=start_year, end_year=end_year)


def read_initial_data(path: str | Path, *, strict: bool = True) -> InitialData:
    """Read and parse an Initial_data.dat file (see parse_initial_data)."""
    text = read_resource(path)
    return parse_initial_data(text, strict=strict, source=str(path))
