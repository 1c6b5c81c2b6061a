"""Exception hierarchy for descriptor loading, date conversion, and queries."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jpl_ephemeris.record import ParseIssue


class JplEphemerisError(Exception):
    """Base class for all errors raised by jpl_ephemeris."""


class ConfigError(JplEphemerisError):
    """A resource path is missing, unreadable, or badly configured."""


class ResourceReadError(JplEphemerisError, OSError):
    """An existing resource could not be read."""


class InvalidDateError(JplEphemerisError, ValueError):
    """A calendar field is outside its domain."""


class DescriptorParseError(JplEphemerisError, ValueError):
    """One or more records of a descriptor resource could not be parsed.

    Every issue found in the resource is listed, not only the first one.
    """

    def __init__(self, source: str, issues: Iterable[ParseIssue]) -> None:
        self.source = source
        self.issues: tuple[ParseIssue, ...] = tuple(issues)
        lines = '\n'.join(f'  {issue}' for issue in self.issues)
        super().__init__(f'{len(self.issues)} problem(s) in {source}:\n{lines}')


class LayoutError(JplEphemerisError, ValueError):
    """Body roster and header pointers do not describe a consistent layout."""


class EphemerisError(JplEphemerisError):
    """A query against a loaded ephemeris failed."""


class OutOfRangeError(EphemerisError):
    """Requested Julian date lies outside the ephemeris span."""

    def __init__(self, jd: float, julian_start: float, julian_end: float) -> None:
        self.jd = jd
        self.julian_start = julian_start
        self.julian_end = julian_end
        super().__init__(
            f'Julian date {jd} is outside valid range [{julian_start}, {julian_end}]'
        )


class BodyNotFoundError(EphemerisError, LookupError):
    """No body in the roster matches the requested name."""

    def __init__(self, name: str, available: Sequence[str]) -> None:
        self.name = name
        self.available = tuple(available)
        super().__init__(
            f"Body '{name}' not found. Available bodies: {', '.join(self.available)}"
        )


class InactiveBodyError(EphemerisError):
    """The matched body is flagged inactive in the roster."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Body '{name}' is not active in this ephemeris")
