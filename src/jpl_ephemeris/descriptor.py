"""Loaded ephemeris descriptor: metadata, body layout, and position queries.

The descriptor is assembled once from Initial_data.dat and the ASCII header
and never changes afterwards. Position evaluation is delegated to a
PositionEngine; the default engine has no coefficient reader behind it and
returns the origin.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import numpy as np

from jpl_ephemeris.config import resolve_paths
from jpl_ephemeris.errors import (
    BodyNotFoundError,
    DescriptorParseError,
    InactiveBodyError,
    LayoutError,
    OutOfRangeError,
)
from jpl_ephemeris.header import HeaderData, read_header
from jpl_ephemeris.initial_data import InitialData, read_initial_data
from jpl_ephemeris.layout import check_block_lengths, compute_block_lengths, validate_layout
from jpl_ephemeris.record import ParseIssue
from jpl_ephemeris.time_utils import JulianDate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    """Cartesian position in AU."""

    x: float
    y: float
    z: float

    def distance(self) -> float:
        """Distance from the origin in AU."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)


@dataclass(frozen=True)
class CelestialBody:
    """One roster body with its header pointer triplet and block length.

    pointer is (start offset, coefficients per component, subintervals per
    interval), as given by the header.
    """

    name: str
    active: bool
    pointer: tuple[int, int, int]
    block_length: int

    @property
    def start_offset(self) -> int:
        return self.pointer[0]

    @property
    def coefficients_per_component(self) -> int:
        return self.pointer[1]

    @property
    def subintervals(self) -> int:
        return self.pointer[2]


@dataclass(frozen=True)
class EphemerisMetadata:
    """Read-only snapshot of the descriptor's scalar values."""

    start_year: int
    end_year: int
    julian_start: float
    julian_end: float
    interval_days: int
    earth_moon_ratio: float
    coefficient_count: int


class PositionEngine(Protocol):
    """Evaluates a body's position from the binary coefficient data."""

    def position(
        self, descriptor: EphemerisDescriptor, body: CelestialBody, jd: JulianDate
    ) -> Position: ...


class NullPositionEngine:
    """Engine with no coefficient reader: every position is the origin."""

    def position(
        self, descriptor: EphemerisDescriptor, body: CelestialBody, jd: JulianDate
    ) -> Position:
        del descriptor
        logger.debug('No coefficient reader; returning origin for %s at JD %s', body.name, jd.jd)
        return Position(0.0, 0.0, 0.0)


def _body_key_matches(stored: str, query: str) -> bool:
    """Case-insensitive match, also ignoring underscores in the stored name."""
    q = query.casefold()
    return stored.casefold() == q or stored.replace('_', '').casefold() == q


def _span_problems(header: HeaderData) -> list[str]:
    problems: list[str] = []
    if not header.julian_start < header.julian_end:
        problems.append(
            f'julian start {header.julian_start} is not before julian end {header.julian_end}'
        )
    if header.interval_days <= 0:
        problems.append(f'interval {header.interval_days} days is not positive')
    return problems


@dataclass(frozen=True)
class EphemerisDescriptor:
    """Structural description of one DE-series ephemeris."""

    start_year: int
    end_year: int
    julian_start: float
    julian_end: float
    interval_days: int
    coefficient_count: int
    earth_moon_ratio: float
    roster: tuple[CelestialBody, ...]
    engine: PositionEngine = field(
        default_factory=NullPositionEngine, compare=False, repr=False
    )

    @classmethod
    def from_parts(
        cls,
        initial: InitialData,
        header: HeaderData,
        *,
        strict: bool = True,
        engine: PositionEngine | None = None,
    ) -> EphemerisDescriptor:
        """Join a parsed roster and header into a descriptor.

        Parameters:
            initial: Parsed initial data (roster order is canonical).
            header: Header parsed against the same roster.
            strict: Raise when the span, interval, or block lengths are unusable;
                otherwise log them as warnings.
            engine: Position engine; NullPositionEngine when None.

        Returns:
            EphemerisDescriptor.

        Raises:
            LayoutError: Roster and pointers disagree, or (strict) a block length
                is not positive.
            DescriptorParseError: strict and the header span/interval is unusable.
        """
        names = initial.names
        validate_layout(names, header.pointers, header.pointer_columns)
        lengths = compute_block_lengths(header.pointers, header.coefficient_count)
        span_problems = _span_problems(header)
        block_problems = check_block_lengths(names, lengths)
        if strict and span_problems:
            raise DescriptorParseError(
                '<header>', [ParseIssue(0, '', problem) for problem in span_problems]
            )
        if strict and block_problems:
            raise LayoutError('; '.join(block_problems))
        for problem in span_problems + block_problems:
            logger.warning('Ephemeris descriptor: %s', problem)
        roster = tuple(
            CelestialBody(
                name=entry.name,
                active=entry.active,
                pointer=(row[0], row[1], row[2]),
                block_length=length,
            )
            for entry, row, length in zip(initial.bodies, header.pointers, lengths)
        )
        return cls(
            start_year=initial.start_year,
            end_year=initial.end_year,
            julian_start=header.julian_start,
            julian_end=header.julian_end,
            interval_days=header.interval_days,
            coefficient_count=header.coefficient_count,
            earth_moon_ratio=header.earth_moon_ratio,
            roster=roster,
            engine=engine if engine is not None else NullPositionEngine(),
        )

    @classmethod
    def load(
        cls,
        initial_data_path: str | Path,
        header_path: str | Path,
        *,
        strict: bool = True,
        engine: PositionEngine | None = None,
    ) -> EphemerisDescriptor:
        """Read Initial_data.dat, then the header, and build the descriptor.

        The roster is read first because the header's pointer record is laid
        out in roster order.
        """
        initial = read_initial_data(initial_data_path, strict=strict)
        header = read_header(header_path, len(initial.bodies), strict=strict)
        descriptor = cls.from_parts(initial, header, strict=strict, engine=engine)
        logger.info(
            'Loaded ephemeris %d-%d (%d bodies, NCOEFF=%d) from %s and %s',
            descriptor.start_year,
            descriptor.end_year,
            len(descriptor.roster),
            descriptor.coefficient_count,
            initial_data_path,
            header_path,
        )
        return descriptor

    @classmethod
    def from_config(
        cls,
        config_path: str | Path | None = None,
        *,
        strict: bool = True,
        engine: PositionEngine | None = None,
    ) -> EphemerisDescriptor:
        """Load using paths from config.toml or the environment (see config.resolve_paths)."""
        paths = resolve_paths(config_path)
        return cls.load(paths.initial_data, paths.header, strict=strict, engine=engine)

    def metadata(self) -> EphemerisMetadata:
        return EphemerisMetadata(
            start_year=self.start_year,
            end_year=self.end_year,
            julian_start=self.julian_start,
            julian_end=self.julian_end,
            interval_days=self.interval_days,
            earth_moon_ratio=self.earth_moon_ratio,
            coefficient_count=self.coefficient_count,
        )

    def bodies(self) -> tuple[CelestialBody, ...]:
        """Bodies in roster order."""
        return self.roster

    def date_range(self) -> tuple[float, float]:
        return (self.julian_start, self.julian_end)

    def contains(self, jd: JulianDate | float) -> bool:
        """True when jd lies within [julian_start, julian_end]."""
        return self.julian_start <= float(jd) <= self.julian_end

    def body(self, name: str) -> CelestialBody:
        """Find a body by name, ignoring case and underscores in the stored name.

        Raises:
            BodyNotFoundError: No match; lists every known name.
        """
        for body in self.roster:
            if _body_key_matches(body.name, name):
                return body
        raise BodyNotFoundError(name, [b.name for b in self.roster])

    def position(self, name: str, jd: JulianDate | float) -> Position:
        """Position of a body at a Julian date.

        Parameters:
            name: Body name (e.g. "Mars", "earthmoon").
            jd: JulianDate or day number inside the ephemeris span.

        Returns:
            Position from the configured engine.

        Raises:
            OutOfRangeError: jd outside [julian_start, julian_end].
            BodyNotFoundError: No body matches name.
            InactiveBodyError: The body is flagged inactive.
        """
        when = jd if isinstance(jd, JulianDate) else JulianDate(float(jd))
        if not self.contains(when):
            raise OutOfRangeError(when.jd, self.julian_start, self.julian_end)
        body = self.body(name)
        if not body.active:
            raise InactiveBodyError(body.name)
        return self.engine.position(self, body, when)
