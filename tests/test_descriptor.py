"""Tests for EphemerisDescriptor loading and queries."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pytest

from jpl_ephemeris.descriptor import (
    CelestialBody,
    EphemerisDescriptor,
    NullPositionEngine,
    Position,
)
from jpl_ephemeris.errors import (
    BodyNotFoundError,
    DescriptorParseError,
    InactiveBodyError,
    LayoutError,
    OutOfRangeError,
)
from jpl_ephemeris.header import HeaderData
from jpl_ephemeris.initial_data import InitialData, RosterEntry
from jpl_ephemeris.time_utils import JulianDate


def _initial(*names: str) -> InitialData:
    return InitialData(
        bodies=tuple(RosterEntry(name, True) for name in names),
        start_year=1550,
        end_year=2650,
    )


def _header(pointers: tuple[tuple[int, ...], ...], **kwargs: object) -> HeaderData:
    values: dict[str, object] = {
        'coefficient_count': 30,
        'julian_start': 2287184.5,
        'julian_end': 2688976.5,
        'interval_days': 32,
        'earth_moon_ratio': 81.3,
        'emrat_index': 0,
        'pointers': pointers,
        'pointer_columns': len(pointers),
    }
    values.update(kwargs)
    return HeaderData(**values)  # type: ignore[arg-type]


def test_metadata_from_sample(descriptor: EphemerisDescriptor) -> None:
    """Metadata carries the roster years and the header values."""
    meta = descriptor.metadata()
    assert meta.start_year == -13200
    assert meta.end_year == 17191
    assert meta.julian_start == -3100015.5
    assert meta.julian_end == 8000016.5
    assert meta.interval_days == 32
    assert meta.coefficient_count == 1018
    assert meta.earth_moon_ratio == pytest.approx(81.3005682214972)


def test_bodies_in_roster_order(
    descriptor: EphemerisDescriptor, block_lengths: tuple[int, ...]
) -> None:
    """Bodies keep roster order and carry their pointers and block lengths."""
    bodies = descriptor.bodies()
    assert [b.name for b in bodies][:3] == ['Mercury', 'Venus', 'Earth_Moon']
    assert tuple(b.block_length for b in bodies) == block_lengths
    mercury = bodies[0]
    assert mercury.pointer == (3, 14, 4)
    assert mercury.start_offset == 3
    assert mercury.coefficients_per_component == 14
    assert mercury.subintervals == 4


def test_date_range_and_contains(descriptor: EphemerisDescriptor) -> None:
    assert descriptor.date_range() == (-3100015.5, 8000016.5)
    assert descriptor.contains(2451545.0)
    assert descriptor.contains(JulianDate(-3100015.5))
    assert descriptor.contains(8000016.5)
    assert not descriptor.contains(8000016.6)


@pytest.mark.parametrize('name', ['Mars', 'mars', 'MARS'])
def test_position_name_is_case_insensitive(descriptor: EphemerisDescriptor, name: str) -> None:
    """Default engine returns the origin for any spelling of an active body."""
    pos = descriptor.position(name, JulianDate(2451545.0))
    assert pos == Position(0.0, 0.0, 0.0)
    assert pos.distance() == 0.0


def test_underscore_free_name_matches(descriptor: EphemerisDescriptor) -> None:
    """"EarthMoon" finds the roster entry "Earth_Moon"."""
    assert descriptor.body('EarthMoon').name == 'Earth_Moon'
    assert descriptor.body('earth_moon').name == 'Earth_Moon'


def test_position_accepts_plain_float(descriptor: EphemerisDescriptor) -> None:
    assert descriptor.position('Sun', 2451545.0) == Position(0.0, 0.0, 0.0)


@pytest.mark.parametrize('jd', [-3100016.0, 8000017.0])
def test_out_of_range(descriptor: EphemerisDescriptor, jd: float) -> None:
    """Dates outside the span fail before the body is looked up."""
    with pytest.raises(OutOfRangeError) as excinfo:
        descriptor.position('NoSuchBody', jd)
    assert excinfo.value.jd == jd
    assert 'outside valid range' in str(excinfo.value)


def test_inactive_body(descriptor: EphemerisDescriptor) -> None:
    """The error names the roster entry, whatever spelling was queried."""
    with pytest.raises(InactiveBodyError, match="Body 'Pluto' is not active") as excinfo:
        descriptor.position('pluto', 2451545.0)
    assert excinfo.value.name == 'Pluto'


def test_unknown_body_lists_names(descriptor: EphemerisDescriptor) -> None:
    """The error names every available body."""
    with pytest.raises(BodyNotFoundError) as excinfo:
        descriptor.position('Vulcan', 2451545.0)
    assert excinfo.value.available[0] == 'Mercury'
    assert 'Earth_Moon' in str(excinfo.value)
    assert isinstance(excinfo.value, LookupError)


def test_custom_engine_receives_body_and_date(initial_data_path: Path, header_path: Path) -> None:
    """Position queries are delegated to the configured engine."""
    calls: list[tuple[str, float]] = []

    class FixedEngine:
        def position(
            self, descriptor: EphemerisDescriptor, body: CelestialBody, jd: JulianDate
        ) -> Position:
            calls.append((body.name, jd.jd))
            return Position(1.0, 2.0, 2.0)

    descriptor = EphemerisDescriptor.load(initial_data_path, header_path, engine=FixedEngine())
    pos = descriptor.position('moon', 2451545.0)
    assert calls == [('Moon', 2451545.0)]
    assert pos.distance() == 3.0
    np.testing.assert_array_equal(pos.as_array(), np.array([1.0, 2.0, 2.0]))


def test_default_engine_is_null() -> None:
    descriptor = EphemerisDescriptor.from_parts(_initial('Sun'), _header(((1, 3, 1),)))
    assert isinstance(descriptor.engine, NullPositionEngine)


def test_from_parts_computes_blocks() -> None:
    descriptor = EphemerisDescriptor.from_parts(
        _initial('Sun', 'Moon', 'Mars'), _header(((1, 3, 1), (11, 3, 1), (21, 3, 1)))
    )
    assert [b.block_length for b in descriptor.bodies()] == [10, 10, 9]
    assert descriptor.start_year == 1550


@pytest.mark.parametrize('strict', [True, False])
def test_pointer_count_mismatch_always_raises(strict: bool) -> None:
    """Roster/pointer disagreement fails in both modes."""
    header = _header(((1, 3, 1), (11, 3, 1)))
    with pytest.raises(LayoutError, match='describes 2 bodies but the roster lists 3'):
        EphemerisDescriptor.from_parts(_initial('Sun', 'Moon', 'Mars'), header, strict=strict)


def test_strict_rejects_non_positive_block() -> None:
    header = _header(((11, 3, 1), (11, 3, 1)))
    with pytest.raises(LayoutError, match='Sun has block length 0'):
        EphemerisDescriptor.from_parts(_initial('Sun', 'Moon'), header)


def test_strict_rejects_bad_span() -> None:
    """An empty span and a zero interval are both reported."""
    header = _header(((1, 3, 1),), julian_start=10.0, julian_end=10.0, interval_days=0)
    with pytest.raises(DescriptorParseError) as excinfo:
        EphemerisDescriptor.from_parts(_initial('Sun'), header)
    assert len(excinfo.value.issues) == 2
    assert 'interval 0 days is not positive' in str(excinfo.value)


def test_lenient_logs_layout_problems(caplog: pytest.LogCaptureFixture) -> None:
    """Lenient mode keeps the descriptor and logs what is wrong with it."""
    header = _header(((11, 3, 1), (11, 3, 1)), interval_days=0)
    with caplog.at_level(logging.WARNING, logger='jpl_ephemeris.descriptor'):
        descriptor = EphemerisDescriptor.from_parts(
            _initial('Sun', 'Moon'), header, strict=False
        )
    assert [b.block_length for b in descriptor.bodies()] == [0, 19]
    messages = [r.getMessage() for r in caplog.records]
    assert any('interval 0 days' in m for m in messages)
    assert any('Sun has block length 0' in m for m in messages)


def test_from_config(tmp_path: Path, initial_data_path: Path, header_path: Path) -> None:
    """Paths in config.toml [paths] are used to load the descriptor."""
    config = tmp_path / 'config.toml'
    config.write_text(
        '[paths]\n'
        f'initial_data_dat = "{initial_data_path.as_posix()}"\n'
        f'header_441 = "{header_path.as_posix()}"\n'
        f'nasa_jpl_de441 = "{(tmp_path / "absent.441").as_posix()}"\n',
        encoding='utf-8',
    )
    descriptor = EphemerisDescriptor.from_config(config)
    assert len(descriptor.bodies()) == 11
    assert descriptor.coefficient_count == 1018


def test_descriptor_equality_ignores_engine(initial_data_path: Path, header_path: Path) -> None:
    """Two loads of the same files compare equal."""
    first = EphemerisDescriptor.load(initial_data_path, header_path)
    second = EphemerisDescriptor.load(initial_data_path, header_path, engine=NullPositionEngine())
    assert first == second
