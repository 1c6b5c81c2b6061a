"""Shared sample descriptors (DE441-shaped) for parser and descriptor tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from jpl_ephemeris.descriptor import EphemerisDescriptor

INITIAL_DATA_TEXT = """\
BODIES:
Mercury true
Venus true
Earth_Moon true
Mars true
Jupiter true
Saturn true
Uranus true
Neptune true
Pluto false
Moon true
Sun true
DATE:
Start_year = -13200
End_year = 17191
"""

HEADER_TEXT = """\
KSIZE= 2036    NCOEFF= 1018
NCOEFF= 1018
GROUP 1010 JPL Planetary Ephemeris DE441
GROUP 1030 -3100015.50 8000016.50 32
GROUP 1040 4 DENUM LENUM AU EMRAT
GROUP 1041 0.441000000000000D+03 0.441000000000000D+03 0.149597870700000D+09 0.813005682214972D+02
GROUP 1050 3 171 231 309 342 366 387 405 423 441 753 14 10 13 11 8 7 6 6 6 13 11 4 2 2 1 1 1 1 1 1 8 2
GROUP 1070
"""

BLOCK_LENGTHS = (168, 60, 78, 33, 24, 21, 18, 18, 18, 312, 265)


@pytest.fixture
def initial_data_text() -> str:
    return INITIAL_DATA_TEXT


@pytest.fixture
def header_text() -> str:
    return HEADER_TEXT


@pytest.fixture
def block_lengths() -> tuple[int, ...]:
    return BLOCK_LENGTHS


@pytest.fixture
def initial_data_path(tmp_path: Path) -> Path:
    path = tmp_path / 'Initial_data.dat'
    path.write_text(INITIAL_DATA_TEXT, encoding='utf-8')
    return path


@pytest.fixture
def header_path(tmp_path: Path) -> Path:
    path = tmp_path / 'header.441'
    path.write_text(HEADER_TEXT, encoding='utf-8')
    return path


@pytest.fixture
def descriptor(initial_data_path: Path, header_path: Path) -> EphemerisDescriptor:
    return EphemerisDescriptor.load(initial_data_path, header_path)
