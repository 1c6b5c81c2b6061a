"""Tests for block-length derivation and roster/pointer layout checks."""

from __future__ import annotations

import pytest

from jpl_ephemeris.errors import LayoutError
from jpl_ephemeris.header import parse_header
from jpl_ephemeris.layout import check_block_lengths, compute_block_lengths, validate_layout


def test_block_lengths_from_start_offsets() -> None:
    """Each block runs to the next start; the last runs to NCOEFF."""
    pointers = [(1, 0, 0), (11, 0, 0), (21, 0, 0)]
    assert compute_block_lengths(pointers, 30) == (10, 10, 9)


def test_block_lengths_sum_to_ncoeff_minus_first_start() -> None:
    """Block lengths are contiguous from the first start offset."""
    pointers = [(3, 14, 4), (171, 10, 2), (231, 13, 2)]
    lengths = compute_block_lengths(pointers, 400)
    assert lengths == (168, 60, 169)
    assert sum(lengths) == 400 - 3


def test_sample_header_block_lengths(header_text: str, block_lengths: tuple[int, ...]) -> None:
    """The DE441-shaped sample header gives the expected per-body blocks."""
    header = parse_header(header_text, body_count=11)
    assert compute_block_lengths(header.pointers, header.coefficient_count) == block_lengths


def test_single_body() -> None:
    assert compute_block_lengths([(5, 3, 1)], 12) == (7,)


def test_no_pointers_raises() -> None:
    with pytest.raises(LayoutError, match='No pointer data'):
        compute_block_lengths([], 30)


def test_empty_row_raises() -> None:
    with pytest.raises(LayoutError, match='Pointer row 1'):
        compute_block_lengths([(1, 2, 3), ()], 30)


def test_validate_accepts_matching_layout() -> None:
    validate_layout(['Sun', 'Moon'], [(1, 2, 3), (7, 2, 3)], pointer_columns=2)


def test_validate_rejects_empty_roster() -> None:
    with pytest.raises(LayoutError, match='roster is empty'):
        validate_layout([], [])


def test_validate_rejects_column_count_mismatch() -> None:
    """A pointer record sized for a different roster is reported with the names."""
    with pytest.raises(LayoutError, match='describes 3 bodies but the roster lists 2: Sun, Moon'):
        validate_layout(['Sun', 'Moon'], [(1, 2, 3), (7, 2, 3)], pointer_columns=3)


def test_validate_rejects_row_count_mismatch() -> None:
    with pytest.raises(LayoutError, match='1 pointer rows for 2 roster bodies'):
        validate_layout(['Sun', 'Moon'], [(1, 2, 3)])


def test_validate_rejects_incomplete_triplets() -> None:
    """Rows shorter than three values name the affected bodies."""
    with pytest.raises(LayoutError, match=r'Moon \(2 of 3\)'):
        validate_layout(['Sun', 'Moon'], [(1, 2, 3), (7, 2)])


def test_layout_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        validate_layout([], [])


def test_check_block_lengths_flags_non_positive() -> None:
    """Zero and negative blocks are both reported, in roster order."""
    problems = check_block_lengths(['Sun', 'Moon', 'Mars'], [10, 0, -4])
    assert problems == ['Moon has block length 0', 'Mars has block length -4']


def test_check_block_lengths_sound_layout() -> None:
    assert check_block_lengths(['Sun', 'Moon'], [10, 9]) == []
