"""Coefficient block layout: how many coefficients each body owns in a record."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from jpl_ephemeris.constants import POINTER_WIDTH
from jpl_ephemeris.errors import LayoutError

logger = logging.getLogger(__name__)


def validate_layout(
    names: Sequence[str],
    pointers: Sequence[Sequence[int]],
    pointer_columns: int | None = None,
) -> None:
    """Check that the roster and the header pointers line up body for body.

    Parameters:
        names: Roster body names, canonical order.
        pointers: One pointer row per roster body.
        pointer_columns: Number of bodies the header's pointer record
            describes, when known.

    Raises:
        LayoutError: Counts differ or a row is not a full triplet.
    """
    if not names:
        raise LayoutError('Body roster is empty; nothing to lay out')
    if pointer_columns is not None and pointer_columns != len(names):
        raise LayoutError(
            f'Header pointer record describes {pointer_columns} bodies but the roster '
            f'lists {len(names)}: {", ".join(names)}'
        )
    if len(pointers) != len(names):
        raise LayoutError(f'{len(pointers)} pointer rows for {len(names)} roster bodies')
    incomplete = [
        f'{name} ({len(row)} of {POINTER_WIDTH})'
        for name, row in zip(names, pointers)
        if len(row) != POINTER_WIDTH
    ]
    if incomplete:
        raise LayoutError(f'Incomplete pointer triplets: {", ".join(incomplete)}')


def compute_block_lengths(
    pointers: Sequence[Sequence[int]], coefficient_count: int
) -> tuple[int, ...]:
    """Coefficient block length of each body.

    Each body's block runs from its start offset to the next body's start
    offset; the last one runs to coefficient_count.

    Parameters:
        pointers: Pointer rows in roster order; element 0 is the start offset.
        coefficient_count: NCOEFF from the header.

    Returns:
        Block lengths in roster order.

    Raises:
        LayoutError: No pointer rows, or a row without a start offset.
    """
    if not pointers:
        raise LayoutError('No pointer data to compute coefficient blocks from')
    starts: list[int] = []
    for i, row in enumerate(pointers):
        if not row:
            raise LayoutError(f'Pointer row {i} has no start offset')
        starts.append(row[0])
    lengths = [nxt - cur for cur, nxt in zip(starts, starts[1:])]
    lengths.append(coefficient_count - starts[-1])
    return tuple(lengths)


def check_block_lengths(names: Sequence[str], lengths: Sequence[int]) -> list[str]:
    """Describe every body whose block length is not positive.

    Returns:
        One message per offending body; empty when the layout is sound.
    """
    problems = [
        f'{name} has block length {length}'
        for name, length in zip(names, lengths)
        if length <= 0
    ]
    for problem in problems:
        logger.debug('Layout: %s', problem)
    return problems
