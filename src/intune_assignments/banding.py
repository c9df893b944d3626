"""
Grouping & banding: sort rows for a view and give contiguous runs of equal
grouping-key values an alternating background color.

Banding depends on adjacency in the sorted order only. Two runs with the same
key value that are separated by another value get separate bands.
"""

from datetime import datetime
from itertools import accumulate
from typing import Any, List, Optional, Sequence, Tuple

from .schema import EnrichedRow

BAND_COLOR_A = "#FFFFFF"
BAND_COLOR_B = "#E8F0FA"
PALETTE = (BAND_COLOR_A, BAND_COLOR_B)

# Compares unequal to every real key value
_NO_PREVIOUS = object()


def _sort_value(value: Any) -> Tuple:
    # Case-insensitive text ordering; the exact value breaks ties so rows that
    # band together (exact equality) stay contiguous. Empty values sort last.
    if value is None or value == "":
        return (1, "")
    if isinstance(value, str):
        return (0, value.casefold(), value)
    if isinstance(value, datetime):
        return (0, value.isoformat())
    return (0, str(value))


def sort_rows(rows: Sequence[EnrichedRow], sort_keys: Sequence[str]) -> List[EnrichedRow]:
    """Stable sort by sort_keys, then by (app id, assignment id)."""
    return sorted(
        rows,
        key=lambda row: tuple(_sort_value(getattr(row, k)) for k in sort_keys) + row.row_key,
    )


def _toggle(color: Optional[str]) -> str:
    # No color yet: the first band always gets color A.
    return BAND_COLOR_B if color == BAND_COLOR_A else BAND_COLOR_A


def band_colors(values: Sequence[Any]) -> List[str]:
    """Fold over key values carrying (previous value, current color)."""

    def step(state, value):
        previous, color = state
        if value != previous:
            color = _toggle(color)
        return value, color

    states = accumulate(values, step, initial=(_NO_PREVIOUS, None))
    next(states)
    return [color for _, color in states]


def band(
    rows: Sequence[EnrichedRow],
    sort_keys: Sequence[str],
    group_key: str,
) -> List[EnrichedRow]:
    """Sorted copies of rows with band_color set; the input rows are untouched."""
    ordered = sort_rows(rows, sort_keys)
    colors = band_colors([getattr(row, group_key) for row in ordered])
    return [
        row.model_copy(update={"band_color": color})
        for row, color in zip(ordered, colors)
    ]
