"""Column width allocation for terminal list views.

Fixed columns take their requested width (clamped), then flexible columns
split what is left evenly. Integer remainders go one cell each to the
first flexible columns, so the budget is consumed exactly.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from termgrid.models import Column

logger = logging.getLogger(__name__)

SORT_INDICATOR_WIDTH = 2  # glyph plus separating space
CELL_PADDING_WIDTH = 2  # one cell each side


class AllocationKind(str, Enum):
    """How a column's width was arrived at."""

    FIXED = "fixed"
    CONSTRAINED = "constrained"
    FLEXIBLE = "flexible"


@dataclass(frozen=True)
class ColumnLayoutConfig:
    """Width budget and global bounds for one allocation pass."""

    terminal_width: int
    column_gap: int = 1
    reserved_width: int = 4
    min_column_width: int = 8
    max_column_width: int = 50

    def __post_init__(self) -> None:
        for name in ("column_gap", "reserved_width", "min_column_width", "max_column_width"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")


def default_column_config(terminal_width: int) -> ColumnLayoutConfig:
    """Default bounds: gap 1, reserved 4, columns between 8 and 50 cells."""
    return ColumnLayoutConfig(terminal_width=terminal_width)


@dataclass(frozen=True)
class AllocatedColumn:
    """A column with its computed width."""

    column: Column
    width: int
    kind: AllocationKind
    truncated: bool


@dataclass(frozen=True)
class ColumnLayout:
    """Result of an allocation pass, in column declaration order."""

    columns: list[AllocatedColumn] = field(default_factory=list)
    widths: list[int] = field(default_factory=list)
    total_width: int = 0
    fits_in_terminal: bool = True
    remaining_width: int = 0


def header_minimum(column: Column) -> int:
    """Cells needed to show the column label untruncated.

    Label length, plus the sort indicator for sortable columns, plus cell
    padding.
    """
    indicator = SORT_INDICATOR_WIDTH if column.sortable else 0
    return len(column.label) + indicator + CELL_PADDING_WIDTH


def column_bounds(column: Column, config: ColumnLayoutConfig) -> tuple[int, int]:
    """``(lower, upper)`` width bounds for ``column``.

    The lower bound wins when the two conflict, so a label is never cut
    below its header minimum.
    """
    upper = config.max_column_width
    if column.max_width is not None:
        upper = min(upper, column.max_width)
    lower = config.min_column_width
    if column.min_width is not None:
        lower = max(lower, column.min_width)
    lower = max(lower, header_minimum(column))
    return lower, upper


def clamp_width(width: int, lower: int, upper: int) -> int:
    return max(lower, min(width, upper))


def calculate_column_widths(
    columns: Sequence[Column],
    config: ColumnLayoutConfig,
) -> ColumnLayout:
    """Allocate a width to every column.

    Args:
        columns: Column descriptors in display order.
        config: Terminal width, gap, reserved width and global bounds.

    Returns:
        ColumnLayout. ``fits_in_terminal`` compares the total (widths plus
        gaps) against ``terminal_width - reserved_width``.
        ``remaining_width`` is 0 whenever a flexible column exists, since
        flexible columns absorb the leftover budget.
    """
    budget = config.terminal_width - config.reserved_width
    if not columns:
        return ColumnLayout(remaining_width=max(0, budget))

    gap_width = config.column_gap * (len(columns) - 1)
    available = max(0, budget - gap_width)

    allocated: list[AllocatedColumn | None] = [None] * len(columns)
    used = 0
    flex_indices: list[int] = []

    for index, column in enumerate(columns):
        if column.is_flexible:
            flex_indices.append(index)
            continue
        requested = int(column.width)
        lower, upper = column_bounds(column, config)
        width = clamp_width(requested, lower, upper)
        constrained = width != requested
        allocated[index] = AllocatedColumn(
            column=column,
            width=width,
            kind=AllocationKind.CONSTRAINED if constrained else AllocationKind.FIXED,
            truncated=width < requested,
        )
        used += width

    if flex_indices:
        remaining = max(0, available - used)
        base, extra = divmod(remaining, len(flex_indices))
        for position, index in enumerate(flex_indices):
            column = columns[index]
            share = base + (1 if position < extra else 0)
            lower, upper = column_bounds(column, config)
            width = clamp_width(share, lower, upper)
            allocated[index] = AllocatedColumn(
                column=column,
                width=width,
                kind=AllocationKind.FLEXIBLE,
                truncated=width < share,
            )
            used += width

    result = [a for a in allocated if a is not None]
    total_width = used + gap_width
    fits = total_width <= budget
    remaining_width = 0 if flex_indices else max(0, budget - total_width)

    if not fits:
        logger.debug(
            "columns overflow terminal total=%d budget=%d columns=%d",
            total_width,
            budget,
            len(columns),
        )

    return ColumnLayout(
        columns=result,
        widths=[a.width for a in result],
        total_width=total_width,
        fits_in_terminal=fits,
        remaining_width=remaining_width,
    )


def calculate_minimum_width(columns: Sequence[Column], config: ColumnLayoutConfig) -> int:
    """Smallest terminal width at which every column gets its lower bound."""
    if not columns:
        return config.reserved_width
    minimums = sum(column_bounds(column, config)[0] for column in columns)
    return minimums + config.column_gap * (len(columns) - 1) + config.reserved_width


def can_fit_columns(
    columns: Sequence[Column],
    terminal_width: int,
    config: ColumnLayoutConfig | None = None,
) -> bool:
    """Whether ``terminal_width`` can hold every column at its minimum."""
    config = config or default_column_config(terminal_width)
    return terminal_width >= calculate_minimum_width(columns, config)


class ColumnWidthCache:
    """Memoize the last allocation so repeated resizes to one width are free."""

    def __init__(self, columns: Sequence[Column]) -> None:
        self.columns = tuple(columns)
        self._key: ColumnLayoutConfig | None = None
        self._layout: ColumnLayout | None = None

    def layout(self, config: ColumnLayoutConfig) -> ColumnLayout:
        if self._layout is None or self._key != config:
            self._layout = calculate_column_widths(self.columns, config)
            self._key = config
        return self._layout
