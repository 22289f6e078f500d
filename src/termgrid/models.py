"""Data models and enums for the termgrid list runtime."""

from __future__ import annotations

import math
from collections.abc import Callable, Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Literal, Union

if TYPE_CHECKING:
    from termgrid.render import CellRenderer


FLEXIBLE: Literal["flexible"] = "flexible"

ColumnWidth = Union[int, Literal["flexible"]]


class Align(str, Enum):
    """Text alignment of a column's cells."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class SortDirection(str, Enum):
    """Direction of an active sort."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Column:
    """Column descriptor for a list view.

    ``width`` is either a fixed number of cells or ``FLEXIBLE``, in which
    case the column receives a share of the width left after fixed columns.
    Descriptors are read-only for the lifetime of a view.
    """

    key: str
    label: str
    width: ColumnWidth = FLEXIBLE
    min_width: int | None = None
    max_width: int | None = None
    sortable: bool = False
    align: Align = Align.LEFT
    get_value: Callable[[Any], Any] | None = field(default=None, compare=False)
    get_sort_value: Callable[[Any], Any] | None = field(default=None, compare=False)
    render: CellRenderer | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.width != FLEXIBLE:
            if isinstance(self.width, bool) or not isinstance(self.width, int):
                raise ValueError(
                    f"column {self.key!r}: width must be an int or {FLEXIBLE!r}, "
                    f"got {self.width!r}"
                )
            if self.width < 0:
                raise ValueError(f"column {self.key!r}: width must be >= 0")
        if isinstance(self.align, str) and not isinstance(self.align, Align):
            object.__setattr__(self, "align", Align(self.align))

    @property
    def is_flexible(self) -> bool:
        return self.width == FLEXIBLE

    def extract(self, item: Any) -> Any:
        """Return this column's raw value for ``item``.

        Uses ``get_value`` when supplied, else a mapping lookup or an
        attribute read keyed by the column key. May raise; callers that
        must not fail use ``termgrid.render.resolve_cell_value``.
        """
        if self.get_value is not None:
            return self.get_value(item)
        if isinstance(item, Mapping):
            return item.get(self.key)
        return getattr(item, self.key, None)


@dataclass(frozen=True)
class SortState:
    """Active sort: a column key and a direction."""

    column: str
    direction: SortDirection = SortDirection.ASC

    def toggled(self) -> SortState | None:
        """Next state in the header cycle asc -> desc -> unsorted."""
        if self.direction == SortDirection.ASC:
            return SortState(self.column, SortDirection.DESC)
        return None


def next_sort(current: SortState | None, column_key: str) -> SortState | None:
    """Sort state after activating ``column_key`` in a header."""
    if current is None or current.column != column_key:
        return SortState(column_key, SortDirection.ASC)
    return current.toggled()


def total_pages_for(total_items: int, page_size: int) -> int:
    """``ceil(total_items / page_size)``; 0 for an empty dataset."""
    if total_items <= 0:
        return 0
    return math.ceil(total_items / page_size)


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp ``page`` into ``[0, total_pages - 1]`` (0 when there are no pages)."""
    return max(0, min(page, total_pages - 1))


@dataclass(frozen=True)
class Pagination:
    """Pagination snapshot with derived page counts.

    Build through ``Pagination.create`` to get a clamped page; the
    invariant ``0 <= page <= max(0, total_pages - 1)`` holds for every
    instance the coordinator produces.
    """

    page: int = 0
    page_size: int = 10
    total_items: int = 0

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        if self.total_items < 0:
            raise ValueError(f"total_items must be >= 0, got {self.total_items}")

    @classmethod
    def create(cls, total_items: int, page_size: int = 10, page: int = 0) -> Pagination:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        total_items = max(0, total_items)
        pages = total_pages_for(total_items, page_size)
        return cls(page=clamp_page(page, pages), page_size=page_size, total_items=total_items)

    @property
    def total_pages(self) -> int:
        return total_pages_for(self.total_items, self.page_size)

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages - 1

    @property
    def has_previous_page(self) -> bool:
        return self.page > 0

    @property
    def start_index(self) -> int:
        return self.page * self.page_size

    @property
    def end_index(self) -> int:
        return min(self.start_index + self.page_size, self.total_items)

    @property
    def page_item_count(self) -> int:
        return max(0, self.end_index - self.start_index)


@dataclass(frozen=True)
class Selection:
    """Set of selected item identifiers.

    In single mode (``multiple=False``) at most one key is kept.
    """

    keys: frozenset[Hashable] = frozenset()
    multiple: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.keys, frozenset):
            object.__setattr__(self, "keys", frozenset(self.keys))
        if not self.multiple and len(self.keys) > 1:
            raise ValueError("single-select selection cannot hold more than one key")

    def __contains__(self, key: object) -> bool:
        return key in self.keys

    def __len__(self) -> int:
        return len(self.keys)

    def toggled(self, key: Hashable) -> Selection:
        """Selection after toggling ``key``.

        Removes an already-selected key; otherwise adds it, first clearing
        the set in single mode.
        """
        if key in self.keys:
            return Selection(self.keys - {key}, self.multiple)
        if not self.multiple:
            return Selection(frozenset({key}), self.multiple)
        return Selection(self.keys | {key}, self.multiple)


@dataclass(frozen=True)
class SearchShortcut:
    """A recognized search filter key with an optional closed set of values."""

    key: str
    label: str = ""
    values: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if self.values is not None and not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))

    def accepts(self, value: str) -> bool:
        return self.values is None or value in self.values


def freeze_filters(
    filters: Mapping[str, Iterable[str]] | None = None,
) -> Mapping[str, tuple[str, ...]]:
    """Read-only ``key -> (values...)`` copy, insertion order kept."""
    return MappingProxyType({key: tuple(values) for key, values in (filters or {}).items()})


@dataclass(frozen=True)
class ParsedSearch:
    """Free text plus recognized ``key -> [values]`` filters."""

    text: str = ""
    filters: Mapping[str, tuple[str, ...]] = field(default_factory=freeze_filters)

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", freeze_filters(self.filters))

    def is_empty(self) -> bool:
        return not self.text and not self.filters


@dataclass(frozen=True)
class KeyEvent:
    """A single keyboard input event.

    ``key`` carries a named special key (``"up"``, ``"pagedown"``,
    ``"enter"``) and ``character`` a printable literal; either may be None.
    """

    key: str | None = None
    character: str | None = None
    ctrl: bool = False
    shift: bool = False
    meta: bool = False
