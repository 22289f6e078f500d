"""Cell value extraction, custom renderers and sorting with per-cell isolation.

Column-supplied extractors and renderers are caller code: a failure in one
cell is logged and replaced with a fallback so the rest of the page still
renders.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, Union, runtime_checkable

from rich.cells import cell_len, set_cell_size
from rich.console import RenderableType

from termgrid.models import Align, SortDirection, SortState
from termgrid.telemetry import get_telemetry

if TYPE_CHECKING:
    from termgrid.models import Column

RenderableContent = Union[str, int, float, RenderableType]

_MISSING = object()


@runtime_checkable
class CellRenderer(Protocol):
    """Capability for custom cell content."""

    def render(self, value: Any, item: Any, row_index: int) -> RenderableContent: ...


def resolve_cell_value(
    column: Column,
    item: Any,
    default: Any = None,
    row_index: int | None = None,
) -> Any:
    """``column.extract(item)``, or ``default`` if the extractor raises."""
    try:
        return column.extract(item)
    except Exception as exc:
        get_telemetry().cell_failure("extract", column.key, exc, row=row_index)
        return default


def render_cell(
    column: Column,
    item: Any,
    row_index: int,
    fallback: RenderableContent = "",
) -> RenderableContent:
    """Content for one cell.

    Uses the column's renderer when present, otherwise the raw value
    (``None`` becomes an empty string). Any failure yields ``fallback``.
    """
    value = resolve_cell_value(column, item, default=_MISSING, row_index=row_index)
    if value is _MISSING:
        return fallback
    if column.render is None:
        return "" if value is None else value
    try:
        return column.render.render(value, item, row_index)
    except Exception as exc:
        get_telemetry().cell_failure("render", column.key, exc, row=row_index)
        return fallback


def fit_cell(text: str, width: int, align: Align = Align.LEFT) -> str:
    """Pad or truncate ``text`` to exactly ``width`` terminal cells."""
    if width <= 0:
        return ""
    if cell_len(text) > width:
        if width == 1:
            return set_cell_size(text, 1)
        return set_cell_size(text, width - 1) + "…"
    pad = width - cell_len(text)
    if align == Align.RIGHT:
        return " " * pad + text
    if align == Align.CENTER:
        left = pad // 2
        return " " * left + text + " " * (pad - left)
    return text + " " * pad


def sort_key_for(column: Column, item: Any) -> Any:
    """Sort value for ``item``: ``get_sort_value`` or the cell value."""
    extractor = column.get_sort_value or column.extract
    return extractor(item)


def sort_items(
    items: Sequence[Any],
    columns: Sequence[Column],
    sort: SortState | None,
) -> list[Any]:
    """Return ``items`` ordered by ``sort``.

    Rows whose sort value is ``None`` or whose extractor fails go last in
    either direction. An unknown column leaves the order unchanged.
    """
    if sort is None:
        return list(items)
    column = next((c for c in columns if c.key == sort.column), None)
    if column is None:
        get_telemetry().log.warning(f"sort on unknown column={sort.column!r}")
        return list(items)

    present: list[tuple[Any, Any]] = []
    missing: list[Any] = []
    for item in items:
        try:
            value = sort_key_for(column, item)
        except Exception as exc:
            get_telemetry().cell_failure("sort", column.key, exc)
            missing.append(item)
            continue
        if value is None:
            missing.append(item)
        else:
            present.append((value, item))

    reverse = sort.direction == SortDirection.DESC
    try:
        present.sort(key=lambda pair: pair[0], reverse=reverse)
    except TypeError:
        present.sort(key=lambda pair: str(pair[0]), reverse=reverse)
    return [item for _, item in present] + missing


def _cell_string(column: Column, item: Any) -> str:
    value = resolve_cell_value(column, item)
    return "" if value is None else str(value)


def filter_items(
    items: Sequence[Any],
    columns: Sequence[Column],
    text: str = "",
    filters: Mapping[str, Sequence[str]] | None = None,
) -> list[Any]:
    """Items matching a parsed search.

    Free text matches when it occurs (case-insensitively) in any column's
    value. Each filter key must equal one of its values, compared without
    case, on the column of that key. Filters on keys with no column match
    nothing.
    """
    needle = text.lower()
    by_key = {c.key: c for c in columns}
    wanted = {k: {v.lower() for v in vs} for k, vs in (filters or {}).items() if vs}

    matched = []
    for item in items:
        if needle and not any(needle in _cell_string(c, item).lower() for c in columns):
            continue
        if any(
            key not in by_key or _cell_string(by_key[key], item).lower() not in values
            for key, values in wanted.items()
        ):
            continue
        matched.append(item)
    return matched
