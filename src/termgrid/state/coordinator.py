"""Central list state: search, sort, pagination, selection and highlight.

Every handler builds a new frozen ListSnapshot and swaps it in whole, so a
reader never sees a half-applied transition. Snapshots are also pushed
through a reactivex BehaviorSubject for painting-layer subscribers.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace

from reactivex.subject import BehaviorSubject

from termgrid.models import Pagination, Selection, SortState, freeze_filters
from termgrid.telemetry import get_telemetry

SearchChangeHandler = Callable[[str, dict[str, list[str]]], None]
SortChangeHandler = Callable[[SortState | None], None]
PaginationChangeHandler = Callable[[int, int], None]
SelectionChangeHandler = Callable[[frozenset], None]


@dataclass(frozen=True)
class ListSnapshot:
    """Immutable view state consumed by the controller and painting layer."""

    search_query: str = ""
    filters: Mapping[str, tuple[str, ...]] = field(default_factory=freeze_filters)
    sort: SortState | None = None
    pagination: Pagination = field(default_factory=Pagination)
    selection: Selection = field(default_factory=Selection)
    highlighted_index: int = 0


class ListStateCoordinator:
    """Owns list view state and applies its reset-on-change rules.

    Search and sort changes return to page 0; explicit pagination changes
    clamp the requested page and reset the highlight; item-count changes
    re-clamp without leaving the current page unless it no longer exists.
    """

    def __init__(
        self,
        total_items: int = 0,
        page_size: int = 10,
        multiple: bool = False,
        initial_query: str = "",
        initial_sort: SortState | None = None,
        initial_selection: Iterable[Hashable] = (),
        on_search_change: SearchChangeHandler | None = None,
        on_sort_change: SortChangeHandler | None = None,
        on_pagination_change: PaginationChangeHandler | None = None,
        on_selection_change: SelectionChangeHandler | None = None,
    ) -> None:
        self.multiple = multiple
        self.on_search_change = on_search_change
        self.on_sort_change = on_sort_change
        self.on_pagination_change = on_pagination_change
        self.on_selection_change = on_selection_change
        self._snapshot = ListSnapshot(
            search_query=initial_query,
            sort=initial_sort,
            pagination=Pagination.create(total_items, page_size),
            selection=Selection(frozenset(initial_selection), multiple),
        )
        self.snapshots: BehaviorSubject = BehaviorSubject(self._snapshot)

    @property
    def snapshot(self) -> ListSnapshot:
        return self._snapshot

    @property
    def pagination(self) -> Pagination:
        return self._snapshot.pagination

    def _replace(self, **changes) -> ListSnapshot:
        self._snapshot = replace(self._snapshot, **changes)
        get_telemetry().log.debug(f"list state changed fields={sorted(changes)}")
        self.snapshots.on_next(self._snapshot)
        return self._snapshot

    def _first_page(self) -> Pagination:
        current = self._snapshot.pagination
        return Pagination.create(current.total_items, current.page_size, 0)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def handle_search_change(
        self,
        query: str,
        filters: Mapping[str, Sequence[str]] | None = None,
    ) -> ListSnapshot:
        """Store the query and its parsed filters, back to page 0."""
        self._replace(
            search_query=query,
            filters=freeze_filters(filters or {}),
            pagination=self._first_page(),
        )
        if self.on_search_change is not None:
            filters_copy = {key: list(values) for key, values in self._snapshot.filters.items()}
            self.on_search_change(query, filters_copy)
        return self._snapshot

    def handle_sort_change(self, sort: SortState | None) -> ListSnapshot:
        """Store (or clear) the sort, back to page 0."""
        self._replace(sort=sort, pagination=self._first_page())
        if self.on_sort_change is not None:
            self.on_sort_change(sort)
        return self._snapshot

    def handle_pagination_change(
        self,
        page: int,
        page_size: int,
        highlight: int = 0,
    ) -> ListSnapshot:
        """Move to ``page`` (clamped) with ``page_size``.

        The highlight resets to ``highlight`` (0 unless a cross-page move
        asks for another row) in the same snapshot swap.
        """
        pagination = Pagination.create(self._snapshot.pagination.total_items, page_size, page)
        if pagination.page != page:
            get_telemetry().log.debug(
                f"page clamped requested={page} page={pagination.page} "
                f"total_pages={pagination.total_pages}"
            )
        self._replace(pagination=pagination, highlighted_index=max(0, highlight))
        if self.on_pagination_change is not None:
            self.on_pagination_change(pagination.page, pagination.page_size)
        return self._snapshot

    def handle_total_items_change(self, total_items: int) -> ListSnapshot:
        """Re-derive page counts for a new item count, keeping the page if valid."""
        current = self._snapshot.pagination
        if total_items == current.total_items:
            return self._snapshot
        pagination = Pagination.create(total_items, current.page_size, current.page)
        highlighted = min(self._snapshot.highlighted_index, max(0, pagination.page_item_count - 1))
        return self._replace(pagination=pagination, highlighted_index=highlighted)

    def handle_selection_change(self, keys: Iterable[Hashable]) -> ListSnapshot:
        """Replace the selection wholesale with a copy of ``keys``."""
        selection = Selection(frozenset(keys), self.multiple)
        self._replace(selection=selection)
        if self.on_selection_change is not None:
            self.on_selection_change(selection.keys)
        return self._snapshot

    def handle_highlight_change(self, index: int) -> ListSnapshot:
        """Set the highlighted row, never below 0."""
        return self._replace(highlighted_index=max(0, index))

    def dispose(self) -> None:
        """Complete the snapshot stream."""
        self.snapshots.on_completed()
