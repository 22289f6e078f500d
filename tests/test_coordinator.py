"""Tests for ListStateCoordinator transitions and notifications."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from termgrid.models import Pagination, Selection, SortDirection, SortState
from termgrid.state import ListStateCoordinator


@pytest.fixture
def coordinator() -> ListStateCoordinator:
    return ListStateCoordinator(total_items=25, page_size=10)


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


class TestPagination:
    def test_initial_state(self, coordinator):
        pagination = coordinator.pagination
        assert pagination.page == 0
        assert pagination.total_pages == 3
        assert pagination.has_next_page is True
        assert pagination.has_previous_page is False

    def test_requested_page_is_clamped(self, coordinator):
        snapshot = coordinator.handle_pagination_change(5, 10)
        assert snapshot.pagination.page == 2
        assert snapshot.pagination.has_next_page is False
        assert snapshot.pagination.has_previous_page is True

    def test_negative_page_clamps_to_zero(self, coordinator):
        assert coordinator.handle_pagination_change(-3, 10).pagination.page == 0

    def test_page_change_resets_highlight(self, coordinator):
        coordinator.handle_highlight_change(4)
        assert coordinator.handle_pagination_change(1, 10).highlighted_index == 0

    def test_page_change_can_land_on_a_row(self, coordinator):
        snapshot = coordinator.handle_pagination_change(1, 10, highlight=9)
        assert snapshot.pagination.page == 1
        assert snapshot.highlighted_index == 9

    def test_page_size_change_recomputes_pages(self, coordinator):
        snapshot = coordinator.handle_pagination_change(0, 5)
        assert snapshot.pagination.total_pages == 5

    def test_empty_dataset(self):
        coordinator = ListStateCoordinator(total_items=0, page_size=10)
        snapshot = coordinator.handle_pagination_change(3, 10)
        assert snapshot.pagination.page == 0
        assert snapshot.pagination.total_pages == 0
        assert snapshot.pagination.has_next_page is False
        assert snapshot.pagination.has_previous_page is False

    def test_invalid_page_size_rejected(self):
        with pytest.raises(ValueError):
            Pagination(page_size=0)

    def test_callback_receives_clamped_page(self):
        on_page = MagicMock()
        coordinator = ListStateCoordinator(total_items=25, on_pagination_change=on_page)
        coordinator.handle_pagination_change(9, 10)
        on_page.assert_called_once_with(2, 10)


# ---------------------------------------------------------------------------
# Search and sort
# ---------------------------------------------------------------------------


class TestSearchAndSort:
    def test_search_resets_to_first_page(self, coordinator):
        coordinator.handle_pagination_change(2, 10)
        snapshot = coordinator.handle_search_change("urgent", {"status": ["done"]})
        assert snapshot.search_query == "urgent"
        assert snapshot.filters == {"status": ("done",)}
        assert snapshot.pagination.page == 0
        assert snapshot.pagination.total_pages == 3

    def test_search_filters_are_copied(self, coordinator):
        filters = {"status": ["done"]}
        snapshot = coordinator.handle_search_change("", filters)
        filters["status"].append("todo")
        assert snapshot.filters == {"status": ("done",)}

    def test_search_callback(self):
        on_search = MagicMock()
        coordinator = ListStateCoordinator(total_items=5, on_search_change=on_search)
        coordinator.handle_search_change("x", {"k": ["v"]})
        on_search.assert_called_once_with("x", {"k": ["v"]})

    def test_published_filters_are_read_only(self, coordinator):
        snapshot = coordinator.handle_search_change("", {"status": ["done"]})
        with pytest.raises(TypeError):
            snapshot.filters["status"] = ("todo",)
        with pytest.raises(AttributeError):
            snapshot.filters["status"].append("todo")

    def test_search_returns_state_after_callback(self, coordinator):
        coordinator.on_search_change = lambda _q, _f: coordinator.handle_total_items_change(3)
        snapshot = coordinator.handle_search_change("x")
        assert snapshot is coordinator.snapshot
        assert snapshot.pagination.total_items == 3

    def test_sort_returns_state_after_callback(self, coordinator):
        coordinator.on_sort_change = lambda _sort: coordinator.handle_total_items_change(4)
        snapshot = coordinator.handle_sort_change(SortState("title"))
        assert snapshot is coordinator.snapshot
        assert snapshot.pagination.total_items == 4

    def test_sort_resets_to_first_page(self, coordinator):
        coordinator.handle_pagination_change(1, 10)
        sort = SortState("title", SortDirection.DESC)
        snapshot = coordinator.handle_sort_change(sort)
        assert snapshot.sort == sort
        assert snapshot.pagination.page == 0

    def test_sort_can_be_cleared(self, coordinator):
        coordinator.handle_sort_change(SortState("title"))
        on_sort = MagicMock()
        coordinator.on_sort_change = on_sort
        assert coordinator.handle_sort_change(None).sort is None
        on_sort.assert_called_once_with(None)

    def test_search_keeps_selection(self, coordinator):
        coordinator.handle_selection_change({3})
        assert 3 in coordinator.handle_search_change("x").selection


# ---------------------------------------------------------------------------
# Item count
# ---------------------------------------------------------------------------


class TestTotalItems:
    def test_shrinking_clamps_page_and_highlight(self, coordinator):
        coordinator.handle_pagination_change(2, 10, highlight=4)
        snapshot = coordinator.handle_total_items_change(12)
        assert snapshot.pagination.page == 1
        assert snapshot.highlighted_index == 1

    def test_growing_keeps_page(self, coordinator):
        coordinator.handle_pagination_change(1, 10)
        snapshot = coordinator.handle_total_items_change(100)
        assert snapshot.pagination.page == 1
        assert snapshot.pagination.total_pages == 10

    def test_unchanged_count_emits_nothing(self, coordinator):
        seen = []
        coordinator.snapshots.subscribe(on_next=seen.append)
        coordinator.handle_total_items_change(25)
        assert len(seen) == 1


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


class TestSelection:
    def test_single_mode_toggle_twice_is_empty(self):
        selection = Selection().toggled("a").toggled("a")
        assert len(selection) == 0

    def test_single_mode_keeps_last_toggled(self):
        selection = Selection().toggled("a").toggled("b")
        assert selection.keys == frozenset({"b"})

    def test_multiple_mode_accumulates(self):
        selection = Selection(multiple=True).toggled("a").toggled("b")
        assert selection.keys == frozenset({"a", "b"})

    def test_single_mode_rejects_two_keys(self, coordinator):
        with pytest.raises(ValueError):
            coordinator.handle_selection_change({"a", "b"})

    def test_selection_replaced_wholesale(self):
        on_select = MagicMock()
        coordinator = ListStateCoordinator(
            total_items=5, multiple=True, on_selection_change=on_select
        )
        keys = {1, 2}
        snapshot = coordinator.handle_selection_change(keys)
        keys.add(3)
        assert snapshot.selection.keys == frozenset({1, 2})
        on_select.assert_called_once_with(frozenset({1, 2}))


# ---------------------------------------------------------------------------
# Snapshot stream
# ---------------------------------------------------------------------------


class TestSnapshots:
    def test_subscriber_gets_current_then_each_change(self, coordinator):
        seen = []
        coordinator.snapshots.subscribe(on_next=seen.append)
        coordinator.handle_highlight_change(3)
        coordinator.handle_pagination_change(1, 10)
        assert [s.highlighted_index for s in seen] == [0, 3, 0]
        assert seen[-1].pagination.page == 1

    def test_snapshots_are_immutable(self, coordinator):
        before = coordinator.snapshot
        coordinator.handle_highlight_change(2)
        assert before.highlighted_index == 0
        assert coordinator.snapshot is not before

    def test_dispose_completes_stream(self, coordinator):
        completed = []
        coordinator.snapshots.subscribe(on_completed=lambda: completed.append(True))
        coordinator.dispose()
        assert completed == [True]
