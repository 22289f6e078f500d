"""termgrid demo application.

Textual App wiring a SearchBar and a GridView around one
ListStateCoordinator. The App owns the full item list; every search or
sort change re-filters and re-sorts it and hands the result to the grid.
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import Any, Callable

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Static

from termgrid.config import GridConfig, default_config
from termgrid.models import Column, SortState
from termgrid.render import filter_items, sort_items
from termgrid.search import parse_search_query
from termgrid.state import FooterHelpContext, ListSnapshot, ListStateCoordinator
from termgrid.telemetry import Telemetry, set_telemetry
from termgrid.tui.messages import ItemActivated, SearchRequested
from termgrid.tui.widgets import GridView, SearchBar


def status_line(snapshot: ListSnapshot) -> str:
    pagination = snapshot.pagination
    page = f"page {pagination.page + 1}/{max(1, pagination.total_pages)}"
    parts = [f"{pagination.total_items} items", page, f"{len(snapshot.selection)} selected"]
    if snapshot.sort is not None:
        parts.append(f"sort: {snapshot.sort.column} {snapshot.sort.direction.value}")
    return " | ".join(parts)


class GridApp(App):
    """Searchable, sortable, paged list of items."""

    TITLE = "termgrid"
    SUB_TITLE = "Search, sort and page through a list"
    AUTO_FOCUS = "GridView"

    CSS = """
    #status-bar {
        dock: bottom;
        height: 1;
        background: $primary-background;
        color: $text;
        padding: 0 1;
    }

    #footer-help {
        dock: bottom;
        height: 1;
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("slash", "focus_search", "Search"),
        ("escape", "quit", "Exit"),
    ]

    def __init__(
        self,
        columns: Sequence[Column],
        items: Sequence[Any],
        config: GridConfig | None = None,
        item_key: Callable[[Any], Hashable] | None = None,
        initial_sort: SortState | None = None,
        on_item_action: Callable[[Any, int], None] | None = None,
        telemetry: Telemetry | None = None,
    ) -> None:
        super().__init__()
        self.columns = tuple(columns)
        self.all_items = list(items)
        self.config = config if config is not None else default_config()
        self.item_key = item_key
        self.on_item_action = on_item_action
        self.telemetry = telemetry if telemetry is not None else Telemetry.noop()
        set_telemetry(self.telemetry)
        self.shortcuts = self.config.search_shortcuts()
        self.footer_help = FooterHelpContext()
        self.coordinator = ListStateCoordinator(
            total_items=len(self.all_items),
            page_size=self.config.page_size,
            multiple=self.config.multiple,
            initial_sort=initial_sort,
            on_search_change=lambda _query, _filters: self._refresh_items(),
            on_sort_change=lambda _sort: self._refresh_items(),
        )
        self._subscriptions: list = []
        self._unsubscribe_help: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield SearchBar(shortcuts=self.shortcuts, delay=self.config.debounce_seconds)
        yield GridView(
            self.columns,
            self.coordinator,
            self.config,
            footer_help=self.footer_help,
            item_key=self.item_key,
            items=self.all_items,
        )
        yield Static("", id="footer-help")
        yield Static("", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        with self.telemetry.span(
            "app.mount", item_count=len(self.all_items), column_count=len(self.columns)
        ):
            self._unsubscribe_help = self.footer_help.subscribe(self._show_help)
            self._subscriptions.append(
                self.coordinator.snapshots.subscribe(on_next=self._show_status)
            )
            self._refresh_items()
        self.query_one(GridView).focus()
        self.telemetry.log.info("app mounted")

    def on_unmount(self) -> None:
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()
        if self._unsubscribe_help is not None:
            self._unsubscribe_help()
        self.coordinator.dispose()

    # ------------------------------------------------------------------
    # List state
    # ------------------------------------------------------------------

    def _refresh_items(self) -> None:
        """Re-filter and re-sort the full item list into the grid."""
        snapshot = self.coordinator.snapshot
        with self.telemetry.span("grid.refresh") as span:
            text = parse_search_query(snapshot.search_query, self.shortcuts).text
            visible = filter_items(self.all_items, self.columns, text, snapshot.filters)
            visible = sort_items(visible, self.columns, snapshot.sort)
            span.set(visible_count=len(visible), filter_count=len(snapshot.filters))
        self.query_one(GridView).set_items(visible)

    def _show_status(self, snapshot: ListSnapshot) -> None:
        self.query_one("#status-bar", Static).update(status_line(snapshot))

    def _show_help(self, text: str | None) -> None:
        self.query_one("#footer-help", Static).update(text or "")

    # ------------------------------------------------------------------
    # Message handlers
    # ------------------------------------------------------------------

    def on_search_requested(self, event: SearchRequested) -> None:
        self.telemetry.log.info(
            f"search requested query={event.query!r} filters={sorted(event.filters)}"
        )
        self.coordinator.handle_search_change(event.query, event.filters)

    def on_item_activated(self, event: ItemActivated) -> None:
        self.telemetry.log.info(f"item activated index={event.index}")
        if self.on_item_action is not None:
            self.on_item_action(event.item, event.index)
        else:
            self.notify(f"Activated row {event.index + 1}")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_focus_search(self) -> None:
        self.query_one(SearchBar).focus()
