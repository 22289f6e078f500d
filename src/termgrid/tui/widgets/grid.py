"""Grid widget: a paged, keyboard-driven table painted with rich Text.

The widget owns no list state. It reads ListStateCoordinator snapshots,
forwards key events to a ListKeyboardController, and recomputes column
widths from its own size on every paint (memoized per width).
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import Any, Callable

from rich.text import Text
from textual import events
from textual.widget import Widget

from termgrid.config import GridConfig
from termgrid.keyboard import (
    NAVIGATION_HELP,
    ListKeyboardController,
    parse_key_event,
    resolve_action,
)
from termgrid.layout import ColumnLayout, ColumnWidthCache
from termgrid.models import Align, Column, SortDirection, next_sort
from termgrid.render import RenderableContent, fit_cell, render_cell
from termgrid.state import FooterHelpContext, ListStateCoordinator
from termgrid.telemetry import get_telemetry
from termgrid.tui.messages import ItemActivated

SORT_GLYPHS = {SortDirection.ASC: " ▲", SortDirection.DESC: " ▼"}
CURSOR_MARK = "> "
SELECTED_MARK = "● "


def cell_text(content: RenderableContent, width: int, align: Align) -> Text:
    """Fit rendered cell content into exactly ``width`` cells."""
    if isinstance(content, Text):
        text = content.copy()
        if text.cell_len > width:
            text.truncate(width, overflow="ellipsis")
        else:
            text.align(align.value, width)
        return text
    return Text(fit_cell(str(content), width, align))


class GridView(Widget, can_focus=True):
    """Paged table of items with a highlight cursor and selection marks.

    Digits 1-9 cycle the sort on the matching column when it is sortable;
    every other key goes through the list key bindings.
    """

    DEFAULT_CSS = """
    GridView {
        height: 1fr;
        padding: 0 1;
    }
    GridView:focus {
        background: $boost;
    }
    """

    def __init__(
        self,
        columns: Sequence[Column],
        coordinator: ListStateCoordinator,
        config: GridConfig,
        footer_help: FooterHelpContext | None = None,
        item_key: Callable[[Any], Hashable] | None = None,
        items: Sequence[Any] = (),
    ) -> None:
        super().__init__(id="grid")
        self.columns = tuple(columns)
        self.coordinator = coordinator
        self.config = config
        self.footer_help = footer_help
        self.cache = ColumnWidthCache(self.columns)
        self.controller = ListKeyboardController(
            coordinator,
            items=items,
            item_key=item_key,
            key_bindings=config.key_bindings,
            on_item_action=self._on_item_action,
        )
        self._subscription = None

    def on_mount(self) -> None:
        self._subscription = self.coordinator.snapshots.subscribe(
            on_next=lambda _snapshot: self.refresh()
        )

    def on_unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None

    def on_focus(self, event: events.Focus) -> None:
        self.controller.set_focus(True)
        if self.footer_help is not None:
            self.footer_help.bind(NAVIGATION_HELP, True)

    def on_blur(self, event: events.Blur) -> None:
        self.controller.set_focus(False)
        if self.footer_help is not None:
            self.footer_help.bind(NAVIGATION_HELP, False)

    def on_resize(self, event: events.Resize) -> None:
        self.refresh()

    def on_key(self, event: events.Key) -> None:
        key_event = parse_key_event(event.key, event.character)
        if resolve_action(key_event, self.controller.bindings) is not None:
            event.stop()
            event.prevent_default()
            self.controller.handle_key(key_event)
            return
        if event.character and event.character in "123456789":
            index = int(event.character) - 1
            if index < len(self.columns) and self.columns[index].sortable:
                event.stop()
                self.cycle_sort(self.columns[index].key)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_items(self, items: Sequence[Any]) -> None:
        """Show a new filtered and sorted item list."""
        self.controller.set_items(items)
        self.refresh()

    def cycle_sort(self, column_key: str) -> None:
        """Advance ``column_key`` through ascending, descending and unsorted."""
        sort = next_sort(self.coordinator.snapshot.sort, column_key)
        get_telemetry().log.info(f"sort cycled column={column_key!r} sort={sort}")
        self.coordinator.handle_sort_change(sort)

    def current_layout(self) -> ColumnLayout:
        return self.cache.layout(self.config.layout_for(self.size.width))

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def render(self) -> Text:
        layout = self.current_layout()
        gap = " " * self.config.layout.column_gap
        reserved = " " * self.config.layout.reserved_width
        output = Text(no_wrap=True, overflow="crop")
        output.append(reserved)
        output.append_text(self._header(layout, gap))

        ctx = self.controller.context()
        if not ctx.page_items:
            output.append("\n")
            output.append("No matching items", style="dim italic")
            return output

        start = ctx.pagination.start_index
        for row, item in enumerate(ctx.page_items):
            absolute = start + row
            highlighted = row == ctx.highlighted
            selected = ctx.key_at(absolute) in ctx.snapshot.selection
            line = Text()
            line.append(CURSOR_MARK if highlighted else " " * len(CURSOR_MARK), style="bold")
            line.append(SELECTED_MARK if selected else " " * len(SELECTED_MARK), style="green")
            cells = [
                cell_text(render_cell(col.column, item, absolute), col.width, col.column.align)
                for col in layout.columns
            ]
            line.append_text(Text(gap).join(cells))
            if highlighted:
                line.stylize("reverse" if self.has_focus else "bold")
            output.append("\n")
            output.append_text(line)
        return output

    def _header(self, layout: ColumnLayout, gap: str) -> Text:
        sort = self.coordinator.snapshot.sort
        labels = []
        for allocated in layout.columns:
            column = allocated.column
            label = column.label
            if sort is not None and sort.column == column.key:
                label += SORT_GLYPHS[sort.direction]
            labels.append(Text(fit_cell(label, allocated.width, column.align), style="bold underline"))
        return Text(gap).join(labels)

    def _on_item_action(self, item: Any, index: int) -> None:
        self.post_message(ItemActivated(item=item, index=index))
