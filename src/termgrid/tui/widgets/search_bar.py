"""Search bar widget with debounced parsing and filter completion.

Extends Textual's Input. Typing is coalesced by a SearchDebouncer running
on the widget's own timers; Enter fires immediately and Tab completes the
filter token under the cursor.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from textual import events
from textual.widgets import Input

from termgrid.models import SearchShortcut
from termgrid.search import (
    DEFAULT_DEBOUNCE_SECONDS,
    SearchDebouncer,
    apply_suggestion,
    get_search_suggestions,
    validate_search_query,
)
from termgrid.telemetry import get_telemetry
from termgrid.tui.messages import SearchRequested


class SearchBar(Input):
    """Search input posting SearchRequested with the parsed filters.

    Invalid filter values are shown in the border subtitle; the search is
    still posted so the list reflects what was typed.
    """

    DEFAULT_CSS = """
    SearchBar {
        dock: top;
        height: 3;
        padding: 0 1;
        border: solid $primary;
    }
    SearchBar.-invalid {
        border: solid $error;
    }
    """

    def __init__(
        self,
        shortcuts: Sequence[SearchShortcut] = (),
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        value: str = "",
    ) -> None:
        keys = " ".join(f"{s.key}:" for s in shortcuts)
        placeholder = "Search..." + (f" (filters: {keys})" if keys else "")
        super().__init__(value=value, placeholder=placeholder, id="search-bar")
        self.shortcuts = tuple(shortcuts)
        self.debouncer = SearchDebouncer(
            on_search=self._post_search,
            set_timer=self.set_timer,
            shortcuts=self.shortcuts,
            delay=delay,
        )
        self._clearing = False

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input is not self:
            return
        self._show_validation(event.value)
        if self._clearing and event.value == "":
            # clear_and_reset already flushed this value
            self._clearing = False
            return
        self.debouncer.input_changed(event.value)

    def on_key(self, event: events.Key) -> None:
        if event.key == "enter":
            self.debouncer.flush(self.value)
        elif event.key == "tab" and self._complete():
            event.prevent_default()
            event.stop()

    def on_unmount(self) -> None:
        self.debouncer.cancel()

    def _complete(self) -> bool:
        suggestions = get_search_suggestions(self.value, self.cursor_position, self.shortcuts)
        if not suggestions:
            return False
        token_start = self.value[: self.cursor_position].rfind(" ") + 1
        self.value = apply_suggestion(self.value, self.cursor_position, suggestions[0])
        self.cursor_position = token_start + len(suggestions[0])
        get_telemetry().log.info(f"search completion applied suggestion={suggestions[0]!r}")
        return True

    def _show_validation(self, value: str) -> None:
        result = validate_search_query(value, self.shortcuts)
        self.set_class(not result.valid, "-invalid")
        self.border_subtitle = "; ".join(result.errors) if result.errors else ""

    def _post_search(self, query: str, filters: Mapping[str, tuple[str, ...]]) -> None:
        self.post_message(SearchRequested(query=query, filters=filters))

    def clear_and_reset(self) -> None:
        """Clear the input and post an empty search at once.

        The Changed event the clear produces is consumed without scheduling
        a second search.
        """
        if self.value:
            self._clearing = True
            self.value = ""
        self.debouncer.flush("")
