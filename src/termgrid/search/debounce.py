"""Debounced parse-and-notify for search input.

Each edit cancels any pending timer and schedules a new one; only the last
edit of a burst is parsed and reported. The timer source is injected so the
same logic runs on Textual's ``Widget.set_timer`` and on a fake clock in
tests.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Protocol

from termgrid.models import SearchShortcut
from termgrid.search.parser import parse_search_query
from termgrid.telemetry import get_telemetry

DEFAULT_DEBOUNCE_SECONDS = 0.3

SearchCallback = Callable[[str, Mapping[str, tuple[str, ...]]], None]


class TimerHandle(Protocol):
    def stop(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


class SearchDebouncer:
    """Coalesce rapid search edits into one parse-and-notify per quiet period.

    A generation counter guards against a timer that was already due when
    it got cancelled: its callback sees a stale generation and drops itself.
    """

    def __init__(
        self,
        on_search: SearchCallback,
        set_timer: TimerFactory,
        shortcuts: Sequence[SearchShortcut] = (),
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        if delay < 0:
            raise ValueError(f"debounce delay must be >= 0, got {delay}")
        self.on_search = on_search
        self.shortcuts = tuple(shortcuts)
        self.delay = delay
        self._set_timer = set_timer
        self._timer: TimerHandle | None = None
        self._generation: int = 0
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def input_changed(self, value: str) -> None:
        """Reschedule the notification for ``value``."""
        if self._closed:
            return
        self._stop_timer()
        self._generation += 1
        gen = self._generation
        self._timer = self._set_timer(self.delay, lambda: self._fire(value, gen))

    def flush(self, value: str) -> None:
        """Notify for ``value`` now, dropping any pending timer."""
        if self._closed:
            return
        self._stop_timer()
        self._generation += 1
        self._fire(value, self._generation)

    def cancel(self) -> None:
        """Stop the pending timer for good; later edits are ignored."""
        self._stop_timer()
        self._generation += 1
        self._closed = True

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _fire(self, value: str, gen: int) -> None:
        if self._closed or gen != self._generation:
            return
        self._timer = None
        parsed = parse_search_query(value, self.shortcuts)
        get_telemetry().log.info(
            f"search fired query={value!r} filters={sorted(parsed.filters)}"
        )
        self.on_search(value, parsed.filters)
