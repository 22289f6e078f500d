"""Custom Textual Message types for the demo app.

Widgets post these to the App, which owns the list state and pushes the
resulting item list back down. No direct widget-to-widget calls.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from textual.message import Message


class SearchRequested(Message):
    """Fired by the search bar after the debounce delay or on Enter."""

    def __init__(self, query: str, filters: Mapping[str, tuple[str, ...]]) -> None:
        self.query = query
        self.filters = filters
        super().__init__()


class ItemActivated(Message):
    """Fired by the grid when the trigger action runs on a row."""

    def __init__(self, item: Any, index: int) -> None:
        self.item = item
        self.index = index
        super().__init__()
