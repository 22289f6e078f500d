"""Terminal list runtime: search parsing, column layout, list state and keyboard navigation."""

__version__ = "0.1.0"

from termgrid.models import (
    FLEXIBLE,
    Align,
    Column,
    KeyEvent,
    Pagination,
    ParsedSearch,
    SearchShortcut,
    Selection,
    SortDirection,
    SortState,
)

__all__ = [
    "FLEXIBLE",
    "Align",
    "Column",
    "KeyEvent",
    "Pagination",
    "ParsedSearch",
    "SearchShortcut",
    "Selection",
    "SortDirection",
    "SortState",
    "__version__",
]
