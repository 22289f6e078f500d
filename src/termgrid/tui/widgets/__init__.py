"""Widgets for the termgrid demo app."""

from termgrid.tui.widgets.grid import GridView
from termgrid.tui.widgets.search_bar import SearchBar

__all__ = ["GridView", "SearchBar"]
