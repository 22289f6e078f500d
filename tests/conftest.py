"""Shared pytest fixtures for termgrid tests.

Provides column sets, item lists, shortcuts and an in-memory telemetry
exporter installed as the active singleton.
"""

from __future__ import annotations

import pytest

from termgrid.models import FLEXIBLE, Column, SearchShortcut
from termgrid.telemetry import Telemetry, set_telemetry


@pytest.fixture
def telemetry_exporter():
    """Install a Telemetry backed by an InMemorySpanExporter; restore noop after."""
    tel, exporter = Telemetry.for_testing()
    set_telemetry(tel)
    yield exporter
    set_telemetry(Telemetry.noop())


@pytest.fixture
def status_shortcut() -> SearchShortcut:
    return SearchShortcut(key="status", label="Status", values=("done", "todo"))


@pytest.fixture
def task_columns() -> list[Column]:
    return [
        Column("id", "ID", width=6, sortable=True),
        Column("title", "Title", width=FLEXIBLE, sortable=True),
        Column("status", "Status", width=10, sortable=True),
    ]


@pytest.fixture
def task_items() -> list[dict]:
    """25 tasks: ids 1..25, status cycling todo/doing/done."""
    statuses = ("todo", "doing", "done")
    return [
        {"id": n, "title": f"Task {n:02d}", "status": statuses[(n - 1) % 3]}
        for n in range(1, 26)
    ]
