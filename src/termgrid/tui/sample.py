"""Sample task list for the demo app."""

from __future__ import annotations

from typing import Any

from rich.text import Text

from termgrid.config import ShortcutSettings
from termgrid.models import FLEXIBLE, Align, Column

STATUSES = ("todo", "doing", "done")
PRIORITIES = ("low", "medium", "high")
OWNERS = ("ana", "bo", "chen", "dara")
TOPICS = (
    "Fix login redirect",
    "Write release notes",
    "Migrate billing tables",
    "Review onboarding flow",
    "Upgrade CI runners",
    "Triage crash reports",
    "Document search syntax",
    "Tune cache eviction",
)

PRIORITY_STYLES = {"low": "dim", "medium": "yellow", "high": "bold red"}
PRIORITY_RANK = {name: rank for rank, name in enumerate(PRIORITIES)}


class PriorityRenderer:
    """Colors the priority cell."""

    def render(self, value: Any, item: Any, row_index: int) -> Text:
        return Text(str(value), style=PRIORITY_STYLES.get(str(value), ""))


SAMPLE_COLUMNS = (
    Column("id", "ID", width=6, sortable=True, align=Align.RIGHT),
    Column("title", "Title", width=FLEXIBLE, sortable=True),
    Column("status", "Status", width=10, sortable=True),
    Column(
        "priority",
        "Priority",
        width=12,
        sortable=True,
        get_sort_value=lambda item: PRIORITY_RANK.get(item["priority"]),
        render=PriorityRenderer(),
    ),
    Column("owner", "Owner", max_width=12),
)

SAMPLE_SHORTCUTS = (
    ShortcutSettings(key="status", label="Status", values=list(STATUSES)),
    ShortcutSettings(key="priority", label="Priority", values=list(PRIORITIES)),
    ShortcutSettings(key="owner", label="Owner"),
)


def sample_items(count: int = 42) -> list[dict[str, Any]]:
    """Deterministic task rows."""
    return [
        {
            "id": n + 1,
            "title": f"{TOPICS[n % len(TOPICS)]} #{n // len(TOPICS) + 1}",
            "status": STATUSES[n % len(STATUSES)],
            "priority": PRIORITIES[(n * 7) % len(PRIORITIES)],
            "owner": OWNERS[n % len(OWNERS)],
        }
        for n in range(count)
    ]
