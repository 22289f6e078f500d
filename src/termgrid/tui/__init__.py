"""Textual demo front end for the termgrid list runtime.

Shows a searchable, sortable, paged task list driven by the same
coordinator and keyboard controller a host application would embed.
"""

from __future__ import annotations

from pathlib import Path


def run_tui(config_path: Path | None = None, log_dir: str = "logs") -> None:
    """Load configuration and launch the demo app.

    All imports are deferred for fast CLI startup.

    Args:
        config_path: Optional JSON config; defaults apply when omitted.
        log_dir: Directory for the JSON-lines log file.
    """
    from termgrid.config import default_config, load_config
    from termgrid.telemetry import configure_file_logging
    from termgrid.tui.app import GridApp
    from termgrid.tui.sample import SAMPLE_COLUMNS, SAMPLE_SHORTCUTS, sample_items

    config = load_config(config_path) if config_path is not None else default_config()
    if not config.shortcuts:
        config = config.model_copy(update={"shortcuts": list(SAMPLE_SHORTCUTS)})
    configure_file_logging(log_dir)

    app = GridApp(
        columns=SAMPLE_COLUMNS,
        items=sample_items(),
        config=config,
        item_key=lambda item: item["id"],
    )
    app.run()
