"""Configuration loading and validation for list views."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from termgrid.keyboard.bindings import DEFAULT_KEY_BINDINGS
from termgrid.layout.columns import ColumnLayoutConfig
from termgrid.models import SearchShortcut
from termgrid.search.debounce import DEFAULT_DEBOUNCE_SECONDS


class ConfigError(RuntimeError):
    """Raised when a config file cannot be read or fails validation."""


class LayoutSettings(BaseModel):
    """Global column bounds; the terminal width comes from the live terminal."""

    model_config = ConfigDict(extra="forbid")

    column_gap: int = Field(default=1, ge=0)
    reserved_width: int = Field(default=4, ge=0)
    min_column_width: int = Field(default=8, ge=0)
    max_column_width: int = Field(default=50, ge=1)


class ShortcutSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key: str = Field(min_length=1)
    label: str = ""
    values: list[str] | None = None

    @field_validator("key")
    @classmethod
    def key_has_no_colon_or_space(cls, v: str) -> str:
        if ":" in v or " " in v:
            raise ValueError("shortcut key cannot contain ':' or spaces")
        return v

    def to_shortcut(self) -> SearchShortcut:
        values = tuple(self.values) if self.values is not None else None
        return SearchShortcut(key=self.key, label=self.label or self.key, values=values)


class GridConfig(BaseModel):
    """Settings for one list view."""

    model_config = ConfigDict(extra="forbid")

    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    page_size: int = Field(default=10, ge=1)
    debounce_seconds: float = Field(default=DEFAULT_DEBOUNCE_SECONDS, ge=0)
    multiple: bool = False
    key_bindings: dict[str, list[str]] = Field(default_factory=dict)
    shortcuts: list[ShortcutSettings] = Field(default_factory=list)

    @field_validator("key_bindings")
    @classmethod
    def known_actions(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        unknown = sorted(set(v) - set(DEFAULT_KEY_BINDINGS))
        if unknown:
            raise ValueError(f"unknown list actions: {', '.join(unknown)}")
        return v

    def layout_for(self, terminal_width: int) -> ColumnLayoutConfig:
        return ColumnLayoutConfig(
            terminal_width=terminal_width,
            column_gap=self.layout.column_gap,
            reserved_width=self.layout.reserved_width,
            min_column_width=self.layout.min_column_width,
            max_column_width=self.layout.max_column_width,
        )

    def search_shortcuts(self) -> list[SearchShortcut]:
        return [s.to_shortcut() for s in self.shortcuts]


def default_config() -> GridConfig:
    return GridConfig()


def load_config(config_path: Path | str) -> GridConfig:
    """Load a GridConfig from JSON, merging over defaults.

    Raises:
        ConfigError: If the file is unreadable, not JSON, or invalid.
    """
    path = Path(config_path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config {path} is not valid JSON: {e}") from e

    try:
        return GridConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}:\n{e}") from e
