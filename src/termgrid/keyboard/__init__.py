"""Keyboard bindings and the list navigation controller."""

from termgrid.keyboard.bindings import (
    ACTION_ORDER,
    DEFAULT_KEY_BINDINGS,
    NAVIGATION_HELP,
    matches_key,
    merge_key_bindings,
    parse_key_event,
    resolve_action,
)
from termgrid.keyboard.controller import (
    ACTION_TABLE,
    ActionRule,
    ListKeyboardController,
    NavigationContext,
    Transition,
    plan_action,
)

__all__ = [
    "ACTION_ORDER",
    "ACTION_TABLE",
    "DEFAULT_KEY_BINDINGS",
    "NAVIGATION_HELP",
    "ActionRule",
    "ListKeyboardController",
    "NavigationContext",
    "Transition",
    "matches_key",
    "merge_key_bindings",
    "parse_key_event",
    "plan_action",
    "resolve_action",
]
