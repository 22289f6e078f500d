"""Key binding tables and key matching.

Triggers are strings: a named special key (``"up"``, ``"pagedown"``), a
single character literal (``"j"``, ``"G"``), or a modifier combination
(``"ctrl+a"``, ``"shift+tab"``). Special key names follow Textual's.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from termgrid.models import KeyEvent

MODIFIERS = ("ctrl", "shift", "meta")

# Priority order: vertical navigation, pagination, selection, action.
ACTION_ORDER: tuple[str, ...] = (
    "move_up",
    "move_down",
    "move_to_top",
    "move_to_bottom",
    "page_up",
    "page_down",
    "next_page",
    "previous_page",
    "first_page",
    "last_page",
    "toggle_select",
    "select_all",
    "deselect_all",
    "trigger_action",
)

KeyBindings = dict[str, tuple[str, ...]]

DEFAULT_KEY_BINDINGS: Mapping[str, tuple[str, ...]] = {
    "move_up": ("up", "k"),
    "move_down": ("down", "j"),
    "move_to_top": ("home", "g"),
    "move_to_bottom": ("end", "G"),
    "page_up": ("pageup", "ctrl+b"),
    "page_down": ("pagedown", "ctrl+f"),
    "next_page": ("ctrl+right", "right", "n"),
    "previous_page": ("ctrl+left", "left", "p"),
    "first_page": ("ctrl+home",),
    "last_page": ("ctrl+end",),
    "toggle_select": ("space",),
    "select_all": ("ctrl+a",),
    "deselect_all": ("ctrl+d",),
    "trigger_action": ("enter",),
}

NAVIGATION_HELP = "↑↓ Navigate • Space Select • Enter Action • ←→ Change page • Esc Exit"


def merge_key_bindings(custom: Mapping[str, Iterable[str]] | None = None) -> KeyBindings:
    """Defaults with per-action overrides from ``custom``.

    Raises:
        ValueError: If ``custom`` names an action that does not exist.
    """
    merged: KeyBindings = dict(DEFAULT_KEY_BINDINGS)
    for action, triggers in (custom or {}).items():
        if action not in DEFAULT_KEY_BINDINGS:
            raise ValueError(f"unknown list action {action!r}")
        merged[action] = tuple(triggers)
    return merged


def _split_trigger(trigger: str) -> tuple[frozenset[str], str]:
    if len(trigger) > 1 and "+" in trigger:
        *mods, name = trigger.split("+")
        return frozenset(mods), name
    return frozenset(), trigger


def _names(event: KeyEvent, name: str) -> bool:
    return event.key == name or event.character == name


def matches_trigger(event: KeyEvent, trigger: str) -> bool:
    """Whether ``event`` fires ``trigger``.

    Unmodified triggers never match a ctrl/meta event, so ``"home"`` does
    not shadow ``"ctrl+home"``. Character literals are case-sensitive.
    """
    mods, name = _split_trigger(trigger)
    if mods:
        wanted = {m: m in mods for m in MODIFIERS if m != "shift" or "shift" in mods}
        if any(getattr(event, m) != on for m, on in wanted.items()):
            return False
        return _names(event, name)
    if event.ctrl or event.meta:
        return False
    if len(name) == 1:
        return event.character == name
    return event.key == name


def matches_key(event: KeyEvent, triggers: Iterable[str]) -> bool:
    """Whether ``event`` fires any of ``triggers``."""
    return any(matches_trigger(event, trigger) for trigger in triggers)


def resolve_action(event: KeyEvent, bindings: Mapping[str, Iterable[str]]) -> str | None:
    """First action in priority order whose triggers match ``event``."""
    for action in ACTION_ORDER:
        if matches_key(event, bindings.get(action, ())):
            return action
    return None


def parse_key_event(key: str, character: str | None = None) -> KeyEvent:
    """Build a KeyEvent from a Textual key name and its character.

    ``"ctrl+a"`` becomes ``KeyEvent(character="a", ctrl=True)``, ``"up"``
    becomes ``KeyEvent(key="up")`` and ``"G"`` a character literal.
    """
    mods, name = _split_trigger(key)
    printable = character if character is not None and character.isprintable() else None
    if len(name) == 1:
        return KeyEvent(
            key=None,
            character=name if mods & {"ctrl", "meta"} else (printable or name),
            ctrl="ctrl" in mods,
            shift="shift" in mods,
            meta="meta" in mods,
        )
    return KeyEvent(
        key=name,
        character=printable if name == "space" else None,
        ctrl="ctrl" in mods,
        shift="shift" in mods,
        meta="meta" in mods,
    )
