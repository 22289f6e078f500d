"""Focus-gated keyboard navigation for list views.

Key events resolve to a logical action through the binding table; the
action then runs through ACTION_TABLE, an ordered list of
``(action, predicate, effect)`` rows. Predicates and effects are pure
functions of a NavigationContext, and effects return a Transition that the
controller applies to the ListStateCoordinator.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from termgrid.keyboard.bindings import KeyBindings, merge_key_bindings, resolve_action
from termgrid.models import KeyEvent, Pagination
from termgrid.state.coordinator import ListSnapshot, ListStateCoordinator
from termgrid.telemetry import get_telemetry

ItemKeyFn = Callable[[Any], Hashable]
ItemActionHandler = Callable[[Any, int], None]


@dataclass(frozen=True)
class NavigationContext:
    """Everything an action row needs to decide and compute a transition."""

    snapshot: ListSnapshot
    items: Sequence[Any]
    item_key: ItemKeyFn | None = None
    multiple: bool = False
    can_trigger: bool = True

    @property
    def pagination(self) -> Pagination:
        return self.snapshot.pagination

    @property
    def highlighted(self) -> int:
        return self.snapshot.highlighted_index

    @property
    def page_items(self) -> Sequence[Any]:
        start = self.pagination.start_index
        return self.items[start : start + self.pagination.page_size]

    @property
    def page_item_count(self) -> int:
        return len(self.page_items)

    @property
    def has_items(self) -> bool:
        return len(self.items) > 0

    def key_at(self, absolute_index: int) -> Hashable:
        if self.item_key is None:
            return absolute_index
        return self.item_key(self.items[absolute_index])


@dataclass(frozen=True)
class Transition:
    """State change requested by an action row.

    ``page`` triggers a pagination change that lands on ``highlight`` (or
    row 0) in a single snapshot swap.
    """

    page: int | None = None
    highlight: int | None = None
    selection: frozenset | None = None
    activate: tuple[Any, int] | None = None


Predicate = Callable[[NavigationContext], bool]
Effect = Callable[[NavigationContext], Transition]


@dataclass(frozen=True)
class ActionRule:
    action: str
    predicate: Predicate
    effect: Effect


# ----------------------------------------------------------------------
# Vertical navigation
# ----------------------------------------------------------------------


def _up_within_page(ctx: NavigationContext) -> bool:
    return ctx.has_items and ctx.highlighted > 0


def _up_to_previous_page(ctx: NavigationContext) -> bool:
    return ctx.has_items and ctx.highlighted == 0 and ctx.pagination.has_previous_page


def _down_within_page(ctx: NavigationContext) -> bool:
    return ctx.has_items and ctx.highlighted < ctx.page_item_count - 1


def _down_to_next_page(ctx: NavigationContext) -> bool:
    return (
        ctx.has_items
        and ctx.highlighted >= ctx.page_item_count - 1
        and ctx.pagination.has_next_page
    )


def _non_empty(ctx: NavigationContext) -> bool:
    return ctx.has_items


def _to_top(ctx: NavigationContext) -> Transition:
    return Transition(highlight=0)


def _to_bottom(ctx: NavigationContext) -> Transition:
    return Transition(highlight=max(0, ctx.page_item_count - 1))


# ----------------------------------------------------------------------
# Selection
# ----------------------------------------------------------------------


def _highlight_in_bounds(ctx: NavigationContext) -> bool:
    return 0 <= ctx.highlighted < ctx.page_item_count


def _toggle(ctx: NavigationContext) -> Transition:
    key = ctx.key_at(ctx.pagination.start_index + ctx.highlighted)
    return Transition(selection=ctx.snapshot.selection.toggled(key).keys)


def _select_all(ctx: NavigationContext) -> Transition:
    return Transition(selection=frozenset(ctx.key_at(i) for i in range(len(ctx.items))))


def _trigger(ctx: NavigationContext) -> Transition:
    index = ctx.pagination.start_index + ctx.highlighted
    return Transition(activate=(ctx.items[index], index))


ACTION_TABLE: tuple[ActionRule, ...] = (
    ActionRule("move_up", _up_within_page, lambda ctx: Transition(highlight=ctx.highlighted - 1)),
    ActionRule(
        "move_up",
        _up_to_previous_page,
        lambda ctx: Transition(
            page=ctx.pagination.page - 1, highlight=ctx.pagination.page_size - 1
        ),
    ),
    ActionRule(
        "move_down", _down_within_page, lambda ctx: Transition(highlight=ctx.highlighted + 1)
    ),
    ActionRule(
        "move_down",
        _down_to_next_page,
        lambda ctx: Transition(page=ctx.pagination.page + 1, highlight=0),
    ),
    ActionRule("move_to_top", _non_empty, _to_top),
    ActionRule("move_to_bottom", _non_empty, _to_bottom),
    ActionRule("page_up", _non_empty, _to_top),
    ActionRule("page_down", _non_empty, _to_bottom),
    ActionRule(
        "next_page",
        lambda ctx: ctx.pagination.has_next_page,
        lambda ctx: Transition(page=ctx.pagination.page + 1, highlight=0),
    ),
    ActionRule(
        "previous_page",
        lambda ctx: ctx.pagination.has_previous_page,
        lambda ctx: Transition(page=ctx.pagination.page - 1, highlight=0),
    ),
    ActionRule(
        "first_page",
        lambda ctx: ctx.pagination.page != 0,
        lambda ctx: Transition(page=0, highlight=0),
    ),
    ActionRule(
        "last_page",
        lambda ctx: ctx.pagination.total_pages > 0
        and ctx.pagination.page != ctx.pagination.total_pages - 1,
        lambda ctx: Transition(page=ctx.pagination.total_pages - 1, highlight=0),
    ),
    ActionRule("toggle_select", _highlight_in_bounds, _toggle),
    ActionRule("select_all", lambda ctx: ctx.multiple and ctx.has_items, _select_all),
    ActionRule(
        "deselect_all",
        lambda ctx: len(ctx.snapshot.selection) > 0,
        lambda ctx: Transition(selection=frozenset()),
    ),
    ActionRule(
        "trigger_action",
        lambda ctx: ctx.can_trigger and _highlight_in_bounds(ctx),
        _trigger,
    ),
)


def plan_action(action: str, ctx: NavigationContext) -> Transition | None:
    """Transition of the first row for ``action`` whose predicate holds."""
    for rule in ACTION_TABLE:
        if rule.action == action and rule.predicate(ctx):
            return rule.effect(ctx)
    return None


class ListKeyboardController:
    """Dispatch key events into list state transitions.

    Inert unless the list has focus and navigation is enabled. Each event
    is handled synchronously; an event matching no binding is ignored.
    """

    def __init__(
        self,
        coordinator: ListStateCoordinator,
        items: Sequence[Any] = (),
        item_key: ItemKeyFn | None = None,
        key_bindings: Mapping[str, Iterable[str]] | None = None,
        on_item_action: ItemActionHandler | None = None,
        enabled: bool = True,
    ) -> None:
        self.coordinator = coordinator
        self.items: Sequence[Any] = list(items)
        self.item_key = item_key
        self.bindings: KeyBindings = merge_key_bindings(key_bindings)
        self.on_item_action = on_item_action
        self.enabled = enabled
        self.has_focus = False
        if coordinator.pagination.total_items != len(self.items):
            coordinator.handle_total_items_change(len(self.items))

    def set_focus(self, focused: bool) -> None:
        self.has_focus = focused

    def set_items(self, items: Sequence[Any]) -> None:
        """Swap in a new (filtered, sorted) item list and re-derive pages."""
        self.items = list(items)
        self.coordinator.handle_total_items_change(len(self.items))

    @property
    def active(self) -> bool:
        return self.enabled and self.has_focus

    def context(self) -> NavigationContext:
        return NavigationContext(
            snapshot=self.coordinator.snapshot,
            items=self.items,
            item_key=self.item_key,
            multiple=self.coordinator.multiple,
            can_trigger=self.on_item_action is not None,
        )

    def handle_key(self, event: KeyEvent) -> str | None:
        """Resolve and run the action bound to ``event``.

        Returns:
            The action name that changed state, or None when the event was
            ignored (no focus, no binding, or a failed precondition).
        """
        if not self.active:
            return None
        action = resolve_action(event, self.bindings)
        if action is None:
            return None
        with get_telemetry().span("keyboard.dispatch", action=action) as span:
            applied = self.perform(action)
            span.set(applied=applied)
        return action if applied else None

    def perform(self, action: str) -> bool:
        """Run ``action`` if its precondition holds. Returns True if it did."""
        if not self.enabled:
            return False
        transition = plan_action(action, self.context())
        if transition is None:
            return False
        self._apply(transition)
        return True

    def _apply(self, transition: Transition) -> None:
        coordinator = self.coordinator
        if transition.page is not None:
            coordinator.handle_pagination_change(
                transition.page,
                coordinator.pagination.page_size,
                highlight=transition.highlight or 0,
            )
        elif transition.highlight is not None:
            coordinator.handle_highlight_change(transition.highlight)
        if transition.selection is not None:
            coordinator.handle_selection_change(transition.selection)
        if transition.activate is not None and self.on_item_action is not None:
            item, index = transition.activate
            get_telemetry().log.info(f"item action index={index}")
            self.on_item_action(item, index)

    # ------------------------------------------------------------------
    # Direct actions
    # ------------------------------------------------------------------

    def move_up(self) -> bool:
        return self.perform("move_up")

    def move_down(self) -> bool:
        return self.perform("move_down")

    def move_to_top(self) -> bool:
        return self.perform("move_to_top")

    def move_to_bottom(self) -> bool:
        return self.perform("move_to_bottom")

    def next_page(self) -> bool:
        return self.perform("next_page")

    def previous_page(self) -> bool:
        return self.perform("previous_page")

    def first_page(self) -> bool:
        return self.perform("first_page")

    def last_page(self) -> bool:
        return self.perform("last_page")

    def toggle_selection(self) -> bool:
        return self.perform("toggle_select")

    def select_all(self) -> bool:
        return self.perform("select_all")

    def deselect_all(self) -> bool:
        return self.perform("deselect_all")

    def trigger_action(self) -> bool:
        return self.perform("trigger_action")
