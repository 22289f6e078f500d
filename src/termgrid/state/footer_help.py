"""Shared footer help text, passed explicitly to the widgets that use it."""

from __future__ import annotations

from collections.abc import Callable

HelpListener = Callable[["str | None"], None]


class FooterHelpContext:
    """Holds the footer help line and notifies listeners when it changes.

    One instance is created by the app and handed to every component that
    reads or sets the help text.
    """

    def __init__(self) -> None:
        self._help_text: str | None = None
        self._listeners: list[HelpListener] = []

    @property
    def help_text(self) -> str | None:
        return self._help_text

    def set_help_text(self, text: str | None) -> None:
        if text == self._help_text:
            return
        self._help_text = text
        for listener in list(self._listeners):
            listener(text)

    def clear_help_text(self) -> None:
        self.set_help_text(None)

    def bind(self, text: str, active: bool) -> None:
        """Show ``text`` while ``active``, clear it otherwise."""
        if active:
            self.set_help_text(text)
        else:
            self.clear_help_text()

    def subscribe(self, listener: HelpListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
