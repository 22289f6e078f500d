"""GitHub-style search query parsing.

Splits a query such as ``status:done urgent "needs review"`` into free text
and recognized ``key:value`` filters. Parsing is lenient: unbalanced
quotes never raise, and ``key:value`` tokens whose key is not a known
shortcut stay in the free text.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from termgrid.models import ParsedSearch, SearchShortcut
from termgrid.telemetry import get_telemetry


QUOTE_CHARS = ('"', "'")
GENERIC_SYNTAX_ERROR = "Invalid search syntax"


@dataclass(frozen=True)
class SearchValidation:
    """Result of validating a query against its shortcuts."""

    valid: bool
    errors: list[str] = field(default_factory=list)


def tokenize_query(query: str) -> list[str]:
    """Split ``query`` on unquoted spaces.

    A ``"`` or ``'`` not preceded by a backslash opens a quoted run that
    only the same quote kind closes; the other kind is kept literally.
    Quote characters themselves are dropped. An unterminated quote still
    emits whatever was accumulated.
    """
    tokens: list[str] = []
    current: list[str] = []
    quote_char = ""

    def emit() -> None:
        token = "".join(current).strip()
        if token:
            tokens.append(token)
        current.clear()

    prev = ""
    for char in query:
        if char in QUOTE_CHARS and prev != "\\":
            if not quote_char:
                quote_char = char
            elif char == quote_char:
                quote_char = ""
            else:
                current.append(char)
        elif char == " " and not quote_char:
            emit()
        else:
            current.append(char)
        prev = char

    emit()
    return tokens


def _split_filter_token(token: str) -> tuple[str, str] | None:
    """Return ``(key, value)`` when the token has an interior colon."""
    colon = token.find(":")
    if 0 < colon < len(token) - 1:
        return token[:colon], token[colon + 1 :]
    return None


def _shortcut_map(shortcuts: Iterable[SearchShortcut]) -> dict[str, SearchShortcut]:
    return {s.key: s for s in shortcuts}


def parse_search_query(
    query: str,
    shortcuts: Iterable[SearchShortcut] = (),
) -> ParsedSearch:
    """Parse ``query`` into free text and filters.

    Args:
        query: Raw search string.
        shortcuts: Recognized filter keys. Only tokens whose key is one of
            these become filters.

    Returns:
        ParsedSearch with ``text`` (non-filter tokens joined by single
        spaces) and ``filters`` (keys and values in discovery order).
    """
    known = _shortcut_map(shortcuts)
    filters: dict[str, list[str]] = {}
    text_parts: list[str] = []

    for token in tokenize_query(query):
        pair = _split_filter_token(token)
        if pair is not None and pair[0] in known:
            key, value = pair
            filters.setdefault(key, []).append(value)
            continue
        text_parts.append(token)

    return ParsedSearch(text=" ".join(text_parts).strip(), filters=filters)


def build_search_query(text: str, filters: Mapping[str, Sequence[str]]) -> str:
    """Inverse of parse_search_query: free text, then ``key:value`` tokens.

    Values containing a space are wrapped in double quotes.
    """
    parts: list[str] = []
    if text.strip():
        parts.append(text.strip())
    for key, values in filters.items():
        for value in values:
            quoted = f'"{value}"' if " " in value else value
            parts.append(f"{key}:{quoted}")
    return " ".join(parts)


def get_search_suggestions(
    query: str,
    cursor_position: int,
    shortcuts: Sequence[SearchShortcut] = (),
) -> list[str]:
    """Completion candidates for the token being typed at ``cursor_position``.

    If the token contains a colon, suggests ``key:value`` for the matching
    shortcut's values starting with the partial value. Otherwise suggests
    ``key:`` for shortcuts whose key starts with the partial token. Both
    comparisons ignore case.
    """
    tokens = tokenize_query(query[: max(0, cursor_position)])
    current = tokens[-1] if tokens else ""

    colon = current.find(":")
    if colon > 0:
        key, partial = current[:colon], current[colon + 1 :].lower()
        shortcut = next((s for s in shortcuts if s.key == key), None)
        if shortcut is None or not shortcut.values:
            return []
        return [f"{key}:{value}" for value in shortcut.values if value.lower().startswith(partial)]

    partial = current.lower()
    return [f"{s.key}:" for s in shortcuts if s.key.lower().startswith(partial)]


def apply_suggestion(query: str, cursor_position: int, suggestion: str) -> str:
    """Replace the token ending at ``cursor_position`` with ``suggestion``."""
    head, tail = query[:cursor_position], query[cursor_position:]
    start = head.rfind(" ") + 1
    return head[:start] + suggestion + tail


def validate_search_query(
    query: str,
    shortcuts: Sequence[SearchShortcut] = (),
) -> SearchValidation:
    """Check filter values against each shortcut's closed value list.

    Never raises: an internal failure while parsing is logged and reported
    as a single generic syntax error.
    """
    errors: list[str] = []
    try:
        parsed = parse_search_query(query, shortcuts)
        for shortcut in shortcuts:
            for value in parsed.filters.get(shortcut.key, []):
                if not shortcut.accepts(value):
                    errors.append(f'Invalid value "{value}" for filter "{shortcut.key}"')
    except Exception as exc:
        get_telemetry().log.error(f"search validation failed query={query!r} error={exc!r}")
        errors = [GENERIC_SYNTAX_ERROR]

    return SearchValidation(valid=not errors, errors=errors)


def extract_filter_keys(query: str) -> list[str]:
    """Every ``key`` of an interior-colon token, known or not, in order."""
    keys: list[str] = []
    for token in tokenize_query(query):
        pair = _split_filter_token(token)
        if pair is not None:
            keys.append(pair[0])
    return keys


def highlight_search_terms(
    text: str,
    search_text: str,
    filters: Mapping[str, Sequence[str]],
    case_sensitive: bool = False,
    marker: str = "**",
) -> str:
    """Wrap occurrences of the free text and filter values in ``marker``."""
    flags = 0 if case_sensitive else re.IGNORECASE
    highlighted = text

    terms = [search_text] + [value for values in filters.values() for value in values]
    for term in terms:
        if not term.strip():
            continue
        pattern = re.compile(re.escape(term), flags)
        highlighted = pattern.sub(lambda m: f"{marker}{m.group(0)}{marker}", highlighted)
    return highlighted
