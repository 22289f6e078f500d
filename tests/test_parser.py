"""Tests for search query tokenizing, parsing, suggestions and validation."""

from __future__ import annotations

from termgrid.models import SearchShortcut
from termgrid.search import (
    GENERIC_SYNTAX_ERROR,
    apply_suggestion,
    build_search_query,
    extract_filter_keys,
    get_search_suggestions,
    highlight_search_terms,
    parse_search_query,
    tokenize_query,
    validate_search_query,
)
from termgrid.search import parser as parser_module


# ---------------------------------------------------------------------------
# Tokenizing
# ---------------------------------------------------------------------------


class TestTokenizeQuery:
    def test_splits_on_spaces(self):
        assert tokenize_query("urgent  task ") == ["urgent", "task"]

    def test_double_quotes_group_words(self):
        assert tokenize_query('a "needs review" b') == ["a", "needs review", "b"]

    def test_single_quotes_group_words(self):
        assert tokenize_query("owner:'ana maria'") == ["owner:ana maria"]

    def test_other_quote_kind_is_literal_inside_quotes(self):
        assert tokenize_query("\"it's fine\"") == ["it's fine"]

    def test_unterminated_quote_emits_accumulated_text(self):
        assert tokenize_query('start "never closed') == ["start", "never closed"]

    def test_empty_query(self):
        assert tokenize_query("") == []
        assert tokenize_query("   ") == []


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParseSearchQuery:
    def test_recognizes_known_filter_and_free_text(self, status_shortcut):
        parsed = parse_search_query('status:done urgent task "needs review"', [status_shortcut])
        assert parsed.filters == {"status": ("done",)}
        assert parsed.text == "urgent task needs review"

    def test_unknown_key_stays_in_text(self):
        parsed = parse_search_query("foo:bar")
        assert parsed.filters == {}
        assert parsed.text == "foo:bar"

    def test_repeated_key_accumulates_values_in_order(self, status_shortcut):
        parsed = parse_search_query("status:todo status:done", [status_shortcut])
        assert parsed.filters == {"status": ("todo", "done")}
        assert parsed.text == ""

    def test_quoted_filter_value(self):
        owner = SearchShortcut(key="owner")
        parsed = parse_search_query('owner:"ana maria" report', [owner])
        assert parsed.filters == {"owner": ("ana maria",)}
        assert parsed.text == "report"

    def test_leading_or_trailing_colon_is_text(self, status_shortcut):
        parsed = parse_search_query(":done status:", [status_shortcut])
        assert parsed.filters == {}
        assert parsed.text == ":done status:"

    def test_value_may_contain_colon(self):
        at = SearchShortcut(key="at")
        parsed = parse_search_query("at:10:30", [at])
        assert parsed.filters == {"at": ("10:30",)}

    def test_key_match_is_case_sensitive(self, status_shortcut):
        parsed = parse_search_query("Status:done", [status_shortcut])
        assert parsed.filters == {}
        assert parsed.text == "Status:done"

    def test_unlisted_value_is_still_parsed(self, status_shortcut):
        parsed = parse_search_query("status:archived", [status_shortcut])
        assert parsed.filters == {"status": ("archived",)}

    def test_empty_query_is_empty(self):
        assert parse_search_query("").is_empty()


class TestBuildSearchQuery:
    def test_text_then_filters(self):
        query = build_search_query("urgent", {"status": ["done"], "owner": ["ana maria"]})
        assert query == 'urgent status:done owner:"ana maria"'

    def test_rebuilt_query_parses_back(self, status_shortcut):
        owner = SearchShortcut(key="owner")
        query = build_search_query("fix bug", {"status": ["todo"], "owner": ["bo chen"]})
        parsed = parse_search_query(query, [status_shortcut, owner])
        assert parsed.text == "fix bug"
        assert parsed.filters == {"status": ("todo",), "owner": ("bo chen",)}

    def test_empty(self):
        assert build_search_query("  ", {}) == ""


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------


class TestSuggestions:
    def test_key_completion(self, status_shortcut):
        assert get_search_suggestions("st", 2, [status_shortcut]) == ["status:"]

    def test_key_completion_ignores_case(self, status_shortcut):
        assert get_search_suggestions("ST", 2, [status_shortcut]) == ["status:"]

    def test_value_completion(self, status_shortcut):
        suggestions = get_search_suggestions("status:d", 8, [status_shortcut])
        assert suggestions == ["status:done"]

    def test_all_values_for_empty_partial(self, status_shortcut):
        suggestions = get_search_suggestions("status:", 7, [status_shortcut])
        assert suggestions == ["status:done", "status:todo"]

    def test_no_values_for_open_shortcut(self):
        owner = SearchShortcut(key="owner")
        assert get_search_suggestions("owner:a", 7, [owner]) == []

    def test_uses_token_at_cursor(self, status_shortcut):
        assert get_search_suggestions("urgent st", 9, [status_shortcut]) == ["status:"]

    def test_apply_suggestion_replaces_current_token(self):
        assert apply_suggestion("urgent st", 9, "status:") == "urgent status:"

    def test_apply_suggestion_keeps_tail(self):
        assert apply_suggestion("st more", 2, "status:") == "status: more"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidateSearchQuery:
    def test_valid_query(self, status_shortcut):
        result = validate_search_query("status:done", [status_shortcut])
        assert result.valid
        assert result.errors == []

    def test_value_outside_closed_list(self, status_shortcut):
        result = validate_search_query("status:archived", [status_shortcut])
        assert not result.valid
        assert result.errors == ['Invalid value "archived" for filter "status"']

    def test_open_shortcut_accepts_anything(self):
        result = validate_search_query("owner:anyone", [SearchShortcut(key="owner")])
        assert result.valid

    def test_internal_failure_becomes_generic_error(self, monkeypatch, status_shortcut):
        def boom(*args, **kwargs):
            raise RuntimeError("parser exploded")

        monkeypatch.setattr(parser_module, "parse_search_query", boom)
        result = validate_search_query("status:done", [status_shortcut])
        assert not result.valid
        assert result.errors == [GENERIC_SYNTAX_ERROR]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestFilterKeysAndHighlight:
    def test_extract_filter_keys_includes_unknown_keys(self):
        assert extract_filter_keys('status:done foo:bar plain "a:b"') == ["status", "foo", "a"]

    def test_highlight_wraps_text_and_filter_values(self):
        result = highlight_search_terms("Fix login, status done", "login", {"status": ["done"]})
        assert result == "Fix **login**, status **done**"

    def test_highlight_ignores_case_by_default(self):
        assert highlight_search_terms("Login page", "login", {}) == "**Login** page"

    def test_highlight_case_sensitive(self):
        assert highlight_search_terms("Login page", "login", {}, case_sensitive=True) == "Login page"

    def test_highlight_custom_marker_and_blank_terms(self):
        assert highlight_search_terms("abc", " ", {}, marker="|") == "abc"
        assert highlight_search_terms("abc", "b", {}, marker="|") == "a|b|c"
