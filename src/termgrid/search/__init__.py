"""Search query parsing and debounced search notification."""

from termgrid.search.debounce import DEFAULT_DEBOUNCE_SECONDS, SearchDebouncer
from termgrid.search.parser import (
    GENERIC_SYNTAX_ERROR,
    SearchValidation,
    apply_suggestion,
    build_search_query,
    extract_filter_keys,
    get_search_suggestions,
    highlight_search_terms,
    parse_search_query,
    tokenize_query,
    validate_search_query,
)

__all__ = [
    "DEFAULT_DEBOUNCE_SECONDS",
    "GENERIC_SYNTAX_ERROR",
    "SearchDebouncer",
    "SearchValidation",
    "apply_suggestion",
    "build_search_query",
    "extract_filter_keys",
    "get_search_suggestions",
    "highlight_search_terms",
    "parse_search_query",
    "tokenize_query",
    "validate_search_query",
]
