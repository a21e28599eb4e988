"""Recipe search query construction."""

from recipekit.search.query import (
    MAX_QUERY_LENGTH,
    SearchStatement,
    build_search_order_by,
    build_search_statement,
    build_search_where_clause,
    build_ts_query_string,
    sanitize_search_query,
)

__all__ = [
    "MAX_QUERY_LENGTH",
    "SearchStatement",
    "build_search_order_by",
    "build_search_statement",
    "build_search_where_clause",
    "build_ts_query_string",
    "sanitize_search_query",
]
