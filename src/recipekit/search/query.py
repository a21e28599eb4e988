"""Recipe search: query sanitization, tsquery construction and SQL clauses."""

import re
from dataclasses import dataclass

from sqlalchemy import ColumnElement, Select, cast, func, or_, select
from sqlalchemy.dialects.postgresql import REGCONFIG
from sqlalchemy.orm import selectinload

from recipekit.logging_config import get_logger
from recipekit.models import VISIBILITY_PUBLIC, Recipe, RecipeDietaryTag
from recipekit.schemas import SearchFilterInput

logger = get_logger(__name__)

MAX_QUERY_LENGTH = 200
TSQUERY_SPECIAL_CHARS = re.compile(r"""[!&|():*'"]""")
COLLAPSE_SPACES = re.compile(r"\s+")


# =============================================================================
# Query Text
# =============================================================================


def sanitize_search_query(query: str) -> str:
    """
    Make user text safe to use as tsquery words.

    Removes the tsquery operators ! & | ( ) : * ' ", trims, collapses
    whitespace runs to one space and truncates to MAX_QUERY_LENGTH
    characters.
    """
    cleaned = TSQUERY_SPECIAL_CHARS.sub("", query).strip()
    cleaned = COLLAPSE_SPACES.sub(" ", cleaned)
    return cleaned[:MAX_QUERY_LENGTH]


def build_ts_query_string(query: str) -> str:
    """
    Build a tsquery string from user text.

    Words are AND-joined and the last one is prefix-matched, so results
    follow the user while they type: "chicken pasta" -> "chicken & pasta:*".
    Returns "" when nothing searchable is left.
    """
    sanitized = sanitize_search_query(query)
    if not sanitized:
        return ""

    words = [word for word in sanitized.split(" ") if word]
    if not words:
        return ""

    if len(words) == 1:
        return f"{words[0]}:*"

    all_but_last = " & ".join(words[:-1])
    return f"{all_but_last} & {words[-1]}:*"


# =============================================================================
# Filters and Ordering
# =============================================================================


def build_search_where_clause(
    params: SearchFilterInput,
    user_id: str | None = None,
) -> list[ColumnElement[bool]]:
    """
    Build WHERE clauses for the non-text search filters.

    The first clause is always visibility: signed-in users see their own
    recipes and public ones, anonymous callers only public ones. Each filter
    that is present adds one more clause; callers AND them together.
    """
    clauses: list[ColumnElement[bool]] = []

    if user_id:
        clauses.append(or_(Recipe.author_id == user_id, Recipe.visibility == VISIBILITY_PUBLIC))
    else:
        clauses.append(Recipe.visibility == VISIBILITY_PUBLIC)

    if params.cuisine:
        clauses.append(func.lower(Recipe.cuisine_type) == params.cuisine.lower())
    if params.difficulty:
        clauses.append(Recipe.difficulty == params.difficulty)
    if params.max_prep_time is not None:
        clauses.append(Recipe.prep_time <= params.max_prep_time)
    if params.max_cook_time is not None:
        clauses.append(Recipe.cook_time <= params.max_cook_time)
    if params.min_rating is not None:
        clauses.append(Recipe.avg_rating >= params.min_rating)
    if params.dietary:
        clauses.append(
            Recipe.dietary_tags.any(RecipeDietaryTag.dietary_tag_id.in_(params.dietary))
        )

    return clauses


def build_search_order_by(
    sort: str,
    has_search_query: bool,
) -> list[ColumnElement] | None:
    """
    Build ORDER BY expressions for a sort option.

    Returns None for "relevance" when there is a text query; the caller then
    orders by text rank. Unknown options fall back to newest first.
    """
    if has_search_query and sort == "relevance":
        return None

    if sort == "oldest":
        return [Recipe.created_at.asc()]
    elif sort == "rating":
        return [Recipe.avg_rating.desc().nulls_last()]
    elif sort == "prepTime":
        return [Recipe.prep_time.asc().nulls_last()]
    elif sort == "title":
        return [Recipe.name.asc()]
    else:
        return [Recipe.created_at.desc()]


# =============================================================================
# Statements
# =============================================================================


@dataclass
class SearchStatement:
    """Paginated select plus the matching count for one search request."""

    select: Select
    count: Select
    ts_query: str | None = None


def build_search_statement(
    params: SearchFilterInput,
    user_id: str | None = None,
    ts_config: str = "english",
) -> SearchStatement | None:
    """
    Build the statements for a search request.

    With a text query the rows are restricted by
    ``search_vector @@ to_tsquery(ts_config, :ts_query)`` and, for relevance
    sorting, ordered by ``ts_rank``. Returns None when the text query has
    nothing searchable left after sanitization; the result is then empty
    without asking the database.
    """
    filters = build_search_where_clause(params, user_id)
    order_by = build_search_order_by(params.sort, params.has_search_query)

    ts_query: str | None = None
    if params.has_search_query:
        ts_query = build_ts_query_string(params.q or "")
        if not ts_query:
            logger.debug(f"Search query {params.q!r} has no searchable words")
            return None

        tsquery = func.to_tsquery(cast(ts_config, REGCONFIG), ts_query)
        filters.append(Recipe.search_vector.bool_op("@@")(tsquery))
        if order_by is None:
            order_by = [
                func.ts_rank(Recipe.search_vector, tsquery).desc(),
                Recipe.created_at.desc(),
            ]

    # order_by is only None for relevance with a query, handled above
    stmt = (
        select(Recipe)
        .options(selectinload(Recipe.dietary_tags).selectinload(RecipeDietaryTag.dietary_tag))
        .where(*filters)
        .order_by(*(order_by or []))
        .offset(params.offset)
        .limit(params.limit)
    )
    count_stmt = select(func.count()).select_from(Recipe).where(*filters)

    return SearchStatement(select=stmt, count=count_stmt, ts_query=ts_query)
