"""API routes for recipe search."""

import math
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.exc import DataError, ProgrammingError
from sqlalchemy.ext.asyncio import AsyncSession

from recipekit.config import get_settings
from recipekit.database import get_db
from recipekit.logging_config import get_logger
from recipekit.models import Recipe
from recipekit.rate_limit import SEARCH_LIMITER
from recipekit.routers.dependencies import get_current_user_id, rate_limited
from recipekit.schemas import Difficulty, SearchFilterInput, SearchSort
from recipekit.search.query import (
    build_search_statement,
    build_ts_query_string,
    sanitize_search_query,
)

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/v1/search",
    tags=["search"],
    dependencies=[Depends(rate_limited(SEARCH_LIMITER))],
)


# =============================================================================
# Request/Response Schemas
# =============================================================================


class DietaryTagSchema(BaseModel):
    """Dietary tag attached to a recipe."""

    id: str
    name: str


class RecipeSearchItem(BaseModel):
    """Recipe as listed in search results."""

    id: str
    name: str
    description: str | None = None
    author_id: str
    visibility: str
    difficulty: str | None = None
    cuisine_type: str | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    servings: int | None = None
    avg_rating: float | None = None
    rating_count: int = 0
    created_at: datetime
    dietary_tags: list[DietaryTagSchema] = Field(default_factory=list)

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "RecipeSearchItem":
        return cls(
            id=recipe.id,
            name=recipe.name,
            description=recipe.description,
            author_id=recipe.author_id,
            visibility=recipe.visibility,
            difficulty=recipe.difficulty,
            cuisine_type=recipe.cuisine_type,
            prep_time=recipe.prep_time,
            cook_time=recipe.cook_time,
            servings=recipe.servings,
            avg_rating=recipe.avg_rating,
            rating_count=recipe.rating_count,
            created_at=recipe.created_at,
            dietary_tags=[
                DietaryTagSchema(id=link.dietary_tag.id, name=link.dietary_tag.name)
                for link in recipe.dietary_tags
            ],
        )


class Pagination(BaseModel):
    """Pagination metadata."""

    total: int
    page: int
    page_size: int
    total_pages: int


class SearchResponse(BaseModel):
    """One page of search results."""

    data: list[RecipeSearchItem]
    pagination: Pagination


class TsQueryResponse(BaseModel):
    """How a text query will be searched."""

    query: str
    sanitized: str
    ts_query: str


def _empty_page(params: SearchFilterInput, total: int = 0) -> SearchResponse:
    return SearchResponse(
        data=[],
        pagination=Pagination(
            total=total,
            page=params.page,
            page_size=params.limit,
            total_pages=math.ceil(total / params.limit),
        ),
    )


async def get_search_filters(
    q: Annotated[str | None, Query(description="Free-text search query")] = None,
    cuisine: Annotated[str | None, Query(description="Cuisine, case-insensitive")] = None,
    difficulty: Annotated[Difficulty | None, Query()] = None,
    max_prep_time: Annotated[int | None, Query(description="Max prep time in minutes")] = None,
    max_cook_time: Annotated[int | None, Query(description="Max cook time in minutes")] = None,
    dietary: Annotated[list[str] | None, Query(description="Dietary tag IDs")] = None,
    min_rating: Annotated[float | None, Query()] = None,
    sort: Annotated[SearchSort, Query()] = "relevance",
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = 12,
) -> SearchFilterInput:
    """Collect search query parameters into a validated SearchFilterInput."""
    try:
        return SearchFilterInput(
            q=q,
            cuisine=cuisine,
            difficulty=difficulty,
            max_prep_time=max_prep_time,
            max_cook_time=max_cook_time,
            dietary=dietary,
            min_rating=min_rating,
            sort=sort,
            page=page,
            limit=limit,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=SearchResponse)
async def search_recipes(
    params: SearchFilterInput = Depends(get_search_filters),
    user_id: str | None = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> SearchResponse:
    """
    Search recipes by text and filters.

    Signed-in callers see their own recipes and public ones; anonymous
    callers see public recipes only. With a text query and sort=relevance,
    results are ranked by text relevance.
    """
    logger.info(
        f"Searching recipes: q={params.q!r}, sort={params.sort}, "
        f"page={params.page}, limit={params.limit}"
    )

    statement = build_search_statement(
        params,
        user_id=user_id,
        ts_config=get_settings().search_ts_config,
    )
    if statement is None:
        return _empty_page(params)

    try:
        total = await db.scalar(statement.count) or 0
        if total == 0 or params.offset >= total:
            return _empty_page(params, total)

        result = await db.execute(statement.select)
        recipes = result.scalars().all()
    except (DataError, ProgrammingError) as e:
        # A tsquery the database rejects is an empty result, not a server error
        if statement.ts_query is None:
            raise
        logger.warning(f"Search query failed for q={params.q!r}: {e}")
        return _empty_page(params)

    return SearchResponse(
        data=[RecipeSearchItem.from_recipe(recipe) for recipe in recipes],
        pagination=Pagination(
            total=total,
            page=params.page,
            page_size=params.limit,
            total_pages=math.ceil(total / params.limit),
        ),
    )


@router.get("/tsquery", response_model=TsQueryResponse)
async def preview_ts_query(
    q: Annotated[str, Query(max_length=200, description="Free-text search query")],
) -> TsQueryResponse:
    """Show how a text query is sanitized and turned into a tsquery."""
    return TsQueryResponse(
        query=q,
        sanitized=sanitize_search_query(q),
        ts_query=build_ts_query_string(q),
    )
