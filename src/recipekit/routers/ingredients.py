"""API routes for parsing, scaling and categorizing ingredient quantities."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field, model_validator

from recipekit.logging_config import get_logger
from recipekit.normalize.categories import categorize_ingredient
from recipekit.normalize.quantities import (
    MAX_SERVINGS,
    MIN_SERVINGS,
    compute_scale_factor,
    parse_quantity,
)
from recipekit.plan.shopping_list import scale_ingredients
from recipekit.rate_limit import API_READ_LIMITER
from recipekit.routers.dependencies import rate_limited
from recipekit.schemas import IngredientLine

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/v1/ingredients",
    tags=["ingredients"],
    dependencies=[Depends(rate_limited(API_READ_LIMITER))],
)


# =============================================================================
# Request/Response Schemas
# =============================================================================


class ScaleRequest(BaseModel):
    """Scale ingredient lines by a factor or from one serving count to another."""

    ingredients: list[IngredientLine] = Field(max_length=200)
    factor: float | None = Field(None, gt=0, le=100)
    original_servings: int | None = Field(None, ge=1, le=MAX_SERVINGS)
    target_servings: int | None = Field(None, ge=MIN_SERVINGS, le=MAX_SERVINGS)

    @model_validator(mode="after")
    def check_scale_source(self) -> "ScaleRequest":
        """Require either a factor or both serving counts."""
        has_servings = self.original_servings is not None and self.target_servings is not None
        if self.factor is None and not has_servings:
            raise ValueError("Provide factor or both original_servings and target_servings")
        return self


class ScaledIngredient(BaseModel):
    """One scaled ingredient line."""

    name: str
    quantity: str | None = None


class ScaleResponse(BaseModel):
    """Scaled ingredient lines."""

    factor: float
    ingredients: list[ScaledIngredient]


class ParseRequest(BaseModel):
    """A quantity to parse."""

    quantity: str = Field(max_length=100)


class ParsedQuantitySchema(BaseModel):
    """Structured form of a quantity."""

    value: float
    unit: str
    raw: str


class ParseResponse(BaseModel):
    """Parse result; parsed is null for non-scalable quantities."""

    quantity: str
    scalable: bool
    parsed: ParsedQuantitySchema | None = None


class CategoryResponse(BaseModel):
    """Shopping category for an ingredient."""

    name: str
    category: str


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/scale", response_model=ScaleResponse)
async def scale_ingredient_lines(request: ScaleRequest) -> ScaleResponse:
    """
    Scale ingredient quantities for a different number of servings.

    Qualitative amounts ("pinch", "to taste") and unparseable text are
    returned exactly as written.
    """
    if request.factor is not None:
        factor = request.factor
    else:
        factor = compute_scale_factor(request.original_servings, request.target_servings)

    logger.info(f"Scaling {len(request.ingredients)} ingredients by {factor:g}")

    scaled = scale_ingredients((line.to_raw() for line in request.ingredients), factor)
    return ScaleResponse(
        factor=factor,
        ingredients=[ScaledIngredient(name=ing.name, quantity=ing.quantity) for ing in scaled],
    )


@router.post("/parse", response_model=ParseResponse)
async def parse_ingredient_quantity(request: ParseRequest) -> ParseResponse:
    """Parse a free-text quantity such as "1 1/2 cups"."""
    parsed = parse_quantity(request.quantity)

    return ParseResponse(
        quantity=request.quantity,
        scalable=parsed is not None,
        parsed=(
            ParsedQuantitySchema(value=parsed.value, unit=parsed.unit, raw=parsed.raw)
            if parsed
            else None
        ),
    )


@router.get("/category", response_model=CategoryResponse)
async def get_ingredient_category(
    name: Annotated[str, Query(min_length=1, max_length=200, description="Ingredient name")],
) -> CategoryResponse:
    """Get the shopping category of an ingredient."""
    return CategoryResponse(name=name, category=categorize_ingredient(name))
