"""API routes for building shopping lists from recipe ingredients."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, field_validator

from recipekit.logging_config import get_logger
from recipekit.normalize.aggregation import AggregatedItem
from recipekit.plan.shopping_list import RecipeIngredients, ShoppingListGenerator
from recipekit.rate_limit import API_WRITE_LIMITER
from recipekit.routers.dependencies import rate_limited
from recipekit.sanitize import sanitize_text
from recipekit.schemas import IngredientLine

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/v1/shopping-lists",
    tags=["shopping-lists"],
    dependencies=[Depends(rate_limited(API_WRITE_LIMITER))],
)


# =============================================================================
# Request/Response Schemas
# =============================================================================


class RecipeIngredientsSchema(BaseModel):
    """Ingredients of one recipe and how much to scale them."""

    recipe_id: str = Field(min_length=1)
    ingredients: list[IngredientLine] = Field(default_factory=list, max_length=200)
    scale_factor: float = Field(1.0, gt=0, le=100)


class AggregateRequest(BaseModel):
    """Request to build a shopping list from recipes."""

    name: str = Field("Shopping List", min_length=1, max_length=200)
    recipes: list[RecipeIngredientsSchema] = Field(min_length=1, max_length=50)

    @field_validator("name")
    @classmethod
    def sanitize_name(cls, value: str) -> str:
        """Strip markup from the list name."""
        cleaned = sanitize_text(value)
        if not cleaned:
            raise ValueError("List name is required")
        return cleaned


class ShoppingListItemSchema(BaseModel):
    """Single merged item in the shopping list."""

    ingredient_name: str
    quantity: str | None = None
    category: str

    @classmethod
    def from_item(cls, item: AggregatedItem) -> "ShoppingListItemSchema":
        return cls(
            ingredient_name=item.ingredient_name,
            quantity=item.quantity,
            category=item.category,
        )


class ShoppingListResponse(BaseModel):
    """Aggregated shopping list."""

    name: str
    items: list[ShoppingListItemSchema]
    items_by_category: dict[str, list[ShoppingListItemSchema]]
    total_items: int


# =============================================================================
# Endpoints
# =============================================================================


def get_shopping_list_generator() -> ShoppingListGenerator:
    """Get shopping list generator instance."""
    return ShoppingListGenerator()


@router.post(
    "/aggregate",
    response_model=ShoppingListResponse,
    status_code=status.HTTP_201_CREATED,
)
async def aggregate_shopping_list(
    request: AggregateRequest,
    generator: ShoppingListGenerator = Depends(get_shopping_list_generator),
) -> ShoppingListResponse:
    """
    Build a shopping list from one or more recipes.

    Each recipe is scaled by its scale_factor, then duplicate ingredients are
    merged: same unit quantities are summed, mixed units are listed with
    " + ". Every item gets a store category.
    """
    recipes = [
        RecipeIngredients(
            recipe_id=recipe.recipe_id,
            ingredients=[line.to_raw() for line in recipe.ingredients],
            scale_factor=recipe.scale_factor,
        )
        for recipe in request.recipes
    ]

    shopping_list = generator.generate(recipes, name=request.name)

    return ShoppingListResponse(
        name=shopping_list.name,
        items=[ShoppingListItemSchema.from_item(item) for item in shopping_list.items],
        items_by_category={
            category: [ShoppingListItemSchema.from_item(item) for item in items]
            for category, items in shopping_list.items_by_category.items()
        },
        total_items=len(shopping_list.items),
    )
