"""API routers for the recipekit application."""

from recipekit.routers.ingredients import router as ingredients_router
from recipekit.routers.search import router as search_router
from recipekit.routers.shopping_lists import router as shopping_lists_router

__all__ = [
    "ingredients_router",
    "search_router",
    "shopping_lists_router",
]
