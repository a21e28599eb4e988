"""Shopping list planning."""

from recipekit.plan.shopping_list import (
    RecipeIngredients,
    ShoppingList,
    ShoppingListGenerator,
    scale_ingredients,
)

__all__ = [
    "RecipeIngredients",
    "ShoppingList",
    "ShoppingListGenerator",
    "scale_ingredients",
]
