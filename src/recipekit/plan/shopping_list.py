"""Shopping list generation from one or more recipes."""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from recipekit.logging_config import get_logger
from recipekit.normalize.aggregation import (
    AggregatedItem,
    RawIngredient,
    aggregate_ingredients,
)
from recipekit.normalize.categories import OTHER_CATEGORY
from recipekit.normalize.quantities import scale_quantity

logger = get_logger(__name__)


@dataclass
class RecipeIngredients:
    """Ingredient lines of one recipe, at the servings the shopper wants."""

    recipe_id: str
    ingredients: list[RawIngredient] = field(default_factory=list)
    scale_factor: float = 1.0


@dataclass
class ShoppingList:
    """Aggregated shopping list, also grouped by store category."""

    name: str = "Shopping List"
    items: list[AggregatedItem] = field(default_factory=list)
    items_by_category: dict[str, list[AggregatedItem]] = field(default_factory=dict)

    def add_item(self, item: AggregatedItem) -> None:
        """Add an item and update the category grouping."""
        self.items.append(item)

        category = item.category or OTHER_CATEGORY
        if category not in self.items_by_category:
            self.items_by_category[category] = []
        self.items_by_category[category].append(item)

    @property
    def categories(self) -> list[str]:
        """Categories in the order they first appear on the list."""
        return list(self.items_by_category)


def scale_ingredients(
    ingredients: Iterable[RawIngredient],
    factor: float,
) -> list[RawIngredient]:
    """Scale every ingredient's quantity, keeping names and order."""
    return [replace(ing, quantity=scale_quantity(ing.quantity, factor)) for ing in ingredients]


class ShoppingListGenerator:
    """
    Builds shopping lists from recipes:
    - Per-recipe quantity scaling for adjusted servings
    - Duplicate merging across recipes (e.g. "2 cups" + "1 cups" flour)
    - Category assignment for store aisles
    """

    def generate(
        self,
        recipes: list[RecipeIngredients],
        name: str = "Shopping List",
    ) -> ShoppingList:
        """
        Generate a shopping list from recipes.

        Args:
            recipes: Recipes with their ingredients and scale factors.
            name: Display name of the list.

        Returns:
            ShoppingList with one item per distinct ingredient.
        """
        logger.info(f"Generating shopping list {name!r} from {len(recipes)} recipes")

        lines: list[RawIngredient] = []
        for recipe in recipes:
            lines.extend(scale_ingredients(recipe.ingredients, recipe.scale_factor))

        shopping_list = ShoppingList(name=name)
        for item in aggregate_ingredients(lines):
            shopping_list.add_item(item)

        logger.info(
            f"Generated shopping list: {len(lines)} lines -> {len(shopping_list.items)} items "
            f"in {len(shopping_list.items_by_category)} categories"
        )

        return shopping_list

    def merge_into(
        self,
        shopping_list: ShoppingList,
        recipe: RecipeIngredients,
    ) -> list[AggregatedItem]:
        """
        Append a recipe's aggregated ingredients to an existing list.

        Items already on the list are left alone; the recipe is aggregated on
        its own and its items are added after them.

        Returns:
            The newly added items.
        """
        scaled = scale_ingredients(recipe.ingredients, recipe.scale_factor)
        added = aggregate_ingredients(scaled)
        for item in added:
            shopping_list.add_item(item)

        logger.debug(
            f"Added {len(added)} items from recipe {recipe.recipe_id} to {shopping_list.name!r}"
        )
        return added
