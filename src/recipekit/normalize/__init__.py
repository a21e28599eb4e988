"""Parse, scale, categorize and aggregate ingredient quantities."""

from recipekit.normalize.aggregation import (
    AggregatedItem,
    RawIngredient,
    aggregate_ingredients,
    normalize_ingredient_name,
    parse_quantity_for_aggregation,
)
from recipekit.normalize.categories import (
    CATEGORIES,
    OTHER_CATEGORY,
    categorize_ingredient,
)
from recipekit.normalize.quantities import (
    ParsedQuantity,
    compute_scale_factor,
    format_quantity,
    is_non_scalable,
    parse_quantity,
    scale_quantity,
)

__all__ = [
    "CATEGORIES",
    "OTHER_CATEGORY",
    "AggregatedItem",
    "ParsedQuantity",
    "RawIngredient",
    "aggregate_ingredients",
    "categorize_ingredient",
    "compute_scale_factor",
    "format_quantity",
    "is_non_scalable",
    "normalize_ingredient_name",
    "parse_quantity",
    "parse_quantity_for_aggregation",
    "scale_quantity",
]
