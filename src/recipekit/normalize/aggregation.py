"""Ingredient aggregation for shopping lists."""

import math
import re
from dataclasses import dataclass, field

from recipekit.logging_config import get_logger
from recipekit.normalize.categories import categorize_ingredient

logger = get_logger(__name__)

AGGREGATION_QUANTITY_PATTERN = re.compile(r"^([0-9]+(?:\.[0-9]+)?)\s*(.*)$", re.DOTALL)


@dataclass(frozen=True)
class RawIngredient:
    """One ingredient line from one recipe."""

    name: str
    quantity: str | None = None


@dataclass(frozen=True)
class AggregatedItem:
    """One merged shopping list line."""

    ingredient_name: str
    quantity: str | None
    category: str


@dataclass
class _IngredientGroup:
    original_name: str
    quantities: list[tuple[float, str]] = field(default_factory=list)
    raw_quantities: list[str] = field(default_factory=list)
    unparsed_count: int = 0


def parse_quantity_for_aggregation(quantity: str | None) -> tuple[float, str] | None:
    """
    Parse a plain "<number> <unit>" quantity into (value, lowercase unit).

    Only integers and decimals are summable. Fractions, mixed numbers and
    ranges return None so they are listed verbatim instead of being
    misread as "1" of "/2 cup".
    """
    if not quantity:
        return None

    trimmed = quantity.strip()
    if not trimmed:
        return None

    match = AGGREGATION_QUANTITY_PATTERN.match(trimmed)
    if not match:
        return None

    unit = match.group(2).strip().lower()
    if unit and unit[0] in "0123456789/-–":
        return None

    return float(match.group(1)), unit


def normalize_ingredient_name(name: str) -> str:
    """
    Normalize an ingredient name for grouping.

    Lowercases, trims and strips one plural suffix: "ies" -> "y", "es" -> ""
    (except "ses"/"ces"), "s" -> "" (except "ss"). This is a heuristic;
    "tomatoes" and "tomato" group together, "glass" stays as is, and words
    like "gas" lose their "s".
    """
    normalized = name.lower().strip()

    if normalized.endswith("ies"):
        normalized = normalized[:-3] + "y"
    elif (
        normalized.endswith("es")
        and not normalized.endswith("ses")
        and not normalized.endswith("ces")
    ):
        normalized = normalized[:-2]
    elif normalized.endswith("s") and not normalized.endswith("ss"):
        normalized = normalized[:-1]

    return normalized


def format_total(total: float) -> str:
    """Render a summed quantity: integers as-is, otherwise two decimals at most."""
    if not math.isfinite(total):
        return "0"
    if total % 1 == 0:
        return str(int(total))
    rounded = math.floor(total * 100 + 0.5) / 100
    if rounded == int(rounded):
        return str(int(rounded))
    return repr(rounded)


def _combine_quantities(group: _IngredientGroup) -> str | None:
    """Sum a group's quantities if they share one unit, else join them."""
    if not group.raw_quantities:
        return None

    units = {unit for _, unit in group.quantities}
    if group.unparsed_count == 0 and len(units) == 1:
        unit = units.pop()
        total = sum(value for value, _ in group.quantities)
        # Digit strings too long for a float sum to inf; list them as written
        if math.isfinite(total):
            formatted = format_total(total)
            return f"{formatted} {unit}" if unit else formatted

    logger.debug(
        f"Joining quantities for {group.original_name!r}: "
        f"{len(units)} units, {group.unparsed_count} unparsed"
    )
    return " + ".join(group.raw_quantities)


def aggregate_ingredients(items: list[RawIngredient]) -> list[AggregatedItem]:
    """
    Aggregate raw ingredient lines by combining duplicates.

    Lines are grouped by normalized name; the first spelling seen is kept for
    display. A group whose quantities all parse and share one unit is summed
    ("2 cups" + "1 cups" -> "3 cups"). Any other mix lists every raw quantity
    joined with " + ". Groups without quantities get None. Each group is
    categorized from its display name; output follows first-seen order.
    """
    grouped: dict[str, _IngredientGroup] = {}

    for item in items:
        normalized = normalize_ingredient_name(item.name)
        group = grouped.get(normalized)
        if group is None:
            group = _IngredientGroup(original_name=item.name)
            grouped[normalized] = group

        raw = item.quantity.strip() if item.quantity else ""
        if not raw:
            continue

        group.raw_quantities.append(raw)
        parsed = parse_quantity_for_aggregation(raw)
        if parsed is None:
            group.unparsed_count += 1
        else:
            group.quantities.append(parsed)

    return [
        AggregatedItem(
            ingredient_name=group.original_name,
            quantity=_combine_quantities(group),
            category=categorize_ingredient(group.original_name),
        )
        for group in grouped.values()
    ]
