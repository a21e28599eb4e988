"""Quantity parsing, formatting and scaling for recipe ingredient lines."""

import math
import re
from dataclasses import dataclass

from recipekit.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Qualitative amounts that must never be scaled. Matched as substrings, so
# "a dash" and "pinch of salt" are non-scalable too.
NON_SCALABLE_TERMS: tuple[str, ...] = (
    "pinch",
    "to taste",
    "as needed",
    "dash",
    "splash",
    "handful",
    "some",
)

# Fractions a cook expects to read, in ascending order
COMMON_FRACTIONS: list[tuple[float, str]] = [
    (1 / 8, "1/8"),
    (1 / 6, "1/6"),
    (1 / 4, "1/4"),
    (1 / 3, "1/3"),
    (3 / 8, "3/8"),
    (1 / 2, "1/2"),
    (5 / 8, "5/8"),
    (2 / 3, "2/3"),
    (3 / 4, "3/4"),
    (5 / 6, "5/6"),
    (7 / 8, "7/8"),
]

FRACTION_TOLERANCE = 0.02

MIN_SERVINGS = 1
MAX_SERVINGS = 99

_NUMBER = r"[0-9]+(?:\.[0-9]+)?"

RANGE_PATTERN = re.compile(rf"^({_NUMBER})(\s*[-–]\s*)({_NUMBER})\s*(.*)$", re.DOTALL)
MIXED_NUMBER_PATTERN = re.compile(r"^([0-9]+)(?:\s+|-)([0-9]+/[0-9]+)\s*(.*)$", re.DOTALL)
FRACTION_PATTERN = re.compile(r"^([0-9]+/[0-9]+)\s*(.*)$", re.DOTALL)
NUMBER_PATTERN = re.compile(rf"^({_NUMBER})\s*(.*)$", re.DOTALL)


@dataclass(frozen=True)
class ParsedQuantity:
    """A numeric quantity extracted from free text."""

    value: float
    unit: str  # lowercase, may be empty
    raw: str  # original input, trimmed


# =============================================================================
# Parsing
# =============================================================================


def is_non_scalable(quantity: str) -> bool:
    """Check whether a quantity is a qualitative amount like "pinch"."""
    lower = quantity.lower().strip()
    return any(term in lower for term in NON_SCALABLE_TERMS)


def parse_fraction(fraction: str) -> float | None:
    """Parse "n/d" into a float, or None when malformed or d is zero."""
    parts = fraction.split("/")
    if len(parts) != 2:
        return None
    try:
        numerator = float(parts[0])
        denominator = float(parts[1])
    except ValueError:
        return None
    if denominator == 0:
        return None
    return numerator / denominator


def _match_range(text: str) -> re.Match[str] | None:
    """Match "2-3 cups" style ranges, but not hyphenated mixed numbers."""
    match = RANGE_PATTERN.match(text)
    # "1-1/2 cups" is one and a half, not a range ending in "/2 cups"
    if match and match.group(4).startswith("/"):
        return None
    return match


def _split_quantity(text: str) -> tuple[float, str] | None:
    """
    Split trimmed text into a leading number and the unit text after it.

    The unit keeps the casing it was written with. Ranges yield their lower
    bound.
    """
    range_match = _match_range(text)
    if range_match:
        return float(range_match.group(1)), range_match.group(4).strip()

    mixed_match = MIXED_NUMBER_PATTERN.match(text)
    if mixed_match:
        fraction = parse_fraction(mixed_match.group(2))
        if fraction is not None:
            return int(mixed_match.group(1)) + fraction, mixed_match.group(3).strip()

    fraction_match = FRACTION_PATTERN.match(text)
    if fraction_match:
        fraction = parse_fraction(fraction_match.group(1))
        if fraction is not None:
            return fraction, fraction_match.group(2).strip()

    number_match = NUMBER_PATTERN.match(text)
    if number_match:
        unit = number_match.group(2).strip()
        # "1/0 cup" is a broken fraction, not 1 of "/0 cup"
        if unit.startswith("/"):
            return None
        return float(number_match.group(1)), unit

    return None


def parse_quantity(text: str) -> ParsedQuantity | None:
    """
    Parse a quantity string into a numeric value, unit and raw string.

    Handles:
    - "2 cups" -> value 2, unit "cups"
    - "2.5 tbsp" -> value 2.5
    - "1/2 cup" -> value 0.5
    - "1 1/2 cups" or "1-1/2 cups" -> value 1.5
    - "2-3 cups" -> value 2 (lower bound)
    - "3" -> value 3, unit ""

    Returns None for empty text, non-scalable terms ("pinch", "to taste")
    and text without a leading number ("some flour").
    """
    trimmed = text.strip()
    if not trimmed:
        return None
    if is_non_scalable(trimmed):
        return None

    split = _split_quantity(trimmed)
    if split is None:
        return None

    value, unit = split
    return ParsedQuantity(value=value, unit=unit.lower(), raw=trimmed)


# =============================================================================
# Formatting
# =============================================================================


def _format_decimal(value: float) -> str:
    """Render a value rounded half-up to two decimals, without trailing zeros."""
    rounded = math.floor(value * 100 + 0.5) / 100
    if rounded == int(rounded):
        return str(int(rounded))
    return repr(rounded)


def format_quantity(value: float) -> str:
    """
    Format a number the way a recipe would print it.

    Whole numbers render as integers, values near a common fraction render as
    "1/2" or "1 1/2", everything else as a decimal rounded to two places.
    Zero and negative values render as "0".
    """
    if not math.isfinite(value) or value <= 0:
        return "0"

    whole = math.floor(value)
    fractional = value - whole

    if fractional > FRACTION_TOLERANCE:
        for decimal, display in COMMON_FRACTIONS:
            if abs(fractional - decimal) < FRACTION_TOLERANCE:
                return f"{whole} {display}" if whole > 0 else display

    if fractional < FRACTION_TOLERANCE:
        return str(whole)

    return _format_decimal(value)


# =============================================================================
# Scaling
# =============================================================================


def scale_quantity(quantity: str | None, factor: float) -> str | None:
    """
    Scale a quantity string by a factor.

    The input comes back unchanged when the factor is 1, when it is not a
    finite number, or when the quantity is empty, qualitative or unparseable.
    Ranges scale both bounds and keep their separator: "2-3 cups" x2 ->
    "4-6 cups".
    """
    if quantity is None:
        return None
    if factor == 1:
        return quantity
    if not math.isfinite(factor):
        return quantity

    trimmed = quantity.strip()
    if not trimmed or is_non_scalable(trimmed):
        return quantity

    range_match = _match_range(trimmed)
    if range_match:
        low_value = float(range_match.group(1)) * factor
        high_value = float(range_match.group(3)) * factor
        if not (math.isfinite(low_value) and math.isfinite(high_value)):
            return quantity
        low = format_quantity(low_value)
        high = format_quantity(high_value)
        separator = range_match.group(2)
        unit = range_match.group(4).strip()
        scaled = f"{low}{separator}{high}"
        return f"{scaled} {unit}" if unit else scaled

    split = _split_quantity(trimmed)
    if split is None:
        logger.debug(f"Leaving unparseable quantity unscaled: {quantity!r}")
        return quantity

    value, unit = split
    scaled_value = value * factor
    # Digit strings too long for a float overflow to inf
    if not math.isfinite(scaled_value):
        return quantity
    formatted = format_quantity(scaled_value)
    return f"{formatted} {unit}" if unit else formatted


def compute_scale_factor(original_servings: int, target_servings: int) -> float:
    """
    Get the factor that turns a recipe for original_servings into one for
    target_servings. Targets are clamped to MIN_SERVINGS..MAX_SERVINGS.
    """
    if original_servings <= 0:
        raise ValueError(f"original_servings must be positive, got {original_servings}")

    target = max(MIN_SERVINGS, min(MAX_SERVINGS, target_servings))
    if target == original_servings:
        return 1.0
    return target / original_servings
