"""Common request schemas shared by the API routers."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from recipekit.normalize.aggregation import RawIngredient
from recipekit.sanitize import sanitize_text

Difficulty = Literal["EASY", "MEDIUM", "HARD"]
SearchSort = Literal["relevance", "newest", "oldest", "rating", "prepTime", "title"]

MAX_SEARCH_QUERY_LENGTH = 200


class IngredientLine(BaseModel):
    """One ingredient line as submitted by a client."""

    name: str = Field(min_length=1, max_length=200)
    quantity: str | None = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def sanitize_name(cls, value: str) -> str:
        """Strip markup from the ingredient name."""
        cleaned = sanitize_text(value)
        if not cleaned:
            raise ValueError("Ingredient name is required")
        return cleaned

    def to_raw(self) -> RawIngredient:
        """Convert to the aggregation input type."""
        return RawIngredient(name=self.name, quantity=self.quantity)


class SearchFilterInput(BaseModel):
    """Validated recipe search parameters."""

    q: str | None = Field(
        None,
        max_length=MAX_SEARCH_QUERY_LENGTH,
        description="Free-text search query",
    )
    cuisine: str | None = None
    difficulty: Difficulty | None = None
    max_prep_time: int | None = Field(None, gt=0, description="Upper bound in minutes")
    max_cook_time: int | None = Field(None, gt=0, description="Upper bound in minutes")
    dietary: list[str] | None = Field(None, description="Dietary tag IDs, any of")
    min_rating: float | None = Field(None, ge=1, le=5)
    sort: SearchSort = "relevance"
    page: int = Field(1, gt=0)
    limit: int = Field(12, ge=1, le=50)

    @field_validator("dietary", mode="before")
    @classmethod
    def coerce_dietary(cls, value: object) -> object:
        """Accept a single tag ID as well as a list."""
        if isinstance(value, str):
            return [value]
        return value

    @property
    def offset(self) -> int:
        """Row offset of the requested page."""
        return (self.page - 1) * self.limit

    @property
    def has_search_query(self) -> bool:
        """Whether a non-blank text query was given."""
        return bool(self.q and self.q.strip())
