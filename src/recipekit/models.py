"""SQLAlchemy database models.

Only the columns the search builders filter and sort on are mapped here;
recipe storage itself lives with the persistence service.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TSVECTOR
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recipekit.database import Base

VISIBILITY_PUBLIC = "PUBLIC"
VISIBILITY_PRIVATE = "PRIVATE"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Recipe(Base):
    """Recipe as seen by search."""

    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    author_id: Mapped[str] = mapped_column(String, nullable=False)
    visibility: Mapped[str] = mapped_column(
        String(20), default=VISIBILITY_PRIVATE, nullable=False
    )  # PUBLIC, PRIVATE
    difficulty: Mapped[str | None] = mapped_column(String(20), nullable=True)  # EASY, MEDIUM, HARD
    cuisine_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    prep_time: Mapped[int | None] = mapped_column(Integer, nullable=True)  # minutes
    cook_time: Mapped[int | None] = mapped_column(Integer, nullable=True)  # minutes
    servings: Mapped[int | None] = mapped_column(Integer, nullable=True)
    avg_rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    rating_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Maintained by a database trigger over name, description and cuisine
    search_vector: Mapped[str | None] = mapped_column(TSVECTOR, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    dietary_tags: Mapped[list["RecipeDietaryTag"]] = relationship(
        "RecipeDietaryTag", back_populates="recipe"
    )

    __table_args__ = (
        Index("idx_recipes_author_id", "author_id"),
        Index("idx_recipes_visibility", "visibility"),
        Index("idx_recipes_created_at", "created_at"),
        Index("idx_recipes_search_vector", "search_vector", postgresql_using="gin"),
    )


class DietaryTag(Base):
    """Dietary tag such as vegan or gluten-free."""

    __tablename__ = "dietary_tags"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    recipes: Mapped[list["RecipeDietaryTag"]] = relationship(
        "RecipeDietaryTag", back_populates="dietary_tag"
    )


class RecipeDietaryTag(Base):
    """Join table for recipes and dietary tags."""

    __tablename__ = "recipe_dietary_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[str] = mapped_column(String, ForeignKey("recipes.id"), nullable=False)
    dietary_tag_id: Mapped[str] = mapped_column(
        String, ForeignKey("dietary_tags.id"), nullable=False
    )

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="dietary_tags")
    dietary_tag: Mapped["DietaryTag"] = relationship("DietaryTag", back_populates="recipes")

    __table_args__ = (
        UniqueConstraint("recipe_id", "dietary_tag_id", name="uq_recipe_dietary_tag"),
        Index("idx_recipe_dietary_tags_tag_id", "dietary_tag_id"),
    )
