"""Tests for the HTTP API routes."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError, ProgrammingError

from recipekit.models import DietaryTag, Recipe, RecipeDietaryTag

SCALE_URL = "/api/v1/ingredients/scale"
PARSE_URL = "/api/v1/ingredients/parse"
CATEGORY_URL = "/api/v1/ingredients/category"
AGGREGATE_URL = "/api/v1/shopping-lists/aggregate"
SEARCH_URL = "/api/v1/search"


def _recipe(recipe_id: str = "r1") -> Recipe:
    recipe = Recipe(
        id=recipe_id,
        name="Tomato Soup",
        description="Simple soup",
        author_id="user-1",
        visibility="PUBLIC",
        difficulty="EASY",
        cuisine_type="Italian",
        prep_time=10,
        cook_time=20,
        servings=4,
        avg_rating=4.5,
        rating_count=2,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    recipe.dietary_tags = [
        RecipeDietaryTag(dietary_tag_id="t1", dietary_tag=DietaryTag(id="t1", name="vegan"))
    ]
    return recipe


def _rows(*recipes: Recipe) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = list(recipes)
    return result


class TestIngredientRoutes:
    """Tests for /api/v1/ingredients."""

    def test_scale_by_servings(self, client):
        """Test scaling from one serving count to another."""
        response = client.post(
            SCALE_URL,
            json={
                "ingredients": [
                    {"name": "Flour", "quantity": "2 cups"},
                    {"name": "Salt", "quantity": "pinch"},
                    {"name": "Butter"},
                ],
                "original_servings": 4,
                "target_servings": 8,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["factor"] == 2.0
        assert data["ingredients"] == [
            {"name": "Flour", "quantity": "4 cups"},
            {"name": "Salt", "quantity": "pinch"},
            {"name": "Butter", "quantity": None},
        ]

    def test_scale_by_factor(self, client):
        """Test scaling by an explicit factor."""
        response = client.post(
            SCALE_URL,
            json={"ingredients": [{"name": "Milk", "quantity": "1 cup"}], "factor": 0.5},
        )

        assert response.status_code == 200
        assert response.json()["ingredients"][0]["quantity"] == "1/2 cup"

    def test_scale_requires_factor_or_servings(self, client):
        """Test a request with no scale source is rejected."""
        response = client.post(
            SCALE_URL,
            json={"ingredients": [{"name": "Milk", "quantity": "1 cup"}], "original_servings": 4},
        )

        assert response.status_code == 422

    def test_scale_rejects_markup_only_name(self, client):
        """Test ingredient names that sanitize to nothing are rejected."""
        response = client.post(
            SCALE_URL,
            json={"ingredients": [{"name": "<b></b>", "quantity": "1 cup"}], "factor": 2},
        )

        assert response.status_code == 422

    def test_parse(self, client):
        """Test parsing a mixed number."""
        response = client.post(PARSE_URL, json={"quantity": "1 1/2 Cups"})

        assert response.status_code == 200
        assert response.json() == {
            "quantity": "1 1/2 Cups",
            "scalable": True,
            "parsed": {"value": 1.5, "unit": "cups", "raw": "1 1/2 Cups"},
        }

    def test_parse_non_scalable(self, client):
        """Test qualitative amounts are reported as not scalable."""
        response = client.post(PARSE_URL, json={"quantity": "to taste"})

        assert response.status_code == 200
        assert response.json()["scalable"] is False
        assert response.json()["parsed"] is None

    def test_category(self, client):
        """Test category lookup."""
        response = client.get(CATEGORY_URL, params={"name": "Chicken breast"})

        assert response.status_code == 200
        assert response.json() == {"name": "Chicken breast", "category": "Proteins"}


class TestShoppingListRoutes:
    """Tests for /api/v1/shopping-lists."""

    def test_aggregate(self, client):
        """Test building a list from two recipes."""
        response = client.post(
            AGGREGATE_URL,
            json={
                "name": "<i>Weekly</i>",
                "recipes": [
                    {
                        "recipe_id": "pancakes",
                        "ingredients": [
                            {"name": "Flour", "quantity": "1 cups"},
                            {"name": "Butter", "quantity": "2 tbsp"},
                        ],
                        "scale_factor": 2,
                    },
                    {
                        "recipe_id": "cookies",
                        "ingredients": [
                            {"name": "flour", "quantity": "1 cups"},
                            {"name": "butter", "quantity": "1 cup"},
                            {"name": "xanthan gum"},
                        ],
                    },
                ],
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Weekly"
        assert data["total_items"] == 3
        assert data["items"] == [
            {"ingredient_name": "Flour", "quantity": "3 cups", "category": "Baking"},
            {"ingredient_name": "Butter", "quantity": "4 tbsp + 1 cup", "category": "Dairy & Eggs"},
            {"ingredient_name": "xanthan gum", "quantity": None, "category": "Other"},
        ]
        assert list(data["items_by_category"]) == ["Baking", "Dairy & Eggs", "Other"]

    def test_aggregate_requires_recipes(self, client):
        """Test an empty recipe list is rejected."""
        response = client.post(AGGREGATE_URL, json={"recipes": []})

        assert response.status_code == 422


class TestSearchRoutes:
    """Tests for /api/v1/search."""

    def test_empty_tsquery_skips_database(self, client, mock_db_session):
        """Test a query with nothing searchable returns an empty page directly."""
        response = client.get(SEARCH_URL, params={"q": "!!!"})

        assert response.status_code == 200
        assert response.json() == {
            "data": [],
            "pagination": {"total": 0, "page": 1, "page_size": 12, "total_pages": 0},
        }
        mock_db_session.scalar.assert_not_called()

    def test_results(self, client, mock_db_session):
        """Test a page of results with pagination."""
        mock_db_session.scalar.return_value = 25
        mock_db_session.execute.return_value = _rows(_recipe())

        response = client.get(SEARCH_URL, params={"q": "tomato", "limit": 12})

        assert response.status_code == 200
        data = response.json()
        assert data["pagination"] == {"total": 25, "page": 1, "page_size": 12, "total_pages": 3}
        assert data["data"][0]["id"] == "r1"
        assert data["data"][0]["dietary_tags"] == [{"id": "t1", "name": "vegan"}]

    def test_page_past_end(self, client, mock_db_session):
        """Test a page beyond the last one is empty but reports the total."""
        mock_db_session.scalar.return_value = 5

        response = client.get(SEARCH_URL, params={"page": 2})

        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.json()["pagination"]["total"] == 5
        mock_db_session.execute.assert_not_called()

    def test_rejected_tsquery_gives_empty_page(self, client, mock_db_session):
        """Test a text query the database rejects degrades to an empty page."""
        mock_db_session.scalar.side_effect = ProgrammingError(
            "SELECT count(*) FROM recipes", {}, Exception("syntax error in tsquery")
        )

        response = client.get(SEARCH_URL, params={"q": "soup"})

        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.json()["pagination"]["total"] == 0

    def test_connection_error_propagates(self, client, mock_db_session):
        """Test a database outage is not hidden behind an empty page."""
        mock_db_session.scalar.side_effect = OperationalError(
            "SELECT count(*) FROM recipes", {}, Exception("connection refused")
        )

        with pytest.raises(OperationalError):
            client.get(SEARCH_URL, params={"q": "soup"})

    def test_filter_only_search_errors_propagate(self, client, mock_db_session):
        """Test database errors without a text query are not swallowed."""
        mock_db_session.scalar.side_effect = ProgrammingError(
            "SELECT count(*) FROM recipes", {}, Exception("relation does not exist")
        )

        with pytest.raises(ProgrammingError):
            client.get(SEARCH_URL, params={"sort": "newest"})

    def test_user_sees_own_recipes(self, client, mock_db_session):
        """Test the X-User-Id header widens visibility to the caller's recipes."""
        client.get(SEARCH_URL, headers={"X-User-Id": "user-42"})

        count_stmt = mock_db_session.scalar.call_args.args[0]
        compiled = count_stmt.compile(dialect=postgresql.dialect())
        assert "recipes.author_id" in str(compiled)
        assert "user-42" in compiled.params.values()

    def test_repeated_dietary_param(self, client, mock_db_session):
        """Test dietary filters may be passed once or repeated."""
        response = client.get(SEARCH_URL, params=[("dietary", "t1"), ("dietary", "t2")])

        assert response.status_code == 200
        mock_db_session.scalar.assert_called_once()

    def test_invalid_params(self, client):
        """Test out-of-range filters are rejected."""
        assert client.get(SEARCH_URL, params={"limit": 51}).status_code == 422
        assert client.get(SEARCH_URL, params={"min_rating": 6}).status_code == 422
        assert client.get(SEARCH_URL, params={"difficulty": "IMPOSSIBLE"}).status_code == 422

    def test_rate_limited(self, client):
        """Test the search limiter refuses requests over the limit."""
        for _ in range(3):
            assert client.get(SEARCH_URL, params={"q": "!!!"}).status_code == 200

        response = client.get(SEARCH_URL, params={"q": "!!!"})

        assert response.status_code == 429
        assert response.json()["detail"] == "Rate limit exceeded. Please try again later."
        assert response.headers["Retry-After"] == "60"
        assert response.headers["X-RateLimit-Remaining"] == "0"

    def test_rate_limit_is_per_user(self, client):
        """Test each user has a separate search budget."""
        for _ in range(3):
            client.get(SEARCH_URL, params={"q": "!!!"}, headers={"X-User-Id": "alice"})

        response = client.get(SEARCH_URL, params={"q": "!!!"}, headers={"X-User-Id": "bob"})

        assert response.status_code == 200

    def test_tsquery_preview(self, client):
        """Test the tsquery preview endpoint."""
        response = client.get(f"{SEARCH_URL}/tsquery", params={"q": "chicken & pasta"})

        assert response.status_code == 200
        assert response.json() == {
            "query": "chicken & pasta",
            "sanitized": "chicken pasta",
            "ts_query": "chicken & pasta:*",
        }
