"""Unit tests for global search."""

from datetime import date, datetime
from typing import Any

import pytest

from pantrywise.search.service import (
    GlobalSearchService,
    cupboard_sql,
    receipts_sql,
    recipes_sql,
    shape_cupboard_row,
    shape_receipt_row,
    shape_recipe_row,
)


class TestGlobalSearchService:
    """Tests for GlobalSearchService.search."""

    @pytest.mark.asyncio
    async def test_empty_query_skips_database(self, search_session_factory):
        """Test a blank query returns empty groups without touching the database."""
        service = GlobalSearchService(search_session_factory)
        response = await service.search("user-1", "   ")

        assert response.query == ""
        assert response.total == 0
        assert response.used_trigram is False
        assert response.results.recipes == []
        search_session_factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_grouped_results(self, search_session_factory):
        """Test results from all three groups are shaped and counted."""
        service = GlobalSearchService(search_session_factory)
        response = await service.search("user-1", "  chicken ", limit_per_group=3)

        assert response.query == "chicken"
        assert response.used_trigram is True
        assert response.total == 4
        assert [item.id for item in response.results.recipes] == ["r1", "r2"]
        assert response.results.cupboard[0].subtitle == "907.184 g · meat"
        assert response.results.receipts[0].subtitle == "Items: chicken thighs"

    @pytest.mark.asyncio
    async def test_bound_parameters(self, search_session_factory):
        """Test the query, pattern, user and limit are bound, not interpolated."""
        service = GlobalSearchService(search_session_factory)
        await service.search("user-1", "chicken", limit_per_group=3)

        calls = search_session_factory.session.execute.await_args_list
        group_params = [call.args[1] for call in calls if len(call.args) > 1]
        assert len(group_params) == 3
        for params in group_params:
            assert params == {
                "user_id": "user-1",
                "query": "chicken",
                "like": "%chicken%",
                "limit": 3,
            }

    @pytest.mark.asyncio
    async def test_trigram_probe_cached(self, search_session_factory):
        """Test the extension probe runs once per service instance."""
        service = GlobalSearchService(search_session_factory)
        await service.search("user-1", "chicken")
        await service.search("user-1", "rice")

        probes = [
            call
            for call in search_session_factory.session.execute.await_args_list
            if "pg_extension" in str(call.args[0])
        ]
        assert len(probes) == 1

    @pytest.mark.asyncio
    async def test_without_trigram(self, session_factory_builder):
        """Test scoring falls back to full-text rank when pg_trgm is missing."""
        make_session_factory, make_result = session_factory_builder
        seen_sql: list[str] = []

        def handler(sql: str, params: dict[str, Any] | None):
            if "pg_extension" in sql:
                return make_result(scalar=False)
            seen_sql.append(sql)
            return make_result([])

        service = GlobalSearchService(make_session_factory(handler))
        response = await service.search("user-1", "rice")

        assert response.used_trigram is False
        assert response.total == 0
        assert len(seen_sql) == 3
        assert all("similarity(" not in sql for sql in seen_sql)


class TestSearchSql:
    """Tests for the generated group queries."""

    def test_trigram_weights(self):
        """Test trigram terms carry their group weights."""
        assert "* 0.75" in recipes_sql(True) and "* 0.35" in recipes_sql(True)
        assert "* 0.8" in cupboard_sql(True) and "* 0.2" in cupboard_sql(True)
        assert "* 0.65" in receipts_sql(True) and "* 0.4" in receipts_sql(True)

    def test_inclusion_independent_of_scoring(self):
        """Test row filters are identical with and without trigram scoring."""
        for build in (recipes_sql, cupboard_sql, receipts_sql):
            with_trigram = build(True).rsplit("WHERE", 1)[1]
            without = build(False).rsplit("WHERE", 1)[1]
            assert with_trigram == without
            assert "ILIKE :like" in without

    def test_depleted_cupboard_excluded(self):
        """Test depleted cupboard items never match."""
        assert "c.is_depleted = false" in cupboard_sql(False)

    def test_ordering(self):
        """Test ordering by score then recency."""
        assert "ORDER BY score DESC, r.created_at DESC" in recipes_sql(False)
        assert "ORDER BY score DESC, c.updated_at DESC" in cupboard_sql(False)
        assert "ORDER BY score DESC, r.created_at DESC" in receipts_sql(False)


class TestRowShaping:
    """Tests for per-group result shaping."""

    def test_recipe(self):
        """Test recipe subtitles and links."""
        item = shape_recipe_row(
            {"id": "r1", "title": "Pad Thai", "cuisine_type": "Thai", "score": 0.5}
        )
        assert item.subtitle == "Cuisine: Thai"
        assert item.href == "/recipes/r1"
        assert item.score == 0.5

        plain = shape_recipe_row(
            {"id": "r2", "title": "Toast", "cuisine_type": None, "score": None}
        )
        assert plain.subtitle == "Recipe"
        assert plain.score == 0.0

    def test_cupboard_quantity_forms(self):
        """Test cupboard subtitles with and without unit and category."""
        base = {"id": "c1", "item_name": "rice", "score": 1}
        full = shape_cupboard_row({**base, "quantity": "500", "unit": "g", "category": "pantry"})
        assert full.subtitle == "500 g · pantry"

        bare = shape_cupboard_row({**base, "quantity": "2", "unit": None, "category": None})
        assert bare.subtitle == "2"

        no_unit = shape_cupboard_row({**base, "quantity": "2", "unit": None, "category": "grains"})
        assert no_unit.subtitle == "2 · grains"

    def test_cupboard_fallbacks(self):
        """Test cupboard subtitles without a quantity."""
        base = {"id": "c1", "item_name": "rice", "quantity": None, "unit": "g", "score": 1}
        assert shape_cupboard_row({**base, "category": "grains"}).subtitle == "Category: grains"
        item = shape_cupboard_row({**base, "category": None})
        assert item.subtitle == "Cupboard item"
        assert item.href == "/cupboard"

    def test_receipt_matched_items_first(self):
        """Test matched item names win over date and total."""
        item = shape_receipt_row(
            {
                "id": "rc1",
                "store_name": "Sample Market",
                "purchase_date": date(2024, 3, 2),
                "total_amount": "24.02",
                "matched_items": "kale, kale chips",
                "score": 0.3,
            }
        )
        assert item.title == "Sample Market"
        assert item.subtitle == "Items: kale, kale chips"
        assert item.href == "/receipts/rc1"

    def test_receipt_date_and_total(self):
        """Test date and total are joined, either may be missing."""
        base = {"id": "rc1", "store_name": None, "matched_items": None, "score": 0}
        both = shape_receipt_row(
            {**base, "purchase_date": datetime(2024, 3, 2, 9, 30), "total_amount": "24.02"}
        )
        assert both.title == "Receipt"
        assert both.subtitle == "2024-03-02 · Total: 24.02"

        total_only = shape_receipt_row({**base, "purchase_date": None, "total_amount": "5.00"})
        assert total_only.subtitle == "Total: 5.00"

        date_only = shape_receipt_row(
            {**base, "purchase_date": date(2024, 3, 2), "total_amount": None}
        )
        assert date_only.subtitle == "2024-03-02"

    def test_receipt_fallback(self):
        """Test the literal fallback subtitle."""
        item = shape_receipt_row(
            {
                "id": "rc1",
                "store_name": "",
                "purchase_date": None,
                "total_amount": None,
                "matched_items": None,
                "score": None,
            }
        )
        assert item.title == "Receipt"
        assert item.subtitle == "Receipt"
