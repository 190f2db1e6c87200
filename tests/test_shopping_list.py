"""Unit tests for shopping list generation."""

import pytest

from pantrywise.normalize.units import UnitType
from pantrywise.plan.shopping_list import (
    RecipeForList,
    RecipeIngredient,
    ShoppingItem,
    ShoppingListBuilder,
    aggregate_ingredients,
    calculate_list_stats,
    update_purchase_frequency,
)


def _recipe(recipe_id: str, *ingredients: tuple[str, str | None, str | None], factor=1.0):
    return RecipeForList(
        recipe_id=recipe_id,
        ingredients=[RecipeIngredient(name=n, quantity=q, unit=u) for n, q, u in ingredients],
        servings_factor=factor,
    )


class TestRecipeIngredient:
    """Tests for RecipeIngredient.raw_quantity."""

    def test_joins_quantity_and_unit(self):
        """Test quantity and unit are joined with a space."""
        assert RecipeIngredient("flour", "2", "cups").raw_quantity == "2 cups"

    def test_missing_parts(self):
        """Test missing quantity or unit."""
        assert RecipeIngredient("salt").raw_quantity == ""
        assert RecipeIngredient("eggs", "3").raw_quantity == "3"
        assert RecipeIngredient("milk", None, "cup").raw_quantity == "cup"


class TestAggregateIngredients:
    """Tests for aggregate_ingredients function."""

    def test_aggregate_same_ingredient(self):
        """Test the same ingredient is summed across recipes."""
        result = aggregate_ingredients(
            [
                _recipe("r1", ("Flour", "200", "g")),
                _recipe("r2", ("flour", "0.3", "kg")),
            ]
        )
        assert len(result) == 1
        assert result[0].total_quantity.value == pytest.approx(500.0)
        assert result[0].recipe_sources == ["r1", "r2"]
        assert result[0].display_quantity() == "500g"

    def test_aggregate_mixed_volume_units(self):
        """Test cups and millilitres add up."""
        result = aggregate_ingredients(
            [
                _recipe("r1", ("milk", "1", "cup")),
                _recipe("r2", ("milk", "250", "ml")),
            ]
        )
        assert result[0].display_quantity() == "487ml"

    def test_names_normalized_before_grouping(self):
        """Test modifiers do not split an ingredient into two lines."""
        result = aggregate_ingredients(
            [
                _recipe("r1", ("Fresh Basil", "1", "bunch")),
                _recipe("r2", ("basil", "2", "bunches")),
            ]
        )
        assert len(result) == 1
        assert result[0].normalized_name == "basil"
        assert result[0].total_quantity.value == 3

    def test_incompatible_units_kept_apart(self):
        """Test weight and volume of one ingredient stay separate lines."""
        result = aggregate_ingredients(
            [
                _recipe("r1", ("sugar", "100", "g")),
                _recipe("r2", ("sugar", "1", "cup")),
            ]
        )
        assert {r.total_quantity.unit_type for r in result} == {UnitType.WEIGHT, UnitType.VOLUME}

    def test_servings_factor(self):
        """Test recipe quantities are scaled by the servings factor."""
        result = aggregate_ingredients([_recipe("r1", ("rice", "200", "g"), factor=1.5)])
        assert result[0].total_quantity.value == pytest.approx(300.0)

    def test_skips_nameless(self):
        """Test ingredients whose name normalizes to nothing are skipped."""
        assert aggregate_ingredients([_recipe("r1", ("organic", "1", None))]) == []

    def test_source_listed_once(self):
        """Test a recipe listing an ingredient twice is one source."""
        result = aggregate_ingredients([_recipe("r1", ("egg", "1", None), ("egg", "2", None))])
        assert result[0].recipe_sources == ["r1"]
        assert result[0].total_quantity.value == 3


class TestShoppingListBuilder:
    """Tests for ShoppingListBuilder."""

    def test_build(self):
        """Test building a list from recipes."""
        builder = ShoppingListBuilder()
        shopping_list = builder.build(
            "Week 12",
            [_recipe("r1", ("chicken thighs", "2", "lb"), ("garlic", "3", "cloves"))],
        )
        assert shopping_list.name == "Week 12"
        assert [item.name for item in shopping_list.items] == ["chicken thighs", "garlic"]
        chicken = shopping_list.items[0]
        assert chicken.quantity == "907g"
        assert chicken.unit == "g"
        assert chicken.unit_type == UnitType.WEIGHT
        assert chicken.recipe_sources == ["r1"]

    def test_exclude_in_stock(self):
        """Test pantry items are skipped when requested."""
        builder = ShoppingListBuilder(pantry_names=["Garlic", "olive oil"])
        recipes = [_recipe("r1", ("garlic", "3", "cloves"), ("tomato", "2", None))]

        kept_all = builder.build("list", recipes)
        assert len(kept_all.items) == 2

        skipped = builder.build("list", recipes, exclude_in_stock=True)
        assert [item.name for item in skipped.items] == ["tomato"]
        assert skipped.skipped_in_stock == ["garlic"]

    def test_exclude_matches_normalized_names(self):
        """Test exclusion uses normalized names and drops every unit-type line."""
        builder = ShoppingListBuilder(pantry_names=["garlic"])
        recipes = [
            _recipe("r1", ("Fresh Garlic", "3", "cloves"), ("rice", "200", "g")),
            _recipe("r2", ("garlic", "10", "g")),
        ]

        shopping_list = builder.build("list", recipes, exclude_in_stock=True)

        assert [item.name for item in shopping_list.items] == ["rice"]
        assert shopping_list.skipped_in_stock == ["Fresh Garlic", "garlic"]


class TestListStats:
    """Tests for calculate_list_stats function."""

    def _item(self, name: str, checked: bool) -> ShoppingItem:
        return ShoppingItem(
            name=name,
            normalized_name=name,
            quantity="1",
            unit="count",
            unit_type=UnitType.COUNT,
            checked=checked,
        )

    def test_empty_list(self):
        """Test an empty list has no stats."""
        assert calculate_list_stats([]) is None

    def test_completion(self):
        """Test completion percentage."""
        stats = calculate_list_stats(
            [self._item("a", True), self._item("b", False), self._item("c", False)]
        )
        assert stats.total_items == 3
        assert stats.checked_items == 1
        assert stats.completion_percent == 33


class TestUpdatePurchaseFrequency:
    """Tests for update_purchase_frequency function."""

    def test_first_interval(self):
        """Test the first interval becomes the frequency."""
        assert update_purchase_frequency(None, 6) == 6

    def test_running_average(self):
        """Test later intervals are averaged in, rounding halves up."""
        assert update_purchase_frequency(6, 8) == 7
        assert update_purchase_frequency(6, 9) == 8

    def test_non_positive_interval_ignored(self):
        """Test same-day or older purchases leave the frequency alone."""
        assert update_purchase_frequency(6, 0) == 6
        assert update_purchase_frequency(None, -3) is None
