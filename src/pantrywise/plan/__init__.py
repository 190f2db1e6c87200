"""Shopping list planning."""

from pantrywise.plan.shopping_list import (
    AggregatedIngredient,
    ListStats,
    RecipeForList,
    RecipeIngredient,
    ShoppingItem,
    ShoppingList,
    ShoppingListBuilder,
    aggregate_ingredients,
    calculate_list_stats,
    update_purchase_frequency,
)

__all__ = [
    "AggregatedIngredient",
    "ListStats",
    "RecipeForList",
    "RecipeIngredient",
    "ShoppingItem",
    "ShoppingList",
    "ShoppingListBuilder",
    "aggregate_ingredients",
    "calculate_list_stats",
    "update_purchase_frequency",
]
