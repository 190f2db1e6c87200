"""Pantry reconciliation and stock estimation."""

from pantrywise.pantry.matching import (
    SUGGESTION_THRESHOLD_PERCENT,
    RecipePantryMatch,
    exclude_in_stock,
    find_pantry_conflict,
    is_in_pantry,
    match_recipe,
    names_match,
    pantry_warning_message,
    rank_recipes_by_pantry,
)
from pantrywise.pantry.stock import (
    PantryItem,
    StockEstimate,
    build_pantry_item,
    calculate_depletion_date,
    calculate_stock_confidence,
    estimate_stock,
    get_shelf_life,
)

__all__ = [
    "SUGGESTION_THRESHOLD_PERCENT",
    "PantryItem",
    "RecipePantryMatch",
    "StockEstimate",
    "build_pantry_item",
    "calculate_depletion_date",
    "calculate_stock_confidence",
    "estimate_stock",
    "exclude_in_stock",
    "find_pantry_conflict",
    "get_shelf_life",
    "is_in_pantry",
    "match_recipe",
    "names_match",
    "pantry_warning_message",
    "rank_recipes_by_pantry",
]
