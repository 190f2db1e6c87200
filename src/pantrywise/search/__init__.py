"""Global search across recipes, cupboard items and receipts."""

from pantrywise.search.schemas import GlobalSearchItem, GlobalSearchResponse, GlobalSearchResults
from pantrywise.search.service import (
    DEFAULT_LIMIT_PER_GROUP,
    GlobalSearchService,
    shape_cupboard_row,
    shape_receipt_row,
    shape_recipe_row,
)

__all__ = [
    "DEFAULT_LIMIT_PER_GROUP",
    "GlobalSearchItem",
    "GlobalSearchResponse",
    "GlobalSearchResults",
    "GlobalSearchService",
    "shape_cupboard_row",
    "shape_receipt_row",
    "shape_recipe_row",
]
