"""API routers for the pantrywise application."""

from pantrywise.routers.nutrition import router as nutrition_router
from pantrywise.routers.pantry import router as pantry_router
from pantrywise.routers.quantities import router as quantities_router
from pantrywise.routers.receipts import router as receipts_router
from pantrywise.routers.search import router as search_router
from pantrywise.routers.shopping_lists import router as shopping_lists_router

__all__ = [
    "nutrition_router",
    "pantry_router",
    "quantities_router",
    "receipts_router",
    "search_router",
    "shopping_lists_router",
]
