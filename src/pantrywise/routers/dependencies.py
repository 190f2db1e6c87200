"""Shared FastAPI dependencies.

Services are built once by ``create_app`` and kept on ``app.state``.
"""

from typing import Annotated

from fastapi import Header, Request

from pantrywise.config import Settings
from pantrywise.ingest.extractors import ReceiptExtractor
from pantrywise.ingest.repository import PurchaseHistoryRepository
from pantrywise.nutrition.service import NutritionService
from pantrywise.search.service import GlobalSearchService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_search_service(request: Request) -> GlobalSearchService:
    return request.app.state.search_service


def get_nutrition_service(request: Request) -> NutritionService:
    return request.app.state.nutrition_service


def get_receipt_extractor(request: Request) -> ReceiptExtractor:
    return request.app.state.receipt_extractor


def get_purchase_history(request: Request) -> PurchaseHistoryRepository:
    return request.app.state.purchase_history


# Dependency to get current user (placeholder until authentication exists)
async def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """Get current user ID from the X-User-Id header."""
    return x_user_id or "default-user"
