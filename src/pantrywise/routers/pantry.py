"""API routes for pantry reconciliation."""

from datetime import date

from fastapi import APIRouter
from pydantic import BaseModel, Field

from pantrywise.logging_config import get_logger
from pantrywise.normalize.units import normalize_name
from pantrywise.pantry.matching import (
    PANTRY_CONFLICT_MIN_CONFIDENCE,
    find_pantry_conflict,
    pantry_warning_message,
    rank_recipes_by_pantry,
)
from pantrywise.pantry.stock import build_pantry_item

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/pantry", tags=["pantry"])


# Request/Response schemas
class RecipeIngredients(BaseModel):
    recipe_id: str
    ingredients: list[str]


class PantryMatchRequest(BaseModel):
    """Pantry contents and candidate recipes."""

    pantry: list[str]
    recipes: list[RecipeIngredients]


class RecipeMatchResponse(BaseModel):
    recipe_id: str
    matched_count: int
    total_count: int
    match_percentage: int
    missing_ingredients: list[str]
    is_suggested: bool


class PantryMatchResponse(BaseModel):
    matches: list[RecipeMatchResponse]
    suggested: int


class PurchasedItem(BaseModel):
    """A purchase-history entry describing something that may be in stock."""

    item_name: str
    last_purchased: date
    avg_frequency_days: int | None = None
    category: str | None = None
    quantity: float = Field(default=1, gt=0)


class PantryCheckRequest(BaseModel):
    """An item about to be added to a shopping list."""

    item_name: str
    purchases: list[PurchasedItem]
    today: date | None = None
    min_confidence: float = Field(default=PANTRY_CONFLICT_MIN_CONFIDENCE, ge=0, le=1)


class PantryCheckResponse(BaseModel):
    item_name: str
    in_stock: bool
    matched_item: str | None = None
    stock_confidence: float | None = None
    warning: str | None = None


@router.post("/match", response_model=PantryMatchResponse)
async def match_recipes(request: PantryMatchRequest) -> PantryMatchResponse:
    """Rank recipes by how much of each the pantry already covers."""
    pantry = [normalize_name(name) for name in request.pantry]
    recipes = [
        (recipe.recipe_id, [normalize_name(name) for name in recipe.ingredients])
        for recipe in request.recipes
    ]
    matches = rank_recipes_by_pantry(recipes, pantry)

    responses = [
        RecipeMatchResponse(
            recipe_id=m.recipe_id,
            matched_count=m.matched_count,
            total_count=m.total_count,
            match_percentage=m.match_percentage,
            missing_ingredients=m.missing_ingredients,
            is_suggested=m.is_suggested,
        )
        for m in matches
    ]
    return PantryMatchResponse(
        matches=responses,
        suggested=sum(1 for r in responses if r.is_suggested),
    )


@router.post("/check", response_model=PantryCheckResponse)
async def check_pantry(request: PantryCheckRequest) -> PantryCheckResponse:
    """Warn when an item being added is probably already in the pantry."""
    today = request.today or date.today()
    pantry = [
        build_pantry_item(
            item_name=purchase.item_name,
            last_purchased=purchase.last_purchased,
            avg_frequency_days=purchase.avg_frequency_days,
            category=purchase.category,
            today=today,
            quantity=purchase.quantity,
        )
        for purchase in request.purchases
    ]

    conflict = find_pantry_conflict(request.item_name, pantry, request.min_confidence)
    if conflict is None:
        return PantryCheckResponse(item_name=request.item_name, in_stock=False)

    logger.info(f"'{request.item_name}' likely in stock as '{conflict.item_name}'")
    return PantryCheckResponse(
        item_name=request.item_name,
        in_stock=True,
        matched_item=conflict.item_name,
        stock_confidence=conflict.stock_confidence,
        warning=pantry_warning_message(conflict),
    )
