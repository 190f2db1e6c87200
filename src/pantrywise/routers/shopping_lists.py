"""API routes for building shopping lists from recipes."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from pantrywise.logging_config import get_logger
from pantrywise.normalize.units import UnitType
from pantrywise.plan.shopping_list import (
    RecipeForList,
    RecipeIngredient,
    ShoppingListBuilder,
    calculate_list_stats,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/shopping-lists", tags=["shopping-lists"])


# Request/Response schemas
class IngredientRequest(BaseModel):
    name: str
    quantity: str | None = None
    unit: str | None = None


class RecipeRequest(BaseModel):
    recipe_id: str
    ingredients: list[IngredientRequest]
    servings_factor: float = Field(default=1.0, gt=0, le=50)


class BuildShoppingListRequest(BaseModel):
    """Recipes to shop for and what is already in the pantry."""

    name: str = "Shopping list"
    recipes: list[RecipeRequest] = Field(min_length=1)
    pantry: list[str] = Field(default_factory=list)
    exclude_in_stock: bool = False


class ShoppingItemResponse(BaseModel):
    name: str
    normalized_name: str
    quantity: str
    unit: str
    unit_type: UnitType
    recipe_sources: list[str]
    checked: bool = False


class ShoppingListResponse(BaseModel):
    name: str
    items: list[ShoppingItemResponse]
    skipped_in_stock: list[str]
    total_items: int
    completion_percent: int | None = None


@router.post("/build", response_model=ShoppingListResponse)
async def build_shopping_list(request: BuildShoppingListRequest) -> ShoppingListResponse:
    """Aggregate recipe ingredients into one list, optionally skipping pantry items."""
    recipes = [
        RecipeForList(
            recipe_id=recipe.recipe_id,
            ingredients=[
                RecipeIngredient(name=i.name, quantity=i.quantity, unit=i.unit)
                for i in recipe.ingredients
            ],
            servings_factor=recipe.servings_factor,
        )
        for recipe in request.recipes
    ]

    builder = ShoppingListBuilder(pantry_names=request.pantry)
    shopping_list = builder.build(request.name, recipes, exclude_in_stock=request.exclude_in_stock)
    stats = calculate_list_stats(shopping_list.items)

    return ShoppingListResponse(
        name=shopping_list.name,
        items=[
            ShoppingItemResponse(
                name=item.name,
                normalized_name=item.normalized_name,
                quantity=item.quantity,
                unit=item.unit,
                unit_type=item.unit_type,
                recipe_sources=item.recipe_sources,
                checked=item.checked,
            )
            for item in shopping_list.items
        ],
        skipped_in_stock=shopping_list.skipped_in_stock,
        total_items=len(shopping_list.items),
        completion_percent=stats.completion_percent if stats else None,
    )
