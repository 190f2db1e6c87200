"""Shopping list generation from recipes and pantry state."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from pantrywise.logging_config import get_logger
from pantrywise.normalize.units import (
    NormalizedQuantity,
    UnitType,
    add,
    normalize_name,
    normalize_quantity,
    round_half_up,
    scale,
    to_display_string,
)
from pantrywise.pantry.matching import exclude_in_stock as without_pantry_items

logger = get_logger(__name__)


@dataclass
class RecipeIngredient:
    """An ingredient line as stored on a recipe."""

    name: str
    quantity: str | None = None
    unit: str | None = None

    @property
    def raw_quantity(self) -> str:
        """Quantity and unit joined back into one string for normalization."""
        quantity = (self.quantity or "").strip()
        unit = (self.unit or "").strip()
        if quantity and unit:
            return f"{quantity} {unit}"
        return quantity or unit


@dataclass
class RecipeForList:
    """A recipe contributing ingredients to a shopping list."""

    recipe_id: str
    ingredients: Sequence[RecipeIngredient]
    servings_factor: float = 1.0


@dataclass
class AggregatedIngredient:
    """An ingredient with aggregated quantities from multiple recipes."""

    name: str
    normalized_name: str
    total_quantity: NormalizedQuantity
    recipe_sources: list[str] = field(default_factory=list)

    def display_quantity(self) -> str:
        """Get human-readable quantity string."""
        return to_display_string(self.total_quantity)


@dataclass
class ShoppingItem:
    """A single item in the shopping list."""

    name: str
    normalized_name: str
    quantity: str
    unit: str
    unit_type: UnitType
    recipe_sources: list[str] = field(default_factory=list)
    checked: bool = False
    notes: str | None = None


@dataclass
class ShoppingList:
    """Shopping list assembled from recipes."""

    name: str
    items: list[ShoppingItem] = field(default_factory=list)
    skipped_in_stock: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ListStats:
    """Completion stats for a shopping list."""

    total_items: int
    checked_items: int
    completion_percent: int


def aggregate_ingredients(recipes: Iterable[RecipeForList]) -> list[AggregatedIngredient]:
    """
    Merge ingredients across recipes by normalized name.

    Quantities of the same unit type are summed; an ingredient listed by
    weight in one recipe and by volume in another keeps one line per unit
    type instead of failing.
    """
    aggregated: dict[tuple[str, UnitType], AggregatedIngredient] = {}

    for recipe in recipes:
        for ingredient in recipe.ingredients:
            normalized = normalize_name(ingredient.name)
            if not normalized:
                continue

            quantity = normalize_quantity(ingredient.raw_quantity)
            if recipe.servings_factor != 1:
                quantity = scale(quantity, recipe.servings_factor)

            key = (normalized, quantity.unit_type)
            existing = aggregated.get(key)
            if existing is None:
                aggregated[key] = AggregatedIngredient(
                    name=ingredient.name,
                    normalized_name=normalized,
                    total_quantity=quantity,
                    recipe_sources=[recipe.recipe_id],
                )
                continue

            # Keyed by unit type, so the quantities are always comparable
            existing.total_quantity = add(existing.total_quantity, quantity)
            if recipe.recipe_id not in existing.recipe_sources:
                existing.recipe_sources.append(recipe.recipe_id)

    return list(aggregated.values())


class ShoppingListBuilder:
    """
    Builds shopping lists from recipes with:
    - Quantity aggregation across recipes
    - Unit normalization (e.g., 1 cup + 250 ml -> 487ml)
    - Optional exclusion of ingredients already in the pantry
    """

    def __init__(self, pantry_names: Iterable[str] = ()):
        self.pantry_names = {name.lower() for name in pantry_names}

    def build(
        self,
        name: str,
        recipes: Iterable[RecipeForList],
        exclude_in_stock: bool = False,
    ) -> ShoppingList:
        """Aggregate recipe ingredients into a named shopping list."""
        shopping_list = ShoppingList(name=name)

        aggregated = aggregate_ingredients(recipes)
        needed = aggregated
        if exclude_in_stock:
            needed = without_pantry_items(
                aggregated, self.pantry_names, name_of=lambda i: i.normalized_name
            )
            kept = {id(i) for i in needed}
            shopping_list.skipped_in_stock = [i.name for i in aggregated if id(i) not in kept]

        for ingredient in needed:
            shopping_list.items.append(
                ShoppingItem(
                    name=ingredient.name,
                    normalized_name=ingredient.normalized_name,
                    quantity=ingredient.display_quantity(),
                    unit=ingredient.total_quantity.unit,
                    unit_type=ingredient.total_quantity.unit_type,
                    recipe_sources=list(ingredient.recipe_sources),
                )
            )

        logger.info(
            f"Built shopping list '{name}': {len(shopping_list.items)} items, "
            f"{len(shopping_list.skipped_in_stock)} skipped as in stock"
        )
        return shopping_list


def calculate_list_stats(items: Sequence[ShoppingItem]) -> ListStats | None:
    """Calculate completion stats; None for an empty list."""
    if not items:
        return None

    total = len(items)
    checked = sum(1 for item in items if item.checked)
    return ListStats(
        total_items=total,
        checked_items=checked,
        completion_percent=round_half_up(checked / total * 100),
    )


def update_purchase_frequency(
    avg_frequency_days: int | None,
    days_since_last_purchase: int,
) -> int | None:
    """
    Fold a new purchase interval into the running purchase frequency.

    Intervals of zero or less (same day, or an older receipt processed
    late) leave the frequency unchanged.
    """
    if days_since_last_purchase <= 0:
        return avg_frequency_days
    if avg_frequency_days:
        return round_half_up((avg_frequency_days + days_since_last_purchase) / 2)
    return days_since_last_purchase
