"""Pantry-to-ingredient reconciliation by substring containment.

Matching is deliberately coarse: a pantry name matches an ingredient if
either string contains the other. Short names therefore over-match
("egg" matches "eggplant"); recipe suggestions are tuned against this.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from pantrywise.logging_config import get_logger
from pantrywise.normalize.units import round_half_up
from pantrywise.pantry.stock import PantryItem

logger = get_logger(__name__)

SUGGESTION_THRESHOLD_PERCENT = 70
PANTRY_CONFLICT_MIN_CONFIDENCE = 0.7

T = TypeVar("T")


@dataclass
class RecipePantryMatch:
    """How much of a recipe the pantry already covers."""

    recipe_id: str
    matched_count: int
    total_count: int
    match_percentage: int
    missing_ingredients: list[str] = field(default_factory=list)

    @property
    def is_suggested(self) -> bool:
        """Recipes mostly covered by the pantry are suggested."""
        return self.match_percentage >= SUGGESTION_THRESHOLD_PERCENT


def names_match(pantry_name: str, ingredient_name: str) -> bool:
    """Bidirectional substring containment on lowercased names."""
    pantry_lower = pantry_name.lower()
    ingredient_lower = ingredient_name.lower()
    return pantry_lower in ingredient_lower or ingredient_lower in pantry_lower


def is_in_pantry(pantry_names: Iterable[str], ingredient_name: str) -> bool:
    """Check whether any pantry name reconciles with the ingredient name."""
    return any(names_match(pantry_name, ingredient_name) for pantry_name in pantry_names)


def match_recipe(
    recipe_id: str,
    ingredient_names: Sequence[str],
    pantry_names: Iterable[str],
) -> RecipePantryMatch:
    """Count a recipe's ingredients that the pantry covers."""
    pantry_set = {name.lower() for name in pantry_names}

    missing = [name for name in ingredient_names if not is_in_pantry(pantry_set, name)]
    total = len(ingredient_names)
    matched = total - len(missing)
    percentage = round_half_up(matched / total * 100) if total else 0

    return RecipePantryMatch(
        recipe_id=recipe_id,
        matched_count=matched,
        total_count=total,
        match_percentage=percentage,
        missing_ingredients=missing,
    )


def rank_recipes_by_pantry(
    recipes: Iterable[tuple[str, Sequence[str]]],
    pantry_names: Iterable[str],
) -> list[RecipePantryMatch]:
    """
    Match every recipe against the pantry, best coverage first.

    Args:
        recipes: (recipe_id, ingredient names) pairs.
        pantry_names: Names of items currently in stock.

    Returns:
        Matches sorted by match percentage, then matched count, descending.
    """
    pantry_set = {name.lower() for name in pantry_names}
    matches = [match_recipe(recipe_id, names, pantry_set) for recipe_id, names in recipes]
    matches.sort(key=lambda m: (m.match_percentage, m.matched_count), reverse=True)

    suggested = sum(1 for m in matches if m.is_suggested)
    logger.debug(f"Ranked {len(matches)} recipes against pantry, {suggested} suggested")
    return matches


def exclude_in_stock(
    items: Iterable[T],
    pantry_names: Iterable[str],
    name_of: Callable[[T], str] | None = None,
) -> list[T]:
    """
    Drop items the pantry already covers.

    Args:
        items: Ingredients or shopping entries.
        pantry_names: Names of items currently in stock.
        name_of: Callable extracting the name from an item; items are
            treated as names when omitted.
    """
    pantry_set = {name.lower() for name in pantry_names}
    get_name = name_of or str
    return [item for item in items if not is_in_pantry(pantry_set, get_name(item))]


def find_pantry_conflict(
    item_name: str,
    pantry: Iterable[PantryItem],
    min_confidence: float = PANTRY_CONFLICT_MIN_CONFIDENCE,
) -> PantryItem | None:
    """Find a confidently stocked pantry item that a new shopping entry duplicates."""
    for pantry_item in pantry:
        if pantry_item.stock_confidence < min_confidence:
            continue
        if names_match(pantry_item.item_name, item_name):
            return pantry_item
    return None


def pantry_warning_message(pantry_item: PantryItem) -> str:
    """Human-readable duplicate warning for the shopping list."""
    days = pantry_item.days_since_purchase
    bought = f"{pantry_item.last_purchased:%b} {pantry_item.last_purchased.day}"
    return (
        f'You might already have "{pantry_item.item_name}" '
        f"(bought {bought}, {days} day{'' if days == 1 else 's'} ago)"
    )
