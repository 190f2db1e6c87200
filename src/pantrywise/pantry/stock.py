"""Pantry stock estimation from purchase history.

Pure functions; callers supply "today" so results are deterministic.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Literal

DEFAULT_SHELF_LIFE_DAYS = 14

# Default shelf life in days per product category
DEFAULT_SHELF_LIVES: dict[str, int] = {
    "produce": 7,
    "dairy": 10,
    "meat": 5,
    "seafood": 3,
    "pantry": 90,
    "frozen": 60,
    "canned": 365,
    "bakery": 4,
    "beverages": 180,
    "snacks": 60,
    "household": 730,
    "other": 14,
}

# Keyword fallbacks for free-form category names, checked in order
CATEGORY_KEYWORDS: list[tuple[tuple[str, ...], int]] = [
    (("vegetable", "fruit"), 7),
    (("milk", "yogurt", "cheese"), 10),
    (("meat", "chicken", "fish"), 5),
    (("bread",), 4),
]

# Purchase frequency beyond this multiple of the shelf life is treated as noise
MAX_FREQUENCY_SHELF_LIFE_RATIO = 3

LifespanSource = Literal[
    "user_override",
    "purchase_frequency",
    "category_default",
    "global_default",
]


@dataclass(frozen=True)
class StockEstimate:
    """Stock confidence with the factors that produced it."""

    confidence: float
    effective_date: date
    effective_lifespan_days: int
    lifespan_source: LifespanSource
    effective_quantity: float
    quantity_boost: float
    base_confidence: float


@dataclass(frozen=True)
class PantryItem:
    """An item believed to be in the user's cupboard."""

    item_name: str
    last_purchased: date
    stock_confidence: float
    days_since_purchase: int
    category: str | None = None


def get_shelf_life(category: str | None) -> int:
    """Get default shelf life in days for a category."""
    if not category:
        return DEFAULT_SHELF_LIFE_DAYS

    normalized = category.lower()
    if normalized in DEFAULT_SHELF_LIVES:
        return DEFAULT_SHELF_LIVES[normalized]

    for keywords, days in CATEGORY_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return days

    return DEFAULT_SHELF_LIFE_DAYS


def calculate_stock_confidence(
    days_since_purchase: int,
    estimated_lifespan: float,
    quantity: float = 1,
) -> float:
    """
    Calculate stock confidence (0.0 to 1.0) from days since purchase.

    Confidence decays linearly over the estimated lifespan; larger
    purchases get a small logarithmic boost.
    """
    if days_since_purchase <= 0:
        return 1.0
    if estimated_lifespan <= 0:
        return 0.0

    confidence = 1.0 - days_since_purchase / estimated_lifespan
    confidence += _quantity_boost(quantity)
    return max(0.0, min(1.0, confidence))


def calculate_depletion_date(last_purchased: date, lifespan_days: int) -> date:
    """Date when stock is expected to run out."""
    return last_purchased + timedelta(days=lifespan_days)


def estimate_stock(
    last_purchased: date,
    avg_frequency_days: int | None,
    category: str | None,
    today: date,
    quantity: float = 1,
    user_override_date: date | None = None,
    user_shelf_life_days: int | None = None,
    user_quantity_override: float | None = None,
) -> StockEstimate:
    """Estimate stock confidence, honouring user overrides over learned values."""
    effective_date = user_override_date or last_purchased
    days_since_purchase = (today - effective_date).days
    category_shelf_life = get_shelf_life(category)

    lifespan_source: LifespanSource
    if user_shelf_life_days is not None:
        lifespan = user_shelf_life_days
        lifespan_source = "user_override"
    elif avg_frequency_days is not None:
        if avg_frequency_days <= category_shelf_life * MAX_FREQUENCY_SHELF_LIFE_RATIO:
            lifespan = avg_frequency_days
            lifespan_source = "purchase_frequency"
        else:
            lifespan = category_shelf_life
            lifespan_source = "category_default"
    elif category:
        lifespan = category_shelf_life
        lifespan_source = "category_default"
    else:
        lifespan = DEFAULT_SHELF_LIFE_DAYS
        lifespan_source = "global_default"

    effective_quantity = user_quantity_override if user_quantity_override is not None else quantity

    if days_since_purchase <= 0:
        confidence = 1.0
        base_confidence = 1.0
    else:
        confidence = calculate_stock_confidence(days_since_purchase, lifespan, effective_quantity)
        base_confidence = calculate_stock_confidence(days_since_purchase, lifespan)

    return StockEstimate(
        confidence=confidence,
        effective_date=effective_date,
        effective_lifespan_days=lifespan,
        lifespan_source=lifespan_source,
        effective_quantity=effective_quantity,
        quantity_boost=_quantity_boost(effective_quantity),
        base_confidence=base_confidence,
    )


def build_pantry_item(
    item_name: str,
    last_purchased: date,
    avg_frequency_days: int | None,
    category: str | None,
    today: date,
    quantity: float = 1,
) -> PantryItem:
    """Project a purchase-history entry into a pantry item."""
    estimate = estimate_stock(last_purchased, avg_frequency_days, category, today, quantity)
    return PantryItem(
        item_name=item_name,
        last_purchased=last_purchased,
        stock_confidence=estimate.confidence,
        days_since_purchase=(today - last_purchased).days,
        category=category,
    )


def _quantity_boost(quantity: float) -> float:
    return math.log(quantity) * 0.1 if quantity > 1 else 0.0
