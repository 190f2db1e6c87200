"""Turn raw receipt data into storable line items and purchase history."""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation

from pantrywise.ingest.schemas import RawReceiptData, RawReceiptItem
from pantrywise.logging_config import get_logger
from pantrywise.normalize.units import normalize_name, normalize_quantity
from pantrywise.pantry.stock import calculate_depletion_date, get_shelf_life
from pantrywise.plan.shopping_list import update_purchase_frequency

logger = get_logger(__name__)

PRICE_DISALLOWED_CHARS = re.compile(r"[^0-9.]")


@dataclass
class ReceiptLine:
    """A receipt line item with its quantity in canonical base units."""

    item_name: str
    normalized_name: str
    quantity: Decimal
    unit: str
    unit_type: str
    price: Decimal | None = None
    category: str | None = None


@dataclass
class PurchaseRecord:
    """Running purchase statistics for one item."""

    item_name: str
    last_purchased: date
    purchase_count: int = 1
    avg_frequency_days: int | None = None
    avg_quantity: Decimal | None = None
    estimated_deplete_date: date | None = None
    category: str | None = None


def clean_price(raw: str | None) -> Decimal | None:
    """Strip currency symbols and other noise from a price string."""
    if not raw:
        return None
    cleaned = PRICE_DISALLOWED_CHARS.sub("", raw)
    if not cleaned:
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        logger.debug(f"Unreadable price '{raw}'")
        return None


def normalize_receipt_item(item: RawReceiptItem) -> ReceiptLine:
    quantity = normalize_quantity(item.quantity or "1")
    value, unit, unit_type = quantity.to_stored()
    return ReceiptLine(
        item_name=item.name,
        normalized_name=normalize_name(item.name),
        quantity=value,
        unit=unit,
        unit_type=unit_type,
        price=clean_price(item.price),
        category=item.category,
    )


def normalize_receipt_items(raw: RawReceiptData) -> list[ReceiptLine]:
    """Normalize every line item of an extracted receipt."""
    lines = [normalize_receipt_item(item) for item in raw.items]
    logger.info(f"Normalized {len(lines)} items from receipt '{raw.store_name or 'unknown store'}'")
    return lines


def record_purchase(
    existing: PurchaseRecord | None,
    line: ReceiptLine,
    purchase_date: date,
) -> PurchaseRecord:
    """
    Fold a purchased line into the item's purchase history.

    A receipt older than the last known purchase still counts towards the
    purchase count and average quantity, but does not move the last
    purchase date or the depletion estimate.
    """
    if existing is None:
        lifespan = get_shelf_life(line.category)
        return PurchaseRecord(
            item_name=line.normalized_name,
            last_purchased=purchase_date,
            avg_quantity=line.quantity,
            estimated_deplete_date=calculate_depletion_date(purchase_date, lifespan),
            category=line.category,
        )

    days_since_last = (purchase_date - existing.last_purchased).days
    frequency = update_purchase_frequency(existing.avg_frequency_days, days_since_last)

    if existing.avg_quantity is not None:
        avg_quantity = (existing.avg_quantity + line.quantity) / 2
    else:
        avg_quantity = line.quantity

    if purchase_date > existing.last_purchased:
        lifespan = existing.avg_frequency_days or get_shelf_life(line.category)
        last_purchased = purchase_date
        deplete_date = calculate_depletion_date(purchase_date, lifespan)
    else:
        last_purchased = existing.last_purchased
        deplete_date = existing.estimated_deplete_date

    return PurchaseRecord(
        item_name=existing.item_name,
        last_purchased=last_purchased,
        purchase_count=existing.purchase_count + 1,
        avg_frequency_days=frequency,
        avg_quantity=avg_quantity,
        estimated_deplete_date=deplete_date,
        category=existing.category or line.category,
    )


def fold_receipt(
    history: Mapping[str, PurchaseRecord],
    lines: Iterable[ReceiptLine],
    purchase_date: date,
) -> dict[str, PurchaseRecord]:
    """
    Fold every line of one receipt into the purchase history.

    Returns only the records the receipt touched, keyed by normalized name.
    A name appearing twice on the same receipt is folded twice.
    """
    updated: dict[str, PurchaseRecord] = {}
    for line in lines:
        if not line.normalized_name:
            continue
        existing = updated.get(line.normalized_name) or history.get(line.normalized_name)
        updated[line.normalized_name] = record_purchase(existing, line, purchase_date)
    return updated
