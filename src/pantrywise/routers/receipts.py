"""API routes for receipt extraction and normalization."""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from pantrywise.ingest.extractors import ReceiptExtractor
from pantrywise.ingest.receipts import PurchaseRecord, ReceiptLine, normalize_receipt_items
from pantrywise.ingest.repository import PurchaseHistoryRepository
from pantrywise.ingest.schemas import RawReceiptData
from pantrywise.logging_config import get_logger
from pantrywise.routers.dependencies import (
    get_current_user_id,
    get_purchase_history,
    get_receipt_extractor,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/receipts", tags=["receipts"])

MAX_IMAGE_BYTES = 10 * 1024 * 1024


# Request/Response schemas
class ReceiptLineResponse(BaseModel):
    item_name: str
    normalized_name: str
    quantity: Decimal
    unit: str
    unit_type: str
    price: Decimal | None = None
    category: str | None = None

    @classmethod
    def from_line(cls, line: ReceiptLine) -> "ReceiptLineResponse":
        return cls(
            item_name=line.item_name,
            normalized_name=line.normalized_name,
            quantity=line.quantity,
            unit=line.unit,
            unit_type=line.unit_type,
            price=line.price,
            category=line.category,
        )


class NormalizedReceiptResponse(BaseModel):
    store_name: str | None
    purchase_date: date | None
    total: str | None
    items: list[ReceiptLineResponse]


class PurchaseHistoryResponse(BaseModel):
    item_name: str
    last_purchased: date
    purchase_count: int
    avg_frequency_days: int | None = None
    avg_quantity: Decimal | None = None
    estimated_deplete_date: date | None = None
    category: str | None = None

    @classmethod
    def from_record(cls, record: PurchaseRecord) -> "PurchaseHistoryResponse":
        return cls(**vars(record))


class IngestedReceiptResponse(NormalizedReceiptResponse):
    purchase_history: list[PurchaseHistoryResponse]


def _to_response(raw: RawReceiptData) -> NormalizedReceiptResponse:
    return NormalizedReceiptResponse(
        store_name=raw.store_name,
        purchase_date=raw.purchase_date.date() if raw.purchase_date else None,
        total=raw.total,
        items=[ReceiptLineResponse.from_line(line) for line in normalize_receipt_items(raw)],
    )


@router.post("/normalize", response_model=NormalizedReceiptResponse)
async def normalize_receipt(raw: RawReceiptData) -> NormalizedReceiptResponse:
    """Normalize already-extracted receipt data."""
    return _to_response(raw)


@router.post("/extract", response_model=NormalizedReceiptResponse)
async def extract_receipt(
    request: Request,
    extractor: ReceiptExtractor = Depends(get_receipt_extractor),
) -> NormalizedReceiptResponse:
    """Extract a receipt image sent as the request body, then normalize it."""
    image = await request.body()
    if not image:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty receipt image")
    if len(image) > MAX_IMAGE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Receipt image too large",
        )

    logger.info(f"Extracting receipt with '{extractor.name}' ({len(image)} bytes)")
    raw = await extractor.extract(image, request.headers.get("content-type"))
    return _to_response(raw)


@router.post("/ingest", response_model=IngestedReceiptResponse)
async def ingest_receipt(
    raw: RawReceiptData,
    user_id: str = Depends(get_current_user_id),
    history: PurchaseHistoryRepository = Depends(get_purchase_history),
) -> IngestedReceiptResponse:
    """Normalize extracted receipt data and fold it into the user's purchase history."""
    normalized = _to_response(raw)
    purchase_date = normalized.purchase_date or date.today()
    lines = normalize_receipt_items(raw)

    try:
        records = await history.record_receipt(user_id, lines, purchase_date)
    except SQLAlchemyError as e:
        logger.error(f"Failed to record purchase history for user {user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Purchase history is temporarily unavailable",
        ) from e

    return IngestedReceiptResponse(
        **normalized.model_dump(),
        purchase_history=[PurchaseHistoryResponse.from_record(r) for r in records],
    )
