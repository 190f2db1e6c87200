"""Receipt ingestion: extraction interface and line-item normalization."""

from pantrywise.ingest.extractors import (
    ReceiptExtractor,
    StaticReceiptExtractor,
    build_receipt_extractor,
)
from pantrywise.ingest.receipts import (
    PurchaseRecord,
    ReceiptLine,
    clean_price,
    fold_receipt,
    normalize_receipt_items,
    record_purchase,
)
from pantrywise.ingest.schemas import RawReceiptData, RawReceiptItem

__all__ = [
    "PurchaseRecord",
    "RawReceiptData",
    "RawReceiptItem",
    "ReceiptExtractor",
    "ReceiptLine",
    "StaticReceiptExtractor",
    "build_receipt_extractor",
    "clean_price",
    "fold_receipt",
    "normalize_receipt_items",
    "record_purchase",
]
