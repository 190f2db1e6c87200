"""Pydantic schemas for validating OCR-extracted receipt data.

OCR output is untrusted free text, so validators coerce rather than reject.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class RawReceiptItem(BaseModel):
    """Line item as read off a receipt."""

    name: str = Field(default="Unknown Item")
    quantity: str | None = None
    price: str | None = None
    category: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v: Any) -> str:
        """Ensure name is never None or empty."""
        if v is None or not str(v).strip():
            return "Unknown Item"
        return str(v).strip()

    @field_validator("quantity", "price", "category", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        """Accept numbers where text is expected; blank becomes None."""
        if v is None:
            return None
        text = str(v).strip()
        return text or None


class RawReceiptData(BaseModel):
    """Whole receipt as returned by an extractor."""

    items: list[RawReceiptItem] = Field(default_factory=list)
    store_name: str | None = None
    purchase_date: datetime | None = None
    total: str | None = None

    @field_validator("items", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> list[Any]:
        if v is None:
            return []
        return list(v)

    @field_validator("store_name", "total", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("purchase_date", mode="before")
    @classmethod
    def parse_purchase_date(cls, v: Any) -> datetime | None:
        """Unreadable dates are dropped instead of failing the receipt."""
        if v is None or v == "":
            return None
        if isinstance(v, datetime):
            return v
        try:
            return datetime.fromisoformat(str(v).strip().replace("Z", "+00:00"))
        except ValueError:
            return None
