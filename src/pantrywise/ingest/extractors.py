"""Receipt extractor interface and implementations."""

from abc import ABC, abstractmethod
from datetime import datetime

from pantrywise.config import Settings
from pantrywise.ingest.schemas import RawReceiptData, RawReceiptItem
from pantrywise.logging_config import get_logger

logger = get_logger(__name__)


class ReceiptExtractor(ABC):
    """Abstract base class for turning a receipt image into raw receipt data."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return extractor name for logging and identification."""
        pass

    @abstractmethod
    async def extract(self, image: bytes, content_type: str | None = None) -> RawReceiptData:
        """
        Extract line items and totals from a receipt image.

        Args:
            image: Raw image bytes.
            content_type: MIME type of the image, if known.

        Returns:
            Raw receipt data; fields the extractor cannot read are left empty.
        """
        pass


SAMPLE_RECEIPT_ITEMS = (
    RawReceiptItem(name="chicken thighs", quantity="2 lb", price="$8.12", category="meat"),
    RawReceiptItem(name="asparagus bundle", quantity="1", price="$3.80", category="produce"),
    RawReceiptItem(name="yukon potatoes", quantity="1kg", price="$4.10", category="produce"),
)


class StaticReceiptExtractor(ReceiptExtractor):
    """Returns the same sample receipt for any image. Used in development."""

    @property
    def name(self) -> str:
        return "static"

    async def extract(self, image: bytes, content_type: str | None = None) -> RawReceiptData:
        logger.debug(f"Static extractor ignoring {len(image)} bytes ({content_type or 'unknown'})")
        return RawReceiptData(
            items=[item.model_copy() for item in SAMPLE_RECEIPT_ITEMS],
            store_name="Sample Market",
            purchase_date=datetime.now(),
            total="$24.02",
        )


EXTRACTORS: dict[str, type[ReceiptExtractor]] = {
    "static": StaticReceiptExtractor,
}


def build_receipt_extractor(settings: Settings) -> ReceiptExtractor:
    """Select the receipt extractor named by ``settings.ocr_provider``."""
    provider = settings.ocr_provider.lower().strip()
    extractor_cls = EXTRACTORS.get(provider)
    if extractor_cls is None:
        raise ValueError(
            f"Unknown OCR provider '{settings.ocr_provider}'. "
            f"Available: {', '.join(sorted(EXTRACTORS))}"
        )
    logger.info(f"Using receipt extractor: {provider}")
    return extractor_cls()
