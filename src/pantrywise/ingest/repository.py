"""Persistence of per-item purchase history."""

from collections.abc import Sequence
from dataclasses import fields
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pantrywise.ingest.receipts import PurchaseRecord, ReceiptLine, fold_receipt
from pantrywise.logging_config import get_logger
from pantrywise.models import PurchaseHistory

logger = get_logger(__name__)

RECORD_FIELDS = tuple(f.name for f in fields(PurchaseRecord))


def to_record(row: PurchaseHistory) -> PurchaseRecord:
    return PurchaseRecord(**{name: getattr(row, name) for name in RECORD_FIELDS})


class PurchaseHistoryRepository:
    """Reads and updates a user's purchase history."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def record_receipt(
        self,
        user_id: str,
        lines: Sequence[ReceiptLine],
        purchase_date: date,
    ) -> list[PurchaseRecord]:
        """Fold receipt lines into stored history in a single transaction."""
        names = {line.normalized_name for line in lines if line.normalized_name}
        if not names:
            return []

        async with self.session_factory() as session:
            result = await session.execute(
                select(PurchaseHistory)
                .where(PurchaseHistory.user_id == user_id)
                .where(PurchaseHistory.item_name.in_(names))
            )
            rows = {row.item_name: row for row in result.scalars().all()}

            updated = fold_receipt(
                {name: to_record(row) for name, row in rows.items()}, lines, purchase_date
            )
            for name, record in updated.items():
                row = rows.get(name)
                if row is None:
                    row = PurchaseHistory(user_id=user_id)
                    session.add(row)
                for field_name in RECORD_FIELDS:
                    setattr(row, field_name, getattr(record, field_name))

            await session.commit()

        logger.info(
            f"Recorded {len(updated)} purchase history items for user {user_id} "
            f"({len(updated) - len(rows)} new)"
        )
        return list(updated.values())
