"""Grouped full-text search over recipes, cupboard items and receipts.

Each group is filtered by a full-text match or a case-insensitive
substring match on its fields, then ranked by ``ts_rank``. When the
``pg_trgm`` extension is installed, trigram similarity on the most
telling fields is added to the rank.
"""

import asyncio
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pantrywise.logging_config import get_logger
from pantrywise.search.schemas import GlobalSearchItem, GlobalSearchResponse, GlobalSearchResults

logger = get_logger(__name__)

DEFAULT_LIMIT_PER_GROUP = 5

Row = Mapping[str, Any]


# =============================================================================
# SQL
# =============================================================================

TRIGRAM_PROBE_SQL = "SELECT EXISTS(SELECT 1 FROM pg_extension WHERE extname = 'pg_trgm') AS enabled"

RECIPE_DOCUMENT = (
    "to_tsvector('english', COALESCE(r.title, '') || ' ' || COALESCE(r.description, '') "
    "|| ' ' || COALESCE(r.instructions, ''))"
)
RECIPE_TRIGRAM = (
    " + COALESCE(similarity(COALESCE(r.title, ''), :query), 0) * 0.75"
    " + COALESCE(similarity(COALESCE(r.cuisine_type, ''), :query), 0) * 0.35"
)

CUPBOARD_DOCUMENT = (
    "to_tsvector('english', COALESCE(c.item_name, '') || ' ' || COALESCE(c.category, '') "
    "|| ' ' || COALESCE(c.notes, ''))"
)
CUPBOARD_TRIGRAM = (
    " + COALESCE(similarity(COALESCE(c.item_name, ''), :query), 0) * 0.8"
    " + COALESCE(similarity(COALESCE(c.category, ''), :query), 0) * 0.2"
)

RECEIPT_DOCUMENT = (
    "to_tsvector('english', COALESCE(r.store_name, '') "
    "|| ' ' || COALESCE(string_agg(ri.normalized_name, ' '), ''))"
)
RECEIPT_TRIGRAM = (
    " + COALESCE(similarity(COALESCE(r.store_name, ''), :query), 0) * 0.65"
    " + COALESCE(MAX(similarity(COALESCE(ri.normalized_name, ''), :query)), 0) * 0.4"
)

TSQUERY = "websearch_to_tsquery('english', :query)"


def _score_expression(document: str, trigram_terms: str, use_trigram: bool) -> str:
    rank = f"COALESCE(ts_rank({document}, {TSQUERY}), 0)"
    if use_trigram:
        return f"({rank}{trigram_terms})"
    return rank


def recipes_sql(use_trigram: bool) -> str:
    score = _score_expression(RECIPE_DOCUMENT, RECIPE_TRIGRAM, use_trigram)
    return f"""
        SELECT r.id, r.title, r.cuisine_type, {score} AS score
        FROM recipes r
        WHERE r.user_id = :user_id
          AND (
            {RECIPE_DOCUMENT} @@ {TSQUERY}
            OR COALESCE(r.title, '') ILIKE :like
            OR COALESCE(r.description, '') ILIKE :like
            OR COALESCE(r.cuisine_type, '') ILIKE :like
          )
        ORDER BY score DESC, r.created_at DESC
        LIMIT :limit
    """


def cupboard_sql(use_trigram: bool) -> str:
    score = _score_expression(CUPBOARD_DOCUMENT, CUPBOARD_TRIGRAM, use_trigram)
    return f"""
        SELECT c.id, c.item_name, c.category, c.quantity::text AS quantity, c.unit,
               {score} AS score
        FROM cupboard_items c
        WHERE c.user_id = :user_id
          AND c.is_depleted = false
          AND (
            {CUPBOARD_DOCUMENT} @@ {TSQUERY}
            OR COALESCE(c.item_name, '') ILIKE :like
            OR COALESCE(c.category, '') ILIKE :like
          )
        ORDER BY score DESC, c.updated_at DESC
        LIMIT :limit
    """


def receipts_sql(use_trigram: bool) -> str:
    score = _score_expression(RECEIPT_DOCUMENT, RECEIPT_TRIGRAM, use_trigram)
    return f"""
        SELECT r.id, r.store_name, r.purchase_date, r.total_amount::text AS total_amount,
               STRING_AGG(DISTINCT ri.normalized_name, ', ')
                   FILTER (WHERE ri.normalized_name ILIKE :like) AS matched_items,
               {score} AS score
        FROM receipts r
        LEFT JOIN receipt_items ri ON ri.receipt_id = r.id
        WHERE r.user_id = :user_id
          AND (
            COALESCE(r.store_name, '') ILIKE :like
            OR COALESCE(ri.normalized_name, '') ILIKE :like
            OR to_tsvector('english', COALESCE(r.store_name, '') || ' '
                || COALESCE(ri.normalized_name, '')) @@ {TSQUERY}
          )
        GROUP BY r.id
        ORDER BY score DESC, r.created_at DESC
        LIMIT :limit
    """


# =============================================================================
# Row shaping
# =============================================================================


def _score(row: Row) -> float:
    score = row.get("score")
    return float(score) if score is not None else 0.0


def shape_recipe_row(row: Row) -> GlobalSearchItem:
    cuisine = row.get("cuisine_type")
    return GlobalSearchItem(
        id=str(row["id"]),
        title=row["title"],
        subtitle=f"Cuisine: {cuisine}" if cuisine else "Recipe",
        href=f"/recipes/{row['id']}",
        score=_score(row),
    )


def shape_cupboard_row(row: Row) -> GlobalSearchItem:
    quantity = row.get("quantity")
    unit = row.get("unit")
    category = row.get("category")

    if quantity:
        subtitle = quantity
        if unit:
            subtitle += f" {unit}"
        if category:
            subtitle += f" · {category}"
    elif category:
        subtitle = f"Category: {category}"
    else:
        subtitle = "Cupboard item"

    return GlobalSearchItem(
        id=str(row["id"]),
        title=row["item_name"],
        subtitle=subtitle,
        href="/cupboard",
        score=_score(row),
    )


def _format_purchase_date(value: date | datetime | str | None) -> str | None:
    if not value:
        return None
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def shape_receipt_row(row: Row) -> GlobalSearchItem:
    matched_items = row.get("matched_items")
    if matched_items:
        subtitle = f"Items: {matched_items}"
    else:
        purchase_date = _format_purchase_date(row.get("purchase_date"))
        total = row.get("total_amount")
        parts = [purchase_date, f"Total: {total}" if total else None]
        subtitle = " · ".join(part for part in parts if part) or "Receipt"

    return GlobalSearchItem(
        id=str(row["id"]),
        title=row.get("store_name") or "Receipt",
        subtitle=subtitle,
        href=f"/receipts/{row['id']}",
        score=_score(row),
    )


# =============================================================================
# Service
# =============================================================================


class GlobalSearchService:
    """
    Search a user's recipes, cupboard and receipts in one call.

    The ``pg_trgm`` probe runs at most once per instance; its result is
    kept for the instance's lifetime.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._trigram_enabled: bool | None = None

    async def search(
        self,
        user_id: str,
        query: str,
        limit_per_group: int = DEFAULT_LIMIT_PER_GROUP,
    ) -> GlobalSearchResponse:
        normalized_query = query.strip()
        if not normalized_query:
            return GlobalSearchResponse(query="")

        use_trigram = await self.is_trigram_enabled()
        params = {
            "user_id": user_id,
            "query": normalized_query,
            "like": f"%{normalized_query}%",
            "limit": limit_per_group,
        }

        recipes, cupboard, receipts = await asyncio.gather(
            self._search_group(recipes_sql(use_trigram), params, shape_recipe_row),
            self._search_group(cupboard_sql(use_trigram), params, shape_cupboard_row),
            self._search_group(receipts_sql(use_trigram), params, shape_receipt_row),
        )

        total = len(recipes) + len(cupboard) + len(receipts)
        logger.info(
            f"Search '{normalized_query}' for user {user_id}: "
            f"{len(recipes)} recipes, {len(cupboard)} cupboard, {len(receipts)} receipts"
        )
        return GlobalSearchResponse(
            query=normalized_query,
            results=GlobalSearchResults(recipes=recipes, cupboard=cupboard, receipts=receipts),
            total=total,
            used_trigram=use_trigram,
        )

    async def is_trigram_enabled(self) -> bool:
        """Check for the pg_trgm extension, caching the answer."""
        if self._trigram_enabled is not None:
            return self._trigram_enabled

        async with self._session_factory() as session:
            result = await session.execute(text(TRIGRAM_PROBE_SQL))
            self._trigram_enabled = bool(result.scalar())

        logger.info(f"pg_trgm extension available: {self._trigram_enabled}")
        return self._trigram_enabled

    async def _search_group(
        self,
        sql: str,
        params: dict[str, Any],
        shape: Callable[[Row], GlobalSearchItem],
    ) -> list[GlobalSearchItem]:
        async with self._session_factory() as session:
            result = await session.execute(text(sql), params)
            rows = result.mappings().all()
        return [shape(row) for row in rows]
