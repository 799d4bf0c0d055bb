from datetime import datetime
from typing import Any

from sqlmodel import Session, col, select

from .entity import MarketplaceItem, MarketPriceCache
from .table import MarketplaceItemTable, MarketPriceCacheTable


class MarketplaceItemRepository:
    """Data-access layer for persisted price rows."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add_many(self, items: list[MarketplaceItem]) -> int:
        for item in items:
            self._session.add(MarketplaceItemTable.model_validate(item, from_attributes=True))
        self._session.flush()
        return len(items)

    def latest(self, limit: int = 50) -> list[MarketplaceItem]:
        statement = (
            select(MarketplaceItemTable)
            .order_by(col(MarketplaceItemTable.created_at).desc())
            .limit(limit)
        )
        return [
            MarketplaceItem.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]


class MarketPriceCacheRepository:
    """Data-access layer for the snapshot cache row."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, cache_id: str = "latest") -> MarketPriceCache | None:
        row = self._session.get(MarketPriceCacheTable, cache_id)
        if row is None:
            return None
        return MarketPriceCache.model_validate(row, from_attributes=True)

    def upsert(
        self, data: list[dict[str, Any]], updated_at: datetime, cache_id: str = "latest"
    ) -> MarketPriceCache:
        row = self._session.get(MarketPriceCacheTable, cache_id)
        if row is None:
            row = MarketPriceCacheTable(id=cache_id, data=data, updated_at=updated_at)
        else:
            row.data = data
            row.updated_at = updated_at
        self._session.add(row)
        self._session.flush()
        return MarketPriceCache.model_validate(row, from_attributes=True)
