"""Market price fallback chain.

Fresh provider data is persisted and returned. When the provider fails the
service falls back, in order, to the persisted ``marketplace_items`` rows,
the ``market_prices_cache`` row and finally to today's synthetic prices.
Every fallback result is flagged ``is_cached``.
"""

from collections.abc import Callable
from datetime import date, datetime
from typing import Any, Literal

from cachetools import TTLCache
from loguru import logger
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.farmconnect.core.services.market.providers import (
    MarketPrice,
    MarketPriceProvider,
    generate_daily_prices,
)
from src.farmconnect.entities.core._base import utcnow
from src.farmconnect.entities.service.market import (
    MarketplaceItem,
    MarketplaceItemRepository,
    MarketPriceCacheRepository,
)
from src.farmconnect.runtime.config.config_data import MarketPricesConfig

SnapshotSource = Literal["live", "stored", "cache", "synthetic"]


class MarketSnapshot(BaseModel):
    data: list[dict[str, Any]]
    updated_at: datetime
    source: SnapshotSource
    is_cached: bool = False


class CategoryAverage(BaseModel):
    name: str
    price: float


def category_averages(rows: list[dict[str, Any]]) -> list[CategoryAverage]:
    """Average modal price per category, in first-seen category order."""
    totals: dict[str, list[float]] = {}
    for row in rows:
        totals.setdefault(row.get("category") or "Other", []).append(float(row["modal_price"]))
    return [
        CategoryAverage(name=category, price=round(sum(prices) / len(prices), 2))
        for category, prices in totals.items()
    ]


class MarketPriceService:
    def __init__(
        self,
        provider: MarketPriceProvider,
        config: MarketPricesConfig,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._provider = provider
        self._config = config
        self._today = today
        self._memo: TTLCache | None = (
            TTLCache(maxsize=1, ttl=config.memo_ttl_seconds)
            if config.memo_ttl_seconds > 0
            else None
        )

    @property
    def provider(self) -> MarketPriceProvider:
        return self._provider

    async def get_prices(self, session: Session) -> MarketSnapshot:
        """Run the chain once and return the first source that answers."""
        if self._memo is not None and "live" in self._memo:
            return self._memo["live"]

        try:
            prices = await self._provider.fetch()
        except Exception as e:
            logger.error("Error fetching market prices from {}: {}", self._provider.name, e)
        else:
            snapshot = self._persist(session, prices)
            if self._memo is not None:
                self._memo["live"] = snapshot
            return snapshot

        return (
            self._from_table(session)
            or self._from_cache(session)
            or self._synthetic()
        )

    def stored(self, session: Session, limit: int | None = None) -> list[MarketplaceItem]:
        return MarketplaceItemRepository(session).latest(limit or self._config.snapshot_limit)

    async def summary(self, session: Session) -> list[CategoryAverage]:
        snapshot = await self.get_prices(session)
        return category_averages(snapshot.data)

    def _persist(self, session: Session, prices: list[MarketPrice]) -> MarketSnapshot:
        timestamp = utcnow()
        data = [price.model_dump() for price in prices]

        try:
            MarketplaceItemRepository(session).add_many(
                [MarketplaceItem(**row) for row in data]
            )
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning("Could not store market price rows: {}", e)

        try:
            MarketPriceCacheRepository(session).upsert(
                data, timestamp, cache_id=self._config.cache_id
            )
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning("Could not update market price cache: {}", e)

        return MarketSnapshot(data=data, updated_at=timestamp, source="live")

    def _from_table(self, session: Session) -> MarketSnapshot | None:
        try:
            rows = self.stored(session)
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning("Stored market prices unavailable: {}", e)
            return None
        if not rows:
            return None
        return MarketSnapshot(
            data=[
                MarketPrice.model_validate(row.model_dump()).model_dump()
                for row in rows
            ],
            updated_at=max(row.created_at for row in rows),
            source="stored",
            is_cached=True,
        )

    def _from_cache(self, session: Session) -> MarketSnapshot | None:
        try:
            cached = MarketPriceCacheRepository(session).get(self._config.cache_id)
        except SQLAlchemyError as e:
            session.rollback()
            logger.warning("Market price cache unavailable: {}", e)
            return None
        if cached is None or not cached.data:
            return None
        return MarketSnapshot(
            data=cached.data, updated_at=cached.updated_at, source="cache", is_cached=True
        )

    def _synthetic(self) -> MarketSnapshot:
        logger.info("Serving synthetic market prices")
        prices = generate_daily_prices(self._today())
        return MarketSnapshot(
            data=[price.model_dump() for price in prices],
            updated_at=utcnow(),
            source="synthetic",
            is_cached=True,
        )
