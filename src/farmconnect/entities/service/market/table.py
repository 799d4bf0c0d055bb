"""Market price database table models."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from src.farmconnect.entities.core._base import EntityTable, utcnow


class MarketplaceItemTable(EntityTable, table=True):
    """Persisted commodity price rows."""

    __tablename__ = "marketplace_items"

    commodity_name: str
    category: str = Field(index=True)
    market: str
    unit: str = Field(default="kg")
    modal_price: float
    min_price: float | None = None
    max_price: float | None = None
    price_change_percentage: float | None = None


class MarketPriceCacheTable(SQLModel, table=True):
    """Single-row cache of the last snapshot payload."""

    __tablename__ = "market_prices_cache"

    id: str = Field(primary_key=True)
    data: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    updated_at: datetime = Field(default_factory=utcnow)
