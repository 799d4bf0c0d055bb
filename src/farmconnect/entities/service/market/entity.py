"""Entities: MarketplaceItem and MarketPriceCache."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.farmconnect.entities.core._base import Entity, utcnow


class MarketplaceItem(Entity):
    """One commodity price observation at a market."""

    commodity_name: str
    category: str
    market: str
    unit: str = "kg"
    modal_price: float
    min_price: float | None = None
    max_price: float | None = None
    price_change_percentage: float | None = None


class MarketPriceCache(BaseModel):
    """Last successful price snapshot, kept under a fixed id."""

    id: str = "latest"
    data: list[dict[str, Any]] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=utcnow)
