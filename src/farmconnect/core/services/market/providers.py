"""Sources of fresh commodity prices."""

import random
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import date
from typing import Any

import httpx
from loguru import logger
from pydantic import AliasChoices, BaseModel, Field, ValidationError

from src.farmconnect.runtime.config.config_data import MarketPricesConfig


class Commodity(BaseModel):
    name: str
    category: str
    unit: str
    base_price: float
    market: str


COMMODITIES: tuple[Commodity, ...] = (
    Commodity(name="Tomato", category="Vegetables", unit="kg", base_price=40, market="Bengaluru"),
    Commodity(name="Onion", category="Vegetables", unit="kg", base_price=35, market="Nashik"),
    Commodity(name="Potato", category="Vegetables", unit="kg", base_price=28, market="Agra"),
    Commodity(name="Spinach", category="Vegetables", unit="bunch", base_price=30, market="Pune"),
    Commodity(name="Alphonso Mango", category="Fruits", unit="dozen", base_price=450, market="Ratnagiri"),
    Commodity(name="Banana", category="Fruits", unit="dozen", base_price=60, market="Jalgaon"),
    Commodity(name="Apple", category="Fruits", unit="kg", base_price=160, market="Shimla"),
    Commodity(name="Basmati Rice", category="Grains", unit="kg", base_price=120, market="Karnal"),
    Commodity(name="Wheat", category="Grains", unit="kg", base_price=32, market="Indore"),
    Commodity(name="Maize", category="Grains", unit="kg", base_price=24, market="Davangere"),
    Commodity(name="Turmeric", category="Spices", unit="kg", base_price=90, market="Erode"),
    Commodity(name="Red Chilli", category="Spices", unit="kg", base_price=210, market="Guntur"),
    Commodity(name="Cardamom", category="Spices", unit="kg", base_price=2200, market="Idukki"),
)


class MarketPrice(BaseModel):
    """One commodity price row as served to clients."""

    commodity_name: str = Field(validation_alias=AliasChoices("commodity_name", "commodity", "name"))
    category: str = "Other"
    market: str = Field(default="", validation_alias=AliasChoices("market", "market_name"))
    unit: str = "kg"
    modal_price: float = Field(validation_alias=AliasChoices("modal_price", "price"))
    min_price: float | None = None
    max_price: float | None = None
    price_change_percentage: float | None = Field(
        default=None, validation_alias=AliasChoices("price_change_percentage", "change")
    )


def generate_daily_prices(day: date, commodities: tuple[Commodity, ...] = COMMODITIES) -> list[MarketPrice]:
    """Deterministic prices for ``day``; the same day of month gives the same rows."""
    rng = random.Random(day.day)
    prices = []
    for commodity in commodities:
        modal = commodity.base_price * rng.uniform(0.85, 1.15)
        low = modal * rng.uniform(0.90, 0.97)
        high = modal * rng.uniform(1.03, 1.10)
        change = rng.uniform(-5, 5)
        prices.append(
            MarketPrice(
                commodity_name=commodity.name,
                category=commodity.category,
                market=commodity.market,
                unit=commodity.unit,
                modal_price=round(modal, 2),
                min_price=round(low, 2),
                max_price=round(high, 2),
                price_change_percentage=round(change, 2),
            )
        )
    return prices


class MarketPriceProvider(ABC):
    name: str

    @abstractmethod
    async def fetch(self) -> list[MarketPrice]:
        """Return a fresh snapshot or raise when the source is unavailable."""


class SyntheticPriceProvider(MarketPriceProvider):
    name = "synthetic"

    def __init__(self, today: Callable[[], date] = date.today) -> None:
        self._today = today

    async def fetch(self) -> list[MarketPrice]:
        return generate_daily_prices(self._today())


class RapidApiPriceProvider(MarketPriceProvider):
    """Agriculture price feed on RapidAPI."""

    name = "rapidapi"

    def __init__(self, config: MarketPricesConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._client = client

    @property
    def url(self) -> str:
        return f"https://{self._config.rapidapi_host}/market-prices/{self._config.country}"

    async def fetch(self) -> list[MarketPrice]:
        if not self._config.rapidapi_key:
            raise RuntimeError("RapidAPI key not configured")
        headers = {
            "X-RapidAPI-Key": self._config.rapidapi_key,
            "X-RapidAPI-Host": self._config.rapidapi_host,
        }
        if self._client is not None:
            response = await self._client.get(self.url, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=self._config.timeout_seconds) as client:
                response = await client.get(self.url, headers=headers)

        if response.is_error:
            raise RuntimeError(
                f"API responded with {response.status_code}: {response.reason_phrase}"
            )
        return self._parse(response.json())

    @staticmethod
    def _parse(payload: Any) -> list[MarketPrice]:
        rows = payload.get("data", []) if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            raise ValueError("Unexpected market price payload")
        prices = []
        for row in rows:
            try:
                prices.append(MarketPrice.model_validate(row))
            except ValidationError as e:
                logger.warning("Skipping malformed market price row: {}", e.errors()[0]["msg"])
        if not prices:
            raise ValueError("Market price feed returned no usable rows")
        return prices


def build_provider(config: MarketPricesConfig) -> MarketPriceProvider:
    if config.provider == "rapidapi":
        return RapidApiPriceProvider(config)
    return SyntheticPriceProvider()
