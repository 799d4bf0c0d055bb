"""Market price snapshots: providers and the fallback chain."""

from .market_prices import (
    CategoryAverage,
    MarketPriceService,
    MarketSnapshot,
    category_averages,
)
from .providers import (
    COMMODITIES,
    Commodity,
    MarketPrice,
    MarketPriceProvider,
    RapidApiPriceProvider,
    SyntheticPriceProvider,
    build_provider,
    generate_daily_prices,
)

__all__ = [
    "COMMODITIES",
    "CategoryAverage",
    "Commodity",
    "MarketPrice",
    "MarketPriceProvider",
    "MarketPriceService",
    "MarketSnapshot",
    "RapidApiPriceProvider",
    "SyntheticPriceProvider",
    "build_provider",
    "category_averages",
    "generate_daily_prices",
]
