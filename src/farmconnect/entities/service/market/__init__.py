"""Entity package: market price snapshots."""

from .entity import MarketplaceItem, MarketPriceCache
from .repository import MarketPriceCacheRepository, MarketplaceItemRepository
from .table import MarketplaceItemTable, MarketPriceCacheTable

__all__ = [
    "MarketPriceCache",
    "MarketPriceCacheRepository",
    "MarketPriceCacheTable",
    "MarketplaceItem",
    "MarketplaceItemRepository",
    "MarketplaceItemTable",
]
