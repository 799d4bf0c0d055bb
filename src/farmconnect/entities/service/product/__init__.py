"""Entity package: Product."""

from .entity import PRODUCT_CATEGORIES, Product, ProductSort, ProductWithFarmer
from .repository import ProductRepository
from .table import ProductTable

__all__ = [
    "PRODUCT_CATEGORIES",
    "Product",
    "ProductRepository",
    "ProductSort",
    "ProductTable",
    "ProductWithFarmer",
]
