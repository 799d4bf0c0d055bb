"""Farmer directory and product catalogue."""

import math
import secrets
from pathlib import PurePosixPath

from fastapi import HTTPException
from loguru import logger
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.farmconnect.core.models.catalog import FarmerCard, ProductListing
from src.farmconnect.core.services.storage.file_storage import (
    FileStorageService,
    ImageUpload,
    validate_image,
)
from src.farmconnect.entities.core.profile import Profile, ProfileRepository
from src.farmconnect.entities.service.product import (
    PRODUCT_CATEGORIES,
    Product,
    ProductRepository,
    ProductSort,
)
from src.farmconnect.runtime.context import get_config


class Category(BaseModel):
    id: str
    name: str


class NewProduct(BaseModel):
    """Product form values as submitted; numbers arrive as text."""

    name: str
    description: str | None = None
    price: str | float
    quantity: str | int | None = None
    category: str | None = None
    latitude: float | None = None
    longitude: float | None = None


def _parse_price(value: str | float) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail="Price must be a number") from e
    if not math.isfinite(price):
        raise HTTPException(status_code=400, detail="Price must be a number")
    if price <= 0:
        raise HTTPException(status_code=400, detail="Price must be greater than zero")
    return price


def _parse_quantity(value: str | int | None) -> int:
    # Anything that is not an integer counts as zero stock
    try:
        return int(value) if value not in (None, "") else 0
    except (TypeError, ValueError):
        return 0


class CatalogService:
    def __init__(self, db_session: Session, storage: FileStorageService):
        self._db = db_session
        self._profiles = ProfileRepository(db_session)
        self._products = ProductRepository(db_session)
        self._storage = storage

    # Farmers

    def list_farmers(self, search: str | None = None) -> list[Profile]:
        farmers = self._profiles.list_by_type("farmer")
        if not search or not search.strip():
            return farmers
        return [farmer for farmer in farmers if farmer.matches(search)]

    def get_farmer(self, farmer_id: str) -> Profile:
        farmer = self._profiles.get(farmer_id)
        if farmer is None or not farmer.is_farmer:
            raise HTTPException(status_code=404, detail="Farmer not found")
        return farmer

    def get_farmer_products(self, farmer_id: str) -> list[ProductListing]:
        farmer = self.get_farmer(farmer_id)
        card = FarmerCard.from_profile(farmer)
        return [
            ProductListing.build(product, card)
            for product in self._products.list_by_farmer(farmer.id)
        ]

    # Products

    @staticmethod
    def list_categories() -> list[Category]:
        return [Category(id="all", name="All Products")] + [
            Category(id=category, name=category.title()) for category in PRODUCT_CATEGORIES
        ]

    def list_products(
        self,
        category: str | None = None,
        search: str | None = None,
        sort: ProductSort = "newest",
    ) -> list[ProductListing]:
        rows = self._products.list_with_farmer_details(category, search, sort)
        return [ProductListing.from_joined(row) for row in rows]

    def get_product(self, product_id: str) -> ProductListing:
        row = self._products.get_with_farmer_details(product_id)
        if row is None:
            raise HTTPException(status_code=404, detail="Product not found")
        return ProductListing.from_joined(row)

    def followed_farmer_products(self, user_id: str) -> list[ProductListing]:
        return [
            ProductListing.from_joined(row)
            for row in self._products.followed_farmer_products(user_id)
        ]

    def create_product(
        self, farmer: Profile, form: NewProduct, image: ImageUpload | None = None
    ) -> ProductListing:
        """List a new product for ``farmer``.

        Every form field is validated before the optional image is stored, and
        the image is removed again if the insert fails.
        """
        if not farmer.is_farmer:
            raise HTTPException(status_code=403, detail="Only farmers can add products")
        name = form.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Product name is required")
        category = form.category or "vegetables"
        if category not in PRODUCT_CATEGORIES:
            raise HTTPException(status_code=400, detail=f"Unknown category: {category}")
        price = _parse_price(form.price)
        quantity = _parse_quantity(form.quantity)

        bucket = get_config().storage.product_bucket
        image_path = None
        image_url = None
        if image is not None:
            image_path = self._store_product_image(farmer.id, image)
            image_url = self._storage.public_url(bucket, image_path)

        try:
            product = self._products.create(
                Product(
                    farmer_id=farmer.id,
                    name=name,
                    description=form.description,
                    category=category,
                    price=price,
                    quantity=quantity,
                    image_url=image_url,
                    latitude=form.latitude,
                    longitude=form.longitude,
                )
            )
            self._db.commit()
        except SQLAlchemyError:
            self._db.rollback()
            if image_path is not None:
                self._storage.remove(bucket, [image_path])
            raise
        logger.info("Farmer {} listed product {}", farmer.id, product.id)
        return ProductListing.build(product, FarmerCard.from_profile(farmer))

    def delete_product(self, farmer: Profile, product_id: str) -> None:
        product = self._products.get(product_id)
        if product is None:
            raise HTTPException(status_code=404, detail="Product not found")
        if product.farmer_id != farmer.id:
            raise HTTPException(status_code=403, detail="You can only delete your own products")
        self._products.delete(product_id)
        self._db.commit()
        logger.info("Farmer {} deleted product {}", farmer.id, product_id)

    def _store_product_image(self, farmer_id: str, image: ImageUpload) -> str:
        config = get_config().storage
        validate_image(image.content_type, len(image.data), config.max_image_bytes)
        extension = PurePosixPath(image.filename).suffix.lstrip(".").lower() or "jpg"
        path = f"{farmer_id}/{secrets.token_hex(8)}.{extension}"
        return self._storage.upload(config.product_bucket, path, image.data)
