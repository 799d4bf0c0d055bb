"""Product and farmer cards as shown in listings."""

from datetime import datetime

from pydantic import BaseModel

from src.farmconnect.entities.core.profile import Profile
from src.farmconnect.entities.service.product import Product, ProductWithFarmer

PLACEHOLDER_IMAGE = "/placeholder.svg"
UNKNOWN_FARMER = "Unknown Farmer"
UNKNOWN_LOCATION = "Unknown Location"


class Coordinates(BaseModel):
    latitude: float
    longitude: float


class FarmerCard(BaseModel):
    """Public summary of a farmer attached to each listed product."""

    id: str = ""
    name: str = UNKNOWN_FARMER
    location: str = UNKNOWN_LOCATION
    avatar: str | None = None
    email: str | None = None
    phone: str | None = None
    coordinates: Coordinates | None = None

    @classmethod
    def from_profile(cls, farmer: Profile | None) -> "FarmerCard":
        if farmer is None:
            return cls()
        return cls(
            id=farmer.id,
            name=farmer.full_name or UNKNOWN_FARMER,
            location=farmer.location or UNKNOWN_LOCATION,
            avatar=farmer.avatar_url or None,
            email=farmer.email or None,
            phone=farmer.phone_number or None,
            coordinates=_coordinates(farmer.latitude, farmer.longitude),
        )

    @classmethod
    def from_joined(cls, row: ProductWithFarmer) -> "FarmerCard":
        return cls(
            id=row.farmer_id or "",
            name=row.farmer_name or UNKNOWN_FARMER,
            location=row.farmer_location or UNKNOWN_LOCATION,
            avatar=row.farmer_avatar or None,
            email=row.farmer_email or None,
            phone=row.farmer_phone or None,
            coordinates=_coordinates(row.farmer_latitude, row.farmer_longitude),
        )


class ProductListing(BaseModel):
    """A product as presented to shoppers."""

    id: str
    name: str
    description: str | None = None
    category: str
    price: float
    quantity: int | None = None
    image: str = PLACEHOLDER_IMAGE
    created_at: datetime
    farmer: FarmerCard

    @classmethod
    def build(cls, product: Product, farmer: FarmerCard) -> "ProductListing":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            category=product.category,
            price=product.price,
            quantity=product.quantity,
            image=product.image_url or PLACEHOLDER_IMAGE,
            created_at=product.created_at,
            farmer=farmer,
        )

    @classmethod
    def from_joined(cls, row: ProductWithFarmer) -> "ProductListing":
        return cls.build(row, FarmerCard.from_joined(row))


def _coordinates(latitude: float | None, longitude: float | None) -> Coordinates | None:
    # A zero coordinate counts as missing
    if latitude and longitude:
        return Coordinates(latitude=latitude, longitude=longitude)
    return None
