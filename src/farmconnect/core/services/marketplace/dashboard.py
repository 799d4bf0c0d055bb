from fastapi import HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from src.farmconnect.core.models.cart import Cart
from src.farmconnect.core.models.catalog import FarmerCard, ProductListing
from src.farmconnect.entities.core.profile import Profile, ProfileRepository
from src.farmconnect.entities.service.feedback import ProductRatingRepository
from src.farmconnect.entities.service.follow import FollowRepository
from src.farmconnect.entities.service.product import ProductRepository


class UserDashboard(BaseModel):
    greeting_name: str
    followed_farmer_count: int
    followed_farmer_products: list[ProductListing]
    cart_total_items: int
    cart_total_price: float


class FarmerDashboard(BaseModel):
    greeting_name: str
    products: list[ProductListing]
    product_count: int
    follower_count: int
    average_rating: float
    total_ratings: int


class DashboardService:
    def __init__(self, db_session: Session):
        self._profiles = ProfileRepository(db_session)
        self._products = ProductRepository(db_session)
        self._follows = FollowRepository(db_session)
        self._ratings = ProductRatingRepository(db_session)

    def user_dashboard(self, profile: Profile, cart: Cart) -> UserDashboard:
        followed = self._products.followed_farmer_products(profile.id)
        return UserDashboard(
            greeting_name=profile.full_name or "User",
            followed_farmer_count=len(self._follows.followed_farmer_ids(profile.id)),
            followed_farmer_products=[ProductListing.from_joined(row) for row in followed],
            cart_total_items=cart.total_items,
            cart_total_price=cart.total_price,
        )

    def farmer_dashboard(self, profile: Profile) -> FarmerDashboard:
        if not profile.is_farmer:
            raise HTTPException(status_code=403, detail="Farmer account required")
        card = FarmerCard.from_profile(profile)
        products = self._products.list_by_farmer(profile.id)
        rating = self._ratings.average_for_products([product.id for product in products])
        return FarmerDashboard(
            greeting_name=profile.full_name or "Farmer",
            products=[ProductListing.build(product, card) for product in products],
            product_count=len(products),
            follower_count=self._follows.count_followers(profile.id),
            average_rating=rating.average_rating,
            total_ratings=rating.total_ratings,
        )
