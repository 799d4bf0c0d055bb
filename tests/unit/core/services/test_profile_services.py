"""Tests for profile editing, avatars, dashboards and image storage."""

import pytest
from fastapi import HTTPException

from src.farmconnect.core.models.cart import Cart, CartItem
from src.farmconnect.core.services import (
    DashboardService,
    FeedbackService,
    FileStorageService,
    FollowService,
    ProfileService,
)
from src.farmconnect.core.services.storage import ImageUpload
from src.farmconnect.entities.core.profile import ProfileUpdate

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def profiles(session, file_storage) -> ProfileService:
    return ProfileService(session, file_storage)


class TestProfileService:
    def test_update_cleans_specialties(self, profiles, farmer):
        updated = profiles.update_profile(
            farmer.id, ProfileUpdate(specialties=[" Mangoes ", "", "  ", "Rice"])
        )
        assert updated.specialties == ["Mangoes", "Rice"]
        assert updated.full_name == "John Smith"

    def test_update_unknown_profile(self, profiles):
        with pytest.raises(HTTPException) as exc_info:
            profiles.update_profile("missing", ProfileUpdate(bio="x"))
        assert exc_info.value.status_code == 404

    def test_avatar_upload_and_removal(self, profiles, shopper, file_storage):
        updated = profiles.upload_avatar(
            shopper.id,
            ImageUpload(filename="../my photo.png", content_type="image/png", data=PNG),
        )

        assert updated.avatar_url.startswith(
            f"http://testserver/storage/profile-images/{shopper.id}/"
        )
        path = file_storage.path_from_public_url("profile-images", updated.avatar_url)
        assert path.endswith("-my_photo.png")
        assert file_storage.exists("profile-images", path)

        cleared = profiles.remove_avatar(shopper.id)
        assert cleared.avatar_url is None
        assert not file_storage.exists("profile-images", path)

    def test_avatar_must_be_an_image(self, profiles, shopper):
        with pytest.raises(HTTPException) as exc_info:
            profiles.upload_avatar(
                shopper.id,
                ImageUpload(filename="cv.pdf", content_type="application/pdf", data=b"%PDF"),
            )
        assert exc_info.value.detail == "Please upload an image file (JPEG, PNG, etc.)"

    def test_remove_without_avatar(self, profiles, shopper):
        with pytest.raises(HTTPException) as exc_info:
            profiles.remove_avatar(shopper.id)
        assert exc_info.value.detail == "Invalid image URL"


class TestDashboardService:
    def test_user_dashboard(self, session, shopper, farmer, product):
        FollowService(session).follow(shopper.id, farmer.id)
        cart = Cart(items=[CartItem(id=product.id, name=product.name, price=40, quantity=2)])

        dashboard = DashboardService(session).user_dashboard(shopper, cart)

        assert dashboard.greeting_name == "Asha Rao"
        assert dashboard.followed_farmer_count == 1
        assert [p.name for p in dashboard.followed_farmer_products] == ["Organic Tomatoes"]
        assert dashboard.cart_total_items == 2
        assert dashboard.cart_total_price == 80

    def test_greeting_falls_back(self, session, make_profile):
        anonymous = make_profile("nameless@example.com")
        dashboard = DashboardService(session).user_dashboard(anonymous, Cart())
        assert dashboard.greeting_name == "User"

    def test_farmer_dashboard(self, session, farmer, shopper, product, make_product):
        spinach = make_product(farmer, "Fresh Spinach", price=30)
        FollowService(session).follow(shopper.id, farmer.id)
        ratings = FeedbackService(session)
        ratings.set_product_rating(product.id, shopper.id, 5)
        ratings.set_product_rating(spinach.id, shopper.id, 4)

        dashboard = DashboardService(session).farmer_dashboard(farmer)

        assert dashboard.product_count == 2
        assert dashboard.follower_count == 1
        assert dashboard.average_rating == 4.5
        assert dashboard.total_ratings == 2

    def test_farmer_dashboard_requires_farmer(self, session, shopper):
        with pytest.raises(HTTPException) as exc_info:
            DashboardService(session).farmer_dashboard(shopper)
        assert exc_info.value.status_code == 403


class TestFileStorageService:
    def test_upload_and_remove(self, file_storage: FileStorageService):
        file_storage.upload("product-images", "farmer-1/a.png", PNG)
        assert file_storage.exists("product-images", "farmer-1/a.png")

        assert file_storage.remove("product-images", ["farmer-1/a.png", "farmer-1/b.png"]) == 1
        assert not file_storage.exists("product-images", "farmer-1/a.png")

    @pytest.mark.parametrize("path", ["../escape.png", "/etc/passwd", "a/../../b.png", ""])
    def test_paths_cannot_escape_bucket(self, file_storage: FileStorageService, path):
        with pytest.raises(HTTPException) as exc_info:
            file_storage.upload("product-images", path, PNG)
        assert exc_info.value.status_code == 400

    def test_unknown_bucket(self, file_storage: FileStorageService):
        with pytest.raises(HTTPException):
            file_storage.upload("secrets", "a.png", PNG)

    def test_public_url_round_trip(self, file_storage: FileStorageService):
        url = file_storage.public_url("profile-images", "user-1/123-me.png")
        assert url == "http://testserver/storage/profile-images/user-1/123-me.png"
        assert (
            FileStorageService.path_from_public_url("profile-images", url + "?v=2")
            == "user-1/123-me.png"
        )
        assert FileStorageService.path_from_public_url("profile-images", "http://x/y.png") is None
