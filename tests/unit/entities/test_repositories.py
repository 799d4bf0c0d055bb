"""Repository tests against an in-memory SQLite database."""

from datetime import UTC, datetime

import pytest
from sqlalchemy.exc import IntegrityError

from src.farmconnect.entities.core.account import Account, AccountRepository
from src.farmconnect.entities.core.profile import ProfileRepository, ProfileUpdate
from src.farmconnect.entities.service.feedback import (
    ProductComment,
    ProductCommentRepository,
    ProductRatingRepository,
)
from src.farmconnect.entities.service.follow import Follow, FollowRepository
from src.farmconnect.entities.service.market import (
    MarketplaceItem,
    MarketplaceItemRepository,
    MarketPriceCacheRepository,
)
from src.farmconnect.entities.service.product import ProductRepository


class TestAccountRepository:
    def test_create_and_lookup_by_email(self, session):
        repo = AccountRepository(session)
        account = repo.create(Account(email="grower@example.com", password_hash="x"))

        assert repo.get(account.id).email == "grower@example.com"
        assert repo.get_by_email("grower@example.com").id == account.id
        assert repo.get_by_email("nobody@example.com") is None

    def test_email_is_unique(self, session):
        repo = AccountRepository(session)
        repo.create(Account(email="grower@example.com", password_hash="x"))
        with pytest.raises(IntegrityError):
            repo.create(Account(email="grower@example.com", password_hash="y"))

    def test_update_password(self, session):
        repo = AccountRepository(session)
        account = repo.create(Account(email="grower@example.com", password_hash="old"))
        updated = repo.update_password(account.id, "new")
        assert updated.password_hash == "new"


class TestProfileRepository:
    def test_list_by_type_is_sorted_by_name(self, session, make_profile):
        make_profile("raj@example.com", user_type="farmer", full_name="Raj Patel")
        make_profile("john@example.com", user_type="farmer", full_name="John Smith")
        make_profile("asha@example.com", full_name="Asha Rao")

        farmers = ProfileRepository(session).list_by_type("farmer")
        assert [farmer.full_name for farmer in farmers] == ["John Smith", "Raj Patel"]

    def test_update_only_touches_set_fields(self, session, farmer):
        repo = ProfileRepository(session)
        updated = repo.update(farmer.id, ProfileUpdate(bio="Grows millet"))

        assert updated.bio == "Grows millet"
        assert updated.full_name == "John Smith"
        assert updated.specialties == ["Organic Vegetables", "Fruits"]

    def test_update_unknown_profile(self, session):
        with pytest.raises(ValueError):
            ProfileRepository(session).update("missing", ProfileUpdate(bio="x"))

    def test_get_many_skips_unknown_ids(self, session, farmer, shopper):
        found = ProfileRepository(session).get_many([farmer.id, "missing", shopper.id])
        assert set(found) == {farmer.id, shopper.id}

    def test_set_avatar(self, session, shopper):
        repo = ProfileRepository(session)
        assert repo.set_avatar(shopper.id, "http://x/a.png").avatar_url == "http://x/a.png"
        assert repo.set_avatar(shopper.id, None).avatar_url is None


class TestProductRepository:
    @pytest.fixture
    def catalogue(self, farmer, make_profile, make_product):
        other = make_profile(
            "priya@example.com", user_type="farmer", full_name="Priya Sharma"
        )
        return {
            "tomatoes": make_product(
                farmer, "Organic Tomatoes", price=40, category="vegetables"
            ),
            "rice": make_product(
                other,
                "Basmati Rice",
                price=120,
                category="grains",
                description="Premium quality aged basmati rice.",
            ),
            "turmeric": make_product(other, "Turmeric Powder", price=90, category="spices"),
        }

    def test_category_filter(self, session, catalogue):
        rows = ProductRepository(session).list_with_farmer_details(category="grains")
        assert [row.name for row in rows] == ["Basmati Rice"]

    def test_category_all_disables_filter(self, session, catalogue):
        rows = ProductRepository(session).list_with_farmer_details(category="all")
        assert len(rows) == 3

    def test_search_matches_description_and_farmer_name(self, session, catalogue):
        repo = ProductRepository(session)
        assert [r.name for r in repo.list_with_farmer_details(search="AGED")] == [
            "Basmati Rice"
        ]
        by_farmer = repo.list_with_farmer_details(search="priya", sort="name")
        assert [r.name for r in by_farmer] == ["Basmati Rice", "Turmeric Powder"]

    def test_search_wildcards_match_literally(self, session, catalogue, farmer, make_product):
        make_product(farmer, "Chilli 100% Pure", price=80, category="spices")
        repo = ProductRepository(session)

        assert repo.list_with_farmer_details(search="_") == []
        assert [r.name for r in repo.list_with_farmer_details(search="100%")] == [
            "Chilli 100% Pure"
        ]
        assert repo.list_with_farmer_details(search="1_0") == []

    @pytest.mark.parametrize(
        "sort, expected",
        [
            ("price_asc", ["Organic Tomatoes", "Turmeric Powder", "Basmati Rice"]),
            ("price_desc", ["Basmati Rice", "Turmeric Powder", "Organic Tomatoes"]),
            ("name", ["Basmati Rice", "Organic Tomatoes", "Turmeric Powder"]),
        ],
    )
    def test_sorting(self, session, catalogue, sort, expected):
        rows = ProductRepository(session).list_with_farmer_details(sort=sort)
        assert [row.name for row in rows] == expected

    def test_joined_farmer_details(self, session, catalogue, farmer):
        row = ProductRepository(session).get_with_farmer_details(catalogue["tomatoes"].id)
        assert row.farmer_name == "John Smith"
        assert row.farmer_location == "Karnataka, India"
        assert row.farmer_phone == "+91 98765 43210"

    def test_followed_farmer_products(self, session, catalogue, farmer, shopper):
        FollowRepository(session).create(Follow(user_id=shopper.id, farmer_id=farmer.id))
        rows = ProductRepository(session).followed_farmer_products(shopper.id)
        assert [row.name for row in rows] == ["Organic Tomatoes"]

    def test_delete_and_count(self, session, catalogue, farmer):
        repo = ProductRepository(session)
        assert repo.count_by_farmer(farmer.id) == 1
        assert repo.delete(catalogue["tomatoes"].id) is True
        assert repo.delete(catalogue["tomatoes"].id) is False
        assert repo.count_by_farmer(farmer.id) == 0


class TestFollowRepository:
    def test_pair_is_unique(self, session, farmer, shopper):
        repo = FollowRepository(session)
        repo.create(Follow(user_id=shopper.id, farmer_id=farmer.id))
        with pytest.raises(IntegrityError):
            repo.create(Follow(user_id=shopper.id, farmer_id=farmer.id))

    def test_counts_and_delete(self, session, farmer, shopper):
        repo = FollowRepository(session)
        repo.create(Follow(user_id=shopper.id, farmer_id=farmer.id))

        assert repo.count_followers(farmer.id) == 1
        assert repo.followed_farmer_ids(shopper.id) == [farmer.id]
        assert repo.delete(shopper.id, farmer.id) is True
        assert repo.delete(shopper.id, farmer.id) is False
        assert repo.count_followers(farmer.id) == 0


class TestFeedbackRepositories:
    def test_rating_upsert_keeps_one_row_per_member(self, session, product, shopper):
        repo = ProductRatingRepository(session)
        repo.set_product_rating(product.id, shopper.id, 2)
        repo.set_product_rating(product.id, shopper.id, 5)

        assert repo.get_user_rating(product.id, shopper.id) == 5
        summary = repo.get_product_rating(product.id)
        assert summary.total_ratings == 1
        assert summary.average_rating == 5

    def test_average_is_rounded_to_one_decimal(self, session, product, make_profile):
        repo = ProductRatingRepository(session)
        for index, stars in enumerate((5, 4, 4)):
            member = make_profile(f"member{index}@example.com")
            repo.set_product_rating(product.id, member.id, stars)

        summary = repo.get_product_rating(product.id)
        assert summary.average_rating == 4.3
        assert summary.total_ratings == 3

    def test_unrated_product(self, session, product):
        summary = ProductRatingRepository(session).get_product_rating(product.id)
        assert summary.average_rating == 0
        assert summary.total_ratings == 0

    def test_pooled_average(self, session, farmer, shopper, make_product):
        repo = ProductRatingRepository(session)
        first = make_product(farmer, "Fresh Spinach", price=30)
        second = make_product(farmer, "Organic Potatoes", price=60)
        repo.set_product_rating(first.id, shopper.id, 3)
        repo.set_product_rating(second.id, shopper.id, 4)

        summary = repo.average_for_products([first.id, second.id])
        assert summary.average_rating == 3.5
        assert summary.total_ratings == 2
        assert repo.average_for_products([]).total_ratings == 0

    def test_comments_carry_author(self, session, product, shopper):
        repo = ProductCommentRepository(session)
        repo.create(
            ProductComment(product_id=product.id, user_id=shopper.id, comment="Lovely!")
        )

        comments = repo.list_for_product(product.id)
        assert len(comments) == 1
        assert comments[0].comment == "Lovely!"
        assert comments[0].profiles.full_name == "Asha Rao"


class TestMarketRepositories:
    def test_latest_respects_limit(self, session):
        repo = MarketplaceItemRepository(session)
        repo.add_many(
            [
                MarketplaceItem(
                    commodity_name=f"Crop {index}",
                    category="Grains",
                    market="Karnal",
                    modal_price=10 + index,
                )
                for index in range(5)
            ]
        )
        assert len(repo.latest(limit=3)) == 3

    def test_cache_upsert_replaces_row(self, session):
        repo = MarketPriceCacheRepository(session)
        assert repo.get() is None

        stamp = datetime(2024, 5, 10, tzinfo=UTC)
        repo.upsert([{"commodity_name": "Wheat"}], stamp)
        repo.upsert([{"commodity_name": "Maize"}], stamp)

        cached = repo.get()
        assert cached.data == [{"commodity_name": "Maize"}]
