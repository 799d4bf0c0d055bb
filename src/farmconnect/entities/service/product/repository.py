from sqlalchemy import func, or_
from sqlmodel import Session, col, select

from src.farmconnect.entities.core.profile.table import ProfileTable
from src.farmconnect.entities.service.follow.table import FollowTable

from .entity import Product, ProductSort, ProductWithFarmer
from .table import ProductTable


def _like_pattern(search: str) -> str:
    """Substring pattern for ``search`` with LIKE wildcards escaped."""
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProductRepository:
    """Data-access layer for products and the product/farmer views."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, product: Product) -> Product:
        row = ProductTable.model_validate(product, from_attributes=True)
        self._session.add(row)
        self._session.flush()
        return Product.model_validate(row, from_attributes=True)

    def get(self, product_id: str) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def delete(self, product_id: str) -> bool:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def list_by_farmer(self, farmer_id: str) -> list[Product]:
        statement = (
            select(ProductTable)
            .where(ProductTable.farmer_id == farmer_id)
            .order_by(col(ProductTable.created_at).desc())
        )
        return [
            Product.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def count_by_farmer(self, farmer_id: str) -> int:
        statement = select(func.count()).select_from(ProductTable).where(
            ProductTable.farmer_id == farmer_id
        )
        return self._session.exec(statement).one()

    def list_with_farmer_details(
        self,
        category: str | None = None,
        search: str | None = None,
        sort: ProductSort = "newest",
    ) -> list[ProductWithFarmer]:
        """Products joined with their farmer, optionally filtered and sorted."""
        statement = select(ProductTable, ProfileTable).join(
            ProfileTable, ProductTable.farmer_id == ProfileTable.id, isouter=True
        )
        if category and category != "all":
            statement = statement.where(ProductTable.category == category)
        if search and search.strip():
            pattern = _like_pattern(search.strip().lower())
            searchable = (
                ProductTable.name,
                func.coalesce(ProductTable.description, ""),
                ProductTable.category,
                func.coalesce(ProfileTable.full_name, ""),
            )
            statement = statement.where(
                or_(*(func.lower(column).like(pattern, escape="\\") for column in searchable))
            )
        statement = statement.order_by(*self._ordering(sort))
        return [self._joined(product, farmer) for product, farmer in self._session.exec(statement)]

    def get_with_farmer_details(self, product_id: str) -> ProductWithFarmer | None:
        statement = (
            select(ProductTable, ProfileTable)
            .join(ProfileTable, ProductTable.farmer_id == ProfileTable.id, isouter=True)
            .where(ProductTable.id == product_id)
        )
        result = self._session.exec(statement).first()
        if result is None:
            return None
        return self._joined(*result)

    def followed_farmer_products(self, user_id: str) -> list[ProductWithFarmer]:
        """Products of every farmer ``user_id`` follows, newest first."""
        statement = (
            select(ProductTable, ProfileTable)
            .join(FollowTable, FollowTable.farmer_id == ProductTable.farmer_id)
            .join(ProfileTable, ProductTable.farmer_id == ProfileTable.id, isouter=True)
            .where(FollowTable.user_id == user_id)
            .order_by(col(ProductTable.created_at).desc())
        )
        return [self._joined(product, farmer) for product, farmer in self._session.exec(statement)]

    @staticmethod
    def _ordering(sort: ProductSort) -> list:
        if sort == "price_asc":
            return [col(ProductTable.price).asc(), col(ProductTable.name).asc()]
        if sort == "price_desc":
            return [col(ProductTable.price).desc(), col(ProductTable.name).asc()]
        if sort == "name":
            return [col(ProductTable.name).asc()]
        return [col(ProductTable.created_at).desc()]

    @staticmethod
    def _joined(product: ProductTable, farmer: ProfileTable | None) -> ProductWithFarmer:
        data = product.model_dump()
        if farmer is not None:
            data.update(
                farmer_name=farmer.full_name,
                farmer_location=farmer.location,
                farmer_avatar=farmer.avatar_url,
                farmer_email=farmer.email,
                farmer_phone=farmer.phone_number,
                farmer_latitude=farmer.latitude,
                farmer_longitude=farmer.longitude,
            )
        return ProductWithFarmer.model_validate(data)
