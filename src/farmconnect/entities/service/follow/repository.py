from sqlalchemy import func
from sqlmodel import Session, col, select

from .entity import Follow
from .table import FollowTable


class FollowRepository:
    """Data-access layer for follows."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str, farmer_id: str) -> Follow | None:
        statement = select(FollowTable).where(
            (FollowTable.user_id == user_id) & (FollowTable.farmer_id == farmer_id)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Follow.model_validate(row, from_attributes=True)

    def create(self, follow: Follow) -> Follow:
        row = FollowTable.model_validate(follow, from_attributes=True)
        self._session.add(row)
        self._session.flush()
        return Follow.model_validate(row, from_attributes=True)

    def delete(self, user_id: str, farmer_id: str) -> bool:
        statement = select(FollowTable).where(
            (FollowTable.user_id == user_id) & (FollowTable.farmer_id == farmer_id)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def followed_farmer_ids(self, user_id: str) -> list[str]:
        statement = (
            select(FollowTable.farmer_id)
            .where(FollowTable.user_id == user_id)
            .order_by(col(FollowTable.created_at).desc())
        )
        return list(self._session.exec(statement))

    def count_followers(self, farmer_id: str) -> int:
        statement = select(func.count()).select_from(FollowTable).where(
            FollowTable.farmer_id == farmer_id
        )
        return self._session.exec(statement).one()
