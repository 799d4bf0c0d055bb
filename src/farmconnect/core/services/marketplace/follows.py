from fastapi import HTTPException
from loguru import logger
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.farmconnect.entities.core.profile import Profile, ProfileRepository
from src.farmconnect.entities.service.follow import Follow, FollowRepository


class FollowState(BaseModel):
    farmer_id: str
    following: bool
    follower_count: int


class FollowService:
    """Users following farmers. Follow and unfollow are idempotent."""

    def __init__(self, db_session: Session):
        self._db = db_session
        self._follows = FollowRepository(db_session)
        self._profiles = ProfileRepository(db_session)

    def _check_target(self, user_id: str, farmer_id: str) -> None:
        if user_id == farmer_id:
            raise HTTPException(status_code=400, detail="You cannot follow yourself")
        farmer = self._profiles.get(farmer_id)
        if farmer is None or not farmer.is_farmer:
            raise HTTPException(status_code=404, detail="Farmer not found")

    def follow(self, user_id: str, farmer_id: str) -> Follow:
        self._check_target(user_id, farmer_id)
        existing = self._follows.get(user_id, farmer_id)
        if existing is not None:
            return existing
        try:
            follow = self._follows.create(Follow(user_id=user_id, farmer_id=farmer_id))
            self._db.commit()
        except IntegrityError:
            # Lost a race with a concurrent follow of the same pair
            self._db.rollback()
            existing = self._follows.get(user_id, farmer_id)
            if existing is None:
                raise
            return existing
        logger.info("{} followed farmer {}", user_id, farmer_id)
        return follow

    def unfollow(self, user_id: str, farmer_id: str) -> bool:
        removed = self._follows.delete(user_id, farmer_id)
        if removed:
            self._db.commit()
            logger.info("{} unfollowed farmer {}", user_id, farmer_id)
        return removed

    def toggle(self, user_id: str, farmer_id: str) -> FollowState:
        if self.is_following(user_id, farmer_id):
            self.unfollow(user_id, farmer_id)
        else:
            self.follow(user_id, farmer_id)
        return self.state(user_id, farmer_id)

    def is_following(self, user_id: str, farmer_id: str) -> bool:
        return self._follows.get(user_id, farmer_id) is not None

    def state(self, user_id: str, farmer_id: str) -> FollowState:
        return FollowState(
            farmer_id=farmer_id,
            following=self.is_following(user_id, farmer_id),
            follower_count=self.follower_count(farmer_id),
        )

    def followed_farmers(self, user_id: str) -> list[Profile]:
        farmer_ids = self._follows.followed_farmer_ids(user_id)
        profiles = self._profiles.get_many(farmer_ids)
        return [profiles[farmer_id] for farmer_id in farmer_ids if farmer_id in profiles]

    def follower_count(self, farmer_id: str) -> int:
        return self._follows.count_followers(farmer_id)
