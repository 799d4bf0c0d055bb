"""Entity: Follow."""

from pydantic import Field

from src.farmconnect.entities.core._base import Entity


class Follow(Entity):
    """A user subscribing to a farmer's listings."""

    user_id: str = Field(description="Follower profile id")
    farmer_id: str = Field(description="Followed farmer profile id")
