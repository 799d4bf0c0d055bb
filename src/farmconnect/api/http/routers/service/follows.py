"""Follow / unfollow farmers."""

from fastapi import APIRouter, Depends

from src.farmconnect.api.http.deps import get_authenticated_user, get_follow_service
from src.farmconnect.core.models.auth import CurrentUser
from src.farmconnect.core.services import FollowService
from src.farmconnect.core.services.marketplace import FollowState
from src.farmconnect.entities.core.profile import Profile

router = APIRouter(prefix="/follows", tags=["follows"])


@router.get("", response_model=list[Profile])
def followed_farmers(
    user: CurrentUser = Depends(get_authenticated_user),
    follows: FollowService = Depends(get_follow_service),
) -> list[Profile]:
    """Farmers the current user follows."""
    return follows.followed_farmers(user.id)


@router.get("/{farmer_id}/followers")
def follower_count(
    farmer_id: str,
    follows: FollowService = Depends(get_follow_service),
) -> dict[str, str | int]:
    return {"farmer_id": farmer_id, "follower_count": follows.follower_count(farmer_id)}


@router.get("/{farmer_id}", response_model=FollowState)
def follow_state(
    farmer_id: str,
    user: CurrentUser = Depends(get_authenticated_user),
    follows: FollowService = Depends(get_follow_service),
) -> FollowState:
    return follows.state(user.id, farmer_id)


@router.put("/{farmer_id}", response_model=FollowState)
def follow(
    farmer_id: str,
    user: CurrentUser = Depends(get_authenticated_user),
    follows: FollowService = Depends(get_follow_service),
) -> FollowState:
    """Follow a farmer. Following twice leaves a single follow."""
    follows.follow(user.id, farmer_id)
    return follows.state(user.id, farmer_id)


@router.delete("/{farmer_id}", response_model=FollowState)
def unfollow(
    farmer_id: str,
    user: CurrentUser = Depends(get_authenticated_user),
    follows: FollowService = Depends(get_follow_service),
) -> FollowState:
    follows.unfollow(user.id, farmer_id)
    return follows.state(user.id, farmer_id)


@router.post("/{farmer_id}/toggle", response_model=FollowState)
def toggle_follow(
    farmer_id: str,
    user: CurrentUser = Depends(get_authenticated_user),
    follows: FollowService = Depends(get_follow_service),
) -> FollowState:
    return follows.toggle(user.id, farmer_id)
