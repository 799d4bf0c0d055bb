"""Own-profile endpoints."""

from fastapi import APIRouter, Depends, File, UploadFile

from src.farmconnect.api.http.deps import (
    get_current_profile,
    get_profile_service,
    read_image_upload,
)
from src.farmconnect.core.services import ProfileService
from src.farmconnect.entities.core.profile import Profile, ProfileUpdate

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=Profile)
def get_profile(profile: Profile = Depends(get_current_profile)) -> Profile:
    return profile


@router.patch("", response_model=Profile)
def update_profile(
    changes: ProfileUpdate,
    profile: Profile = Depends(get_current_profile),
    profiles: ProfileService = Depends(get_profile_service),
) -> Profile:
    """Update only the fields present in the request body."""
    return profiles.update_profile(profile.id, changes)


@router.post("/avatar", response_model=Profile)
async def upload_avatar(
    file: UploadFile = File(...),
    profile: Profile = Depends(get_current_profile),
    profiles: ProfileService = Depends(get_profile_service),
) -> Profile:
    return profiles.upload_avatar(profile.id, await read_image_upload(file))


@router.delete("/avatar", response_model=Profile)
def remove_avatar(
    profile: Profile = Depends(get_current_profile),
    profiles: ProfileService = Depends(get_profile_service),
) -> Profile:
    return profiles.remove_avatar(profile.id)
