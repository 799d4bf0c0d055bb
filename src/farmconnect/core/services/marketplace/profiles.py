import time

from fastapi import HTTPException
from loguru import logger
from sqlmodel import Session
from werkzeug.utils import secure_filename

from src.farmconnect.core.services.storage.file_storage import (
    FileStorageService,
    ImageUpload,
    validate_image,
)
from src.farmconnect.entities.core.profile import Profile, ProfileRepository, ProfileUpdate
from src.farmconnect.runtime.context import get_config


class ProfileService:
    """Own-profile edits and avatar management."""

    def __init__(self, db_session: Session, storage: FileStorageService):
        self._db = db_session
        self._profiles = ProfileRepository(db_session)
        self._storage = storage

    def get_profile(self, profile_id: str) -> Profile:
        profile = self._profiles.get(profile_id)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile

    def update_profile(self, profile_id: str, changes: ProfileUpdate) -> Profile:
        if changes.specialties is not None:
            changes.specialties = [s.strip() for s in changes.specialties if s.strip()]
        try:
            profile = self._profiles.update(profile_id, changes)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        self._db.commit()
        return profile

    def upload_avatar(self, profile_id: str, image: ImageUpload) -> Profile:
        """Store a new avatar at ``{profile_id}/{millis}-{filename}``."""
        config = get_config().storage
        validate_image(image.content_type, len(image.data), config.max_image_bytes)
        self.get_profile(profile_id)

        filename = secure_filename(image.filename) or "avatar"
        path = f"{profile_id}/{int(time.time() * 1000)}-{filename}"
        self._storage.upload(config.profile_bucket, path, image.data)

        profile = self._profiles.set_avatar(
            profile_id, self._storage.public_url(config.profile_bucket, path)
        )
        self._db.commit()
        return profile

    def remove_avatar(self, profile_id: str) -> Profile:
        """Delete the stored avatar and clear ``avatar_url``."""
        bucket = get_config().storage.profile_bucket
        profile = self.get_profile(profile_id)
        path = (
            FileStorageService.path_from_public_url(bucket, profile.avatar_url)
            if profile.avatar_url
            else None
        )
        if path is None:
            raise HTTPException(status_code=400, detail="Invalid image URL")

        self._storage.remove(bucket, [path])
        profile = self._profiles.set_avatar(profile_id, None)
        self._db.commit()
        logger.info("Removed avatar for {}", profile_id)
        return profile
