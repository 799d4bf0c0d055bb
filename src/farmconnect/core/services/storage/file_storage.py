"""Bucket-style storage for uploaded images on the local filesystem."""

from pathlib import Path, PurePosixPath

from fastapi import HTTPException
from loguru import logger
from pydantic import BaseModel

from src.farmconnect.runtime.config.config_data import StorageConfig


class ImageUpload(BaseModel):
    """An uploaded file read into memory."""

    filename: str
    content_type: str | None = None
    data: bytes


def validate_image(content_type: str | None, size: int, max_bytes: int) -> None:
    """Reject uploads that are not images or exceed ``max_bytes``.

    Raises:
        HTTPException: 400 with a message suitable for display
    """
    if not content_type or not content_type.startswith("image/"):
        raise HTTPException(
            status_code=400, detail="Please upload an image file (JPEG, PNG, etc.)"
        )
    if size > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise HTTPException(
            status_code=400, detail=f"Please upload an image smaller than {limit_mb}MB"
        )


class FileStorageService:
    """Stores objects under ``{root}/{bucket}/{path}`` and serves them by URL."""

    def __init__(self, config: StorageConfig) -> None:
        self._config = config
        self._root = Path(config.root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def buckets(self) -> tuple[str, str]:
        return (self._config.product_bucket, self._config.profile_bucket)

    def _resolve(self, bucket: str, path: str) -> Path:
        if bucket not in self.buckets:
            raise HTTPException(status_code=400, detail=f"Unknown bucket: {bucket}")
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise HTTPException(status_code=400, detail="Invalid storage path")
        bucket_dir = (self._root / bucket).resolve()
        target = (bucket_dir / relative).resolve()
        if not target.is_relative_to(bucket_dir):
            raise HTTPException(status_code=400, detail="Invalid storage path")
        return target

    def upload(self, bucket: str, path: str, data: bytes) -> str:
        """Write ``data`` to ``bucket/path`` and return the stored path."""
        target = self._resolve(bucket, path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info("Stored {} bytes at {}/{}", len(data), bucket, path)
        return path

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self._config.public_base_url.rstrip('/')}/{bucket}/{path}"

    def remove(self, bucket: str, paths: list[str]) -> int:
        """Delete objects; missing ones are skipped. Returns how many were removed."""
        removed = 0
        for path in paths:
            target = self._resolve(bucket, path)
            if target.is_file():
                target.unlink()
                removed += 1
        return removed

    def exists(self, bucket: str, path: str) -> bool:
        return self._resolve(bucket, path).is_file()

    @staticmethod
    def path_from_public_url(bucket: str, url: str) -> str | None:
        """Object path inside ``bucket`` for a URL produced by :meth:`public_url`."""
        marker = f"{bucket}/"
        if marker not in url:
            return None
        path = url.split(marker, 1)[1].split("?", 1)[0]
        return path or None
