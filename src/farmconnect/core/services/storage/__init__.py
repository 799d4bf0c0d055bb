from .file_storage import FileStorageService, ImageUpload, validate_image

__all__ = ["FileStorageService", "ImageUpload", "validate_image"]
