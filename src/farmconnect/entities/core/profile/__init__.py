"""Entity package: Profile."""

from .entity import Profile, ProfileUpdate, UserType
from .repository import ProfileRepository
from .table import ProfileTable

__all__ = ["Profile", "ProfileRepository", "ProfileTable", "ProfileUpdate", "UserType"]
