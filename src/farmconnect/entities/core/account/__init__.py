"""Entity package: Account."""

from .entity import Account
from .repository import AccountRepository
from .table import AccountTable

__all__ = ["Account", "AccountRepository", "AccountTable"]
