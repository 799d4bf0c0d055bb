"""Shared pytest fixtures."""

from .api import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
from .marketplace import *  # noqa: F401,F403
