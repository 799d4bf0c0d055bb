"""Schema management for the marketplace tables."""

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import SQLModel


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_all(self) -> None:
        """Create all database tables."""
        import src.farmconnect.entities  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        import src.farmconnect.entities  # noqa: F401

        SQLModel.metadata.drop_all(self._engine)
        logger.warning("All database tables dropped.")
