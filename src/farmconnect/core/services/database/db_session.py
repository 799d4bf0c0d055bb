"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Engine, text
from sqlmodel import Session, create_engine

from src.farmconnect.runtime.config.config_data import ConfigData
from src.farmconnect.runtime.context import get_config


class DbSessionService:
    def __init__(self, engine: Engine | None = None):
        """Initialize the shared database engine and session factory."""
        self._engine = engine or self._create_engine(get_config())

    @classmethod
    def _create_engine(cls, main_config: ConfigData) -> Engine:
        db_config = main_config.database
        logger.info(
            "Configuring database engine for environment: {}", main_config.app.environment
        )

        engine_kwargs: dict = {
            "pool_pre_ping": True,
            "echo": False,
            "connect_args": cls._get_connect_args(main_config),
        }
        if not db_config.is_sqlite:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                }
            )

        engine = create_engine(db_config.connection_string, **engine_kwargs)
        logger.info("Database engine initialized for {}", engine.url.render_as_string())
        return engine

    @staticmethod
    def _get_connect_args(config: ConfigData) -> dict:
        """Get database-specific connection arguments."""
        connect_args = {}

        if "postgresql" in config.database.url:
            connect_args.update(
                {
                    "application_name": f"farmconnect_{config.app.environment}",
                    "connect_timeout": 30,
                }
            )
        elif config.database.is_sqlite:
            connect_args.update({"check_same_thread": False, "timeout": 20})
            if config.app.environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )

        return connect_args

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(self._engine, expire_on_commit=False, autoflush=True)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Commit on success, roll back and re-raise on failure."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error("Database transaction failed: {}: {}", type(e).__name__, e)
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error("Database health check failed: {}: {}", type(e).__name__, e)
            return False
