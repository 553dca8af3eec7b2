from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Iterator, Optional
from contextlib import contextmanager
import logging

from pydantic import SecretStr
from pydantic_settings import BaseSettings
from .base import StorageAdapter
from .models import Base

logger = logging.getLogger(__name__)


class PostgresConfig(BaseSettings):
    """Connection settings for the scheduling database."""
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: SecretStr = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "crewplan"
    POSTGRES_POOL_SIZE: int = 5
    POSTGRES_MAX_OVERFLOW: int = 10
    POSTGRES_ECHO: bool = False

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def url(self) -> URL:
        return URL.create(
            "postgresql",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD.get_secret_value(),
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            database=self.POSTGRES_DB,
        )

    @property
    def connection_string(self) -> str:
        # Password is escaped, so credentials with '@' or '/' survive
        return self.url.render_as_string(hide_password=False)


class PostgresAdapter(StorageAdapter):
    """
    Pooled SQLAlchemy engine for the scheduling tables.

    ``from_engine`` wraps an existing engine (SQLite in tests, a shared
    engine in a host application) instead of building one from config.
    """

    def __init__(self, config: Optional[PostgresConfig] = None):
        self.config = config or PostgresConfig()
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @classmethod
    def from_engine(cls, engine: Engine, config: Optional[PostgresConfig] = None) -> "PostgresAdapter":
        adapter = cls(config)
        adapter._bind(engine)
        return adapter

    def _bind(self, engine: Engine) -> None:
        self._engine = engine
        # Rows are converted to domain objects after commit
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    def connect(self) -> None:
        if self._engine:
            return

        logger.info(f"Connecting to scheduling database {self.config.POSTGRES_DB} at {self.config.POSTGRES_HOST}:{self.config.POSTGRES_PORT}")
        try:
            engine = create_engine(
                self.config.connection_string,
                pool_size=self.config.POSTGRES_POOL_SIZE,
                max_overflow=self.config.POSTGRES_MAX_OVERFLOW,
                pool_pre_ping=True,
                echo=self.config.POSTGRES_ECHO,
            )
        except Exception as e:
            logger.error(f"Could not create engine for {self.config.POSTGRES_DB}: {e}")
            raise
        self._bind(engine)

    def close(self) -> None:
        if not self._engine:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Scheduling database pool disposed.")

    def health_check(self) -> bool:
        if not self._engine:
            return False
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("scheduling database unreachable")
            return False

    def create_tables(self) -> None:
        if not self._engine:
            raise ConnectionError("Scheduling database is not connected. Call connect() first.")
        Base.metadata.create_all(self._engine)

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        if not self._session_factory:
            raise ConnectionError("Scheduling database is not connected. Call connect() first.")

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
