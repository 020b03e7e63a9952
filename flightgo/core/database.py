import logging
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .circuit_breaker import CircuitBreaker
from .models import Base

logger = logging.getLogger(__name__)


class Database:
    """Storage client owning the engine and the session factory.

    Constructed once per application, opened at startup with ``connect()``
    and closed at shutdown with ``disconnect()``. Every session is checked
    out through the store circuit breaker so repeated connection failures
    stop hammering the backend.
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        failure_threshold: int = 3,
        recovery_timeout: int = 30,
    ):
        self.url = url
        self.echo = echo
        self.breaker = CircuitBreaker(
            "database",
            failure_threshold=failure_threshold,
            recovery_timeout=recovery_timeout,
        )
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_connected(self) -> bool:
        return self.engine is not None

    def _engine_options(self) -> dict:
        if not self.url.startswith("sqlite"):
            return {"pool_pre_ping": True}

        options = {"connect_args": {"check_same_thread": False}}
        if self.url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    def connect(self) -> None:
        if self.engine is not None:
            return

        logger.info("Connecting to database %s", self.engine_url_for_logs)
        engine = create_engine(self.url, echo=self.echo, **self._engine_options())
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

        Base.metadata.create_all(bind=engine)
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        logger.info("Database ready")

    def disconnect(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("Database connection closed")

    def _open_session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        session = self._session_factory()
        try:
            session.connection()
        except Exception:
            session.close()
            raise
        return session

    def session(self) -> Session:
        return self.breaker.call(self._open_session)

    def ping(self) -> None:
        def _ping():
            if self.engine is None:
                raise RuntimeError("Database is not connected")
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))

        self.breaker.call(_ping)

    @property
    def engine_url_for_logs(self) -> str:
        # Hide credentials
        if "@" in self.url:
            scheme, rest = self.url.split("://", 1)
            return f"{scheme}://***@{rest.split('@', 1)[1]}"
        return self.url
