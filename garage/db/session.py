# garage/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from garage.db.base import Base


class Database:
    """Explicit engine + session factory handle.

    Built once at startup and handed to the SQL repositories; ``dispose()``
    closes the pool at shutdown.
    """

    def __init__(self, url: str, echo: bool = False):
        kwargs = {}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # a single shared connection keeps the in-memory database alive
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(url, future=True, echo=echo, **kwargs)
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self) -> None:
        import garage.models.garage  # noqa: F401  (registers the tables)
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
