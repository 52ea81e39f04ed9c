import contextlib
import logging
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from database.models import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the engine and session factory for one process.

    Constructed by AppContext at startup and disposed on shutdown.
    """

    def __init__(self, url: Optional[str] = None, engine: Optional[Engine] = None, echo: bool = False):
        if engine is None:
            if url is None:
                raise ValueError("Either url or engine is required")
            engine = create_engine(url, echo=echo, pool_pre_ping=True)
        self.engine = engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine)

    def create_all(self) -> None:
        """Create missing tables (see database.init_db for the full bootstrap)."""
        Base.metadata.create_all(self.engine)

    @contextlib.contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")
