# ficsync/sa/database.py
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool, QueuePool

from ficsync.config import load_settings
from ficsync.sa.models import Base

# Seconds a writer waits on a locked sqlite file before failing
SQLITE_BUSY_TIMEOUT = 30


def engine_options(url: str) -> Dict[str, Any]:
    """Default create_engine arguments for a database URL.

    Download jobs and the periodic update check write from worker threads,
    so sqlite connections are not pinned to the thread that opened them and
    every session gets a fresh connection.
    """
    if make_url(url).get_backend_name() == "sqlite":
        return {
            "connect_args": {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},
            "poolclass": NullPool,
        }
    return {"poolclass": QueuePool, "pool_size": 5, "max_overflow": 10}


class Database:
    """Owns the engine and hands out sessions for the local library."""

    def __init__(self, url: Optional[str] = None, **engine_kwargs):
        """
        Args:
            url: SQLAlchemy URL of the library, defaults to the configured database_url
            engine_kwargs: Overrides for the defaults from engine_options
        """
        self.url = url or load_settings().database_url
        options = engine_options(self.url)
        options.update(engine_kwargs)
        self.engine = create_engine(self.url, **options)
        self._SessionFactory = sessionmaker(bind=self.engine, autoflush=False)

    @property
    def is_sqlite(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    @contextmanager
    def get_db(self) -> Iterator[Session]:
        """Session committed on exit and rolled back if the block raises"""
        session: Session = self._SessionFactory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> None:
        """Create any missing library tables"""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        return self._SessionFactory()

    def dispose(self) -> None:
        self.engine.dispose()
