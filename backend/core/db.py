"""
PrintDesk - Core database layer.

Provides the SQLAlchemy engine, session factory, the FastAPI get_db
dependency and the unit_of_work transaction helper every mutating
service runs inside.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from core.config import settings
from core.base import Base  # Single Base instance shared across all models
from core.errors import PersistenceError

log = logging.getLogger("printdesk.db")


def _make_engine(database_url: str):
    """Build the engine. An in-memory SQLite URL shares one connection."""
    in_memory = database_url in ("sqlite://", "sqlite:///:memory:")
    engine = create_engine(
        database_url,
        echo=settings.debug,
        poolclass=StaticPool if in_memory else NullPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _sqlite_pragmas(dbapi_conn, _record):
        cur = dbapi_conn.cursor()
        if not in_memory:
            cur.execute("PRAGMA journal_mode=WAL")
        cur.execute("PRAGMA busy_timeout=5000")
        cur.close()

    return engine


engine = _make_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency for database sessions."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """Create all tables known to the declarative Base."""
    # Importing the model modules registers their tables on Base.metadata.
    import core.models  # noqa: F401
    import modules.clients.models  # noqa: F401
    import modules.expenses.models  # noqa: F401
    import modules.inventory.models  # noqa: F401
    import modules.quotes.models  # noqa: F401
    import modules.trash.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def unit_of_work(db: Session):
    """Run a block as one transaction: commit on success, roll back on error.

    Re-entrant: a nested unit_of_work on the same session joins the outer
    one, and only the outermost block commits or rolls back.
    """
    depth = db.info.get("uow_depth", 0)
    db.info["uow_depth"] = depth + 1
    try:
        yield db
        if depth == 0:
            try:
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                log.error(f"Commit failed, unit of work rolled back: {e}")
                raise PersistenceError("The change could not be saved and was rolled back") from e
    except Exception:
        if depth == 0:
            db.info.pop("after_commit", None)
            if db.in_transaction():
                db.rollback()
        raise
    finally:
        db.info["uow_depth"] = depth

    if depth == 0:
        for callback, args, kwargs in db.info.pop("after_commit", []):
            callback(*args, **kwargs)


def on_commit(db: Session, callback, *args, **kwargs) -> None:
    """Run callback after the enclosing unit_of_work commits.

    Dropped if the unit of work rolls back. Outside a unit of work the
    callback runs immediately.
    """
    if db.info.get("uow_depth", 0) == 0:
        callback(*args, **kwargs)
        return
    db.info.setdefault("after_commit", []).append((callback, args, kwargs))
