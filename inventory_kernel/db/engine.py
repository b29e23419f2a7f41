"""
Module: inventory_kernel.db.engine
Responsibility: Owns the process-wide SQLAlchemy engine and session factory
    and hands out sessions to services, scripts and tests.
Architecture position: Kernel > DB.  Imports only db/base.py and kernel
    logging, except ``create_tables`` which loads the module ORM registry
    so ``Base.metadata`` knows every inventory table.

Invariants enforced:
    - PostgreSQL: QueuePool with pre-ping, READ COMMITTED.  Concurrent code
      allocation is arbitrated by ``uq_inventory_assets_code`` and the
      registration service's retry loop, not by isolation level.
    - SQLite: one StaticPool connection shared across threads, so an
      in-memory database survives between sessions.
    - Sessions never expire attributes on commit; returned ORM rows stay
      readable after the service commits.

Failure modes:
    - RuntimeError from any accessor called before ``init_engine_from_url``.
"""

from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from inventory_kernel.db.base import Base
from inventory_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

_NOT_INITIALIZED = "Database engine not initialized; call init_engine_from_url() first"

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def _engine_options(backend: str, pool: dict[str, Any]) -> dict[str, Any]:
    if backend == "sqlite":
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "poolclass": QueuePool,
        "isolation_level": "READ COMMITTED",
        **pool,
    }


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    *,
    pool_size: int = 10,
    max_overflow: int = 10,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
    pool_pre_ping: bool = True,
) -> Engine:
    """
    Create the engine and session factory for ``database_url``.

    Calling again replaces the previous engine without disposing it; use
    ``reset_engine()`` for an orderly switch.  Pool arguments apply to
    server databases only.
    """
    global _engine, _SessionFactory

    backend = make_url(database_url).get_backend_name()
    pool = {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_timeout": pool_timeout,
        "pool_recycle": pool_recycle,
        "pool_pre_ping": pool_pre_ping,
    }
    _engine = create_engine(database_url, echo=echo, **_engine_options(backend, pool))
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    configure_logging()
    logger.info("engine_initialized", extra={
        "backend": backend,
        "pooled": backend != "sqlite",
        "echo": echo,
    })
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """Session factory, for callers that open one session per thread."""
    if _SessionFactory is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _SessionFactory


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Unit of work: commit on success, roll back and re-raise on error.

    The session is closed either way.
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("session_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Create every inventory table that does not exist yet."""
    from inventory_modules._orm_registry import import_all_orm_models

    import_all_orm_models()
    Base.metadata.create_all(get_engine())
    logger.info("tables_created", extra={"tables": sorted(Base.metadata.tables)})


def drop_tables() -> None:
    """Drop every inventory table.  Test and local tooling only."""
    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None
