import logging
import time

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from inventory.config import get_settings

settings = get_settings()

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """
    Create the SQLAlchemy engine.

    PostgreSQL gets a connection pool; SQLite (local runs and tests) shares a
    single connection so in-memory databases survive across sessions.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=settings.SQL_ECHO,
        )

    # Create SQLAlchemy engine with connection pooling
    return create_engine(
        database_url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        echo=settings.SQL_ECHO,
    )


engine = build_engine(settings.DATABASE_URL)


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE RESTRICT unless foreign keys are switched on
    if engine.dialect.name == "sqlite":
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@event.listens_for(engine, "before_cursor_execute")
def _start_query_timer(conn, cursor, statement, parameters, context, executemany):
    conn.info["query_start_time"] = time.perf_counter()


@event.listens_for(engine, "after_cursor_execute")
def _log_query_duration(conn, cursor, statement, parameters, context, executemany):
    started = conn.info.pop("query_start_time", None)
    if started is not None and logger.isEnabledFor(logging.DEBUG):
        duration_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            f"Query executed in {duration_ms:.1f}ms (rows={cursor.rowcount}): "
            f"{' '.join(statement.split())}"
        )


# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency to get database session.
    Yields a database session and closes it after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
