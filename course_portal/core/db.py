# course_portal/core/db.py - SQLAlchemy database setup, sessions and atomic units
from sqlalchemy import create_engine, text, event
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool, QueuePool
from typing import Callable, Generator, Optional, TypeVar
import logging
import time
import threading

from course_portal.core.config import settings
from course_portal.core.errors import PortalError, StorageUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DatabaseManager:
    """Database manager with connection pooling and health monitoring"""

    def __init__(self):
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None
        self._initialized = False
        self._lock = threading.Lock()

    def initialize(self):
        """Initialize database engine and session maker"""
        if self._initialized:
            return

        with self._lock:
            if self._initialized:
                return

            try:
                self.engine = self._create_engine()
                self.SessionLocal = sessionmaker(
                    autocommit=False,
                    autoflush=False,
                    bind=self.engine
                )
                self._setup_event_listeners()
                self._test_connection()

                self._initialized = True
                logger.info("Database initialized successfully")

            except Exception as e:
                logger.error(f"Failed to initialize database: {e}")
                raise

    def _create_engine(self) -> Engine:
        """Create SQLAlchemy engine for SQLite or PostgreSQL"""
        engine_args = {
            "url": settings.DATABASE_URL,
            "echo": settings.DATABASE_ECHO,
        }

        if settings.is_sqlite:
            engine_args.update({
                "poolclass": StaticPool,
                "connect_args": {
                    "check_same_thread": False,
                    "timeout": 30,  # seconds to wait on SQLite write locks
                },
            })
        else:
            connect_args = {
                "connect_timeout": 10,
                "application_name": f"course_portal_{settings.ENV}",
                "options": "-c timezone=UTC",
            }
            if settings.DATABASE_URL.startswith("postgresql+psycopg://"):
                # psycopg 3 only
                connect_args["prepare_threshold"] = 5
            engine_args.update({
                "poolclass": QueuePool,
                "pool_size": settings.DATABASE_POOL_SIZE,
                "max_overflow": settings.DATABASE_MAX_OVERFLOW,
                "pool_timeout": settings.DATABASE_POOL_TIMEOUT,
                "pool_recycle": settings.DATABASE_POOL_RECYCLE,
                "pool_pre_ping": True,
                "connect_args": connect_args,
            })

        return create_engine(**engine_args)

    def _setup_event_listeners(self):
        @event.listens_for(self.engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            if settings.is_sqlite:
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute("PRAGMA synchronous=NORMAL")
                cursor.close()

        @event.listens_for(self.engine, "before_cursor_execute")
        def receive_before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            if settings.is_development:
                context._query_start_time = time.time()

        @event.listens_for(self.engine, "after_cursor_execute")
        def receive_after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            if settings.is_development and hasattr(context, "_query_start_time"):
                total = time.time() - context._query_start_time
                if total > 0.1:
                    logger.warning(f"Slow query ({total:.3f}s): {statement[:100]}...")

    def _test_connection(self):
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
                logger.info("Database connection test successful")
        except Exception as e:
            logger.error(f"Database connection test failed: {e}")
            raise

    def get_session(self) -> Generator[Session, None, None]:
        """Yield a session that is rolled back on error and always closed"""
        if not self._initialized:
            self.initialize()

        session = self.SessionLocal()
        try:
            yield session
        except Exception as e:
            session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        finally:
            session.close()

    def health_check(self) -> dict:
        try:
            if not self._initialized:
                self.initialize()
            start_time = time.time()
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {
                "status": "healthy",
                "response_time_ms": round((time.time() - start_time) * 1000, 2),
            }
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {"status": "unhealthy", "error": str(e)}

    def close(self):
        """Close database connections and cleanup"""
        if self.engine:
            self.engine.dispose()
            logger.info("Database connections closed")


db_manager = DatabaseManager()


def _is_transient(exc: Exception) -> bool:
    """Connection loss, deadlock and serialization failures are worth one more try"""
    if isinstance(exc, OperationalError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


def run_atomic(db: Session, work: Callable[[Session], T], *, name: str = "atomic unit") -> T:
    """
    Execute ``work`` as one atomic unit and commit it.

    Business-rule errors roll back and propagate untouched. Transient storage
    failures roll back and re-run ``work`` from scratch, up to
    DB_TRANSIENT_RETRIES extra times, before surfacing StorageUnavailableError.

    Args:
        db: Session the unit runs on
        work: Callable doing all reads and writes of the unit
        name: Label used in log lines

    Returns:
        Whatever ``work`` returned
    """
    attempts = settings.DB_TRANSIENT_RETRIES + 1
    for attempt in range(1, attempts + 1):
        try:
            result = work(db)
            db.commit()
            return result
        except PortalError:
            db.rollback()
            raise
        except DBAPIError as e:
            db.rollback()
            if not _is_transient(e):
                raise
            if attempt < attempts:
                logger.warning(f"Transient storage failure in {name} (attempt {attempt}/{attempts}), retrying: {e}")
                continue
            logger.error(f"{name} failed after {attempts} attempts: {e}")
            raise StorageUnavailableError("Storage is temporarily unavailable, please try again") from e
        except Exception:
            db.rollback()
            raise
    raise AssertionError("unreachable")


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency to get database session.

    Usage in FastAPI:
        @router.get("/courses")
        def list_courses(db: Session = Depends(get_db)):
            ...
    """
    yield from db_manager.get_session()


def get_engine() -> Engine:
    """Get SQLAlchemy engine instance"""
    if not db_manager._initialized:
        db_manager.initialize()
    return db_manager.engine


def health_check() -> dict:
    return db_manager.health_check()


__all__ = [
    "get_db",
    "get_engine",
    "health_check",
    "run_atomic",
    "db_manager",
]
