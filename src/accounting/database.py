"""
Database Connection and Session Management

SQLAlchemy engine with connection pooling and scoped sessions for the
accounting writer.

CONNECTION POOLING:
- Pool size: 5 connections (DB_POOL_SIZE)
- Max overflow: 10 additional connections under load
- Recycle time: 3600s to prevent stale connections
- Pre-ping: Test connection health before use

SESSION LIFECYCLE (get_session):
1. Check a connection out of the pool
2. Yield the session to the caller
3. Commit on success, roll back and re-raise on error
4. Close the session (connection returns to the pool) on every exit path
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from src.accounting.config import AccountingConfig

# ==============================================================================
# DATABASE ENGINE SETUP
# ==============================================================================


class DatabaseManager:
    """
    Manages SQLAlchemy database connections with pooling.

    Attributes:
        engine: SQLAlchemy engine with connection pool
        SessionLocal: Session factory for creating database sessions
    """

    def __init__(self, config: AccountingConfig, logger: Optional[logging.Logger] = None):
        """
        Initialize database manager with connection pooling.

        Args:
            config: Accounting configuration with the store connection string
            logger: Logger to use (defaults to this module's logger)

        Raises:
            ConfigurationError: If POSTGRES_CONNECTION_STRING is missing or invalid
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        database_url = config.get_database_url()

        self.engine = self._create_engine(database_url)

        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )

        self.logger.info(
            "Database manager initialized",
            extra={
                "database_url": database_url.render_as_string(hide_password=True),
                "pool_size": config.db_pool_size,
                "pool_class": "QueuePool",
            },
        )

    def _create_engine(self, database_url) -> Engine:
        return create_engine(
            database_url,
            poolclass=QueuePool,
            pool_size=self.config.db_pool_size,
            max_overflow=10,
            pool_recycle=3600,
            pool_pre_ping=True,
            echo=False,
        )

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions with automatic cleanup.

        Yields:
            SQLAlchemy session

        Usage:
            >>> with db_manager.get_session() as session:
            ...     session.execute(insert(orders_table).values(**row))
            # Committed and returned to the pool here
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            self.logger.debug(
                "Database error, transaction rolled back",
                extra={"error_type": type(e).__name__},
            )
            raise
        except Exception as e:
            session.rollback()
            self.logger.debug(
                "Application error, transaction rolled back",
                extra={"error_type": type(e).__name__},
            )
            raise
        finally:
            # Always close session (returns connection to pool)
            session.close()

    def check_health(self) -> bool:
        """
        Check database connection health with ``SELECT 1``.

        Returns:
            True if database is accessible, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
                self.logger.debug("Database health check passed")
                return True
        except SQLAlchemyError as e:
            self.logger.error(
                "Database health check failed",
                exc_info=True,
                extra={"error": str(e)},
            )
            return False

    def close(self) -> None:
        """Close all database connections in pool."""
        self.logger.info("Closing database connection pool")
        self.engine.dispose()


# ==============================================================================
# DATABASE INITIALIZATION
# ==============================================================================


def init_database(config: AccountingConfig, logger: Optional[logging.Logger] = None) -> DatabaseManager:
    """
    Initialize database manager and probe the connection.

    An unreachable store does not stop startup: each write then fails on its
    own as PersistError until the store comes back.

    Args:
        config: Accounting configuration
        logger: Logger to use (defaults to this module's logger)

    Returns:
        DatabaseManager instance

    Raises:
        ConfigurationError: If POSTGRES_CONNECTION_STRING is missing or invalid
    """
    logger = logger or logging.getLogger(__name__)

    logger.info("Initializing database connection...")

    db_manager = DatabaseManager(config, logger=logger)

    if db_manager.check_health():
        logger.info("Database connection successful")
    else:
        logger.warning("Database not reachable at startup, orders will fail to save until it is")

    return db_manager


# ==============================================================================
# SQLALCHEMY EVENT LISTENERS
# ==============================================================================


@event.listens_for(Engine, "checkout")
def receive_checkout(dbapi_conn, connection_record, connection_proxy):
    """Debug-log connection checkout from the pool."""
    logging.getLogger(__name__).debug("Connection checked out from pool")


@event.listens_for(Engine, "checkin")
def receive_checkin(dbapi_conn, connection_record):
    """Debug-log connection return to the pool."""
    logging.getLogger(__name__).debug("Connection returned to pool")
