import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from storefront.core.config import DatabaseConfig
from storefront.core.exceptions import StorageError
from storefront.db.base import Base
from storefront.db import models  # noqa: F401  registers tables on Base.metadata

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FOREIGN KEY clauses (and their cascades) unless asked
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(config: DatabaseConfig) -> Engine:
    if config.is_sqlite:
        kwargs = {"connect_args": {"check_same_thread": False}}
        if config.url == "sqlite://" or ":memory:" in config.url:
            # One shared connection keeps an in-memory database alive
            kwargs["poolclass"] = StaticPool
        engine = create_engine(config.url, echo=config.echo, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        config.url,
        echo=config.echo,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.pool_recycle,
        pool_pre_ping=True,
    )


class Database:
    """
    Storage handle shared by every repository.

    connect() hands out an autocommitting unit of work for a single
    statement; transaction() hands out one connection whose statements
    commit or roll back together.
    """

    def __init__(self, config: DatabaseConfig, engine: Engine = None):
        self.config = config
        self.engine = engine or build_engine(config)

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Connection that commits when the block exits cleanly"""
        with self.engine.begin() as conn:
            yield conn

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """
        All-or-nothing block.

        Any exception raised inside rolls back every statement issued on the
        yielded connection; SQLAlchemy errors are re-raised as StorageError.
        """
        try:
            with self.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error(f"Transaction rolled back: {str(e)}")
            raise StorageError(f"Transaction failed: {str(e)}", "TRANSACTION")

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {str(e)}")
            return False

    def create_schema(self) -> None:
        logger.info(f"Creating tables: {', '.join(Base.metadata.tables.keys())}")
        Base.metadata.create_all(bind=self.engine)

    def drop_schema(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()
