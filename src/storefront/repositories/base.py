from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, List, Any, Dict
from contextlib import contextmanager
from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from storefront.core.exceptions import StorageError, IntegrityViolation
from storefront.db.database import Database
import logging

T = TypeVar('T')

logger = logging.getLogger(__name__)


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.
    Implements Repository Pattern for clean separation of data access logic.

    Every helper accepts an optional ``conn``. Without one, the statement runs
    on its own connection and commits immediately; with one (typically from
    ``Database.transaction()``), it joins that unit of work and the caller
    decides when it commits.
    """

    def __init__(self, db: Database):
        self.db = db

    @contextmanager
    def get_db_connection(self, conn: Optional[Connection] = None):
        """
        Yield the caller's connection, or a fresh one that commits on exit.

        Connection and commit failures surface inside the execute_* helpers,
        which translate them into StorageError.
        """
        if conn is not None:
            yield conn
            return
        with self.db.connect() as new_conn:
            yield new_conn

    def execute_query(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None,
        conn: Optional[Connection] = None,
    ) -> List[Dict[str, Any]]:
        """
        Execute SELECT query and return results as list of dictionaries

        Args:
            query: SQL query string
            params: Query parameters
            conn: Connection of an enclosing transaction, if any

        Returns:
            List of row dictionaries

        Raises:
            StorageError: When query execution fails
        """
        try:
            with self.get_db_connection(conn) as c:
                result = c.execute(text(query), params or {})
                return [dict(row._mapping) for row in result]
        except SQLAlchemyError as e:
            logger.error(f"Query execution failed: {query}, Error: {str(e)}")
            raise StorageError(f"Query execution failed: {str(e)}", "SELECT")

    def execute_single_query(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None,
        conn: Optional[Connection] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Execute query expecting single result

        Returns:
            Single row dictionary or None if not found
        """
        try:
            with self.get_db_connection(conn) as c:
                result = c.execute(text(query), params or {}).first()
                return dict(result._mapping) if result else None
        except SQLAlchemyError as e:
            logger.error(f"Single query execution failed: {query}, Error: {str(e)}")
            raise StorageError(f"Single query execution failed: {str(e)}", "SELECT")

    def execute_command(
        self,
        command: str,
        params: Optional[Dict[str, Any]] = None,
        conn: Optional[Connection] = None,
    ) -> int:
        """
        Execute INSERT/UPDATE/DELETE command

        Returns:
            Number of affected rows
        """
        try:
            with self.get_db_connection(conn) as c:
                result = c.execute(text(command), params or {})
                return result.rowcount
        except IntegrityError as e:
            logger.warning(f"Integrity constraint violation: {command}, Error: {str(e)}")
            raise IntegrityViolation(f"Data integrity violation: {str(e)}", "WRITE")
        except SQLAlchemyError as e:
            logger.error(f"Command execution failed: {command}, Error: {str(e)}")
            raise StorageError(f"Command execution failed: {str(e)}", "WRITE")

    def execute_scalar(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None,
        conn: Optional[Connection] = None,
    ) -> Any:
        """
        Execute query returning single scalar value (COUNT, SUM, etc.)
        """
        try:
            with self.get_db_connection(conn) as c:
                return c.execute(text(query), params or {}).scalar()
        except SQLAlchemyError as e:
            logger.error(f"Scalar query execution failed: {query}, Error: {str(e)}")
            raise StorageError(f"Scalar query execution failed: {str(e)}", "SELECT")

    def execute_insert_returning_id(
        self,
        command: str,
        params: Optional[Dict[str, Any]] = None,
        conn: Optional[Connection] = None,
    ) -> int:
        """
        Execute INSERT command and return the generated ID
        """
        try:
            with self.get_db_connection(conn) as c:
                result = c.execute(text(command + " RETURNING id"), params or {})
                return int(result.scalar_one())
        except IntegrityError as e:
            logger.warning(f"Insert with integrity violation: {command}, Error: {str(e)}")
            raise IntegrityViolation(f"Data integrity violation: {str(e)}", "INSERT")
        except SQLAlchemyError as e:
            logger.error(f"Insert execution failed: {command}, Error: {str(e)}")
            raise StorageError(f"Insert execution failed: {str(e)}", "INSERT")

    def exists(self, entity_id: int, conn: Optional[Connection] = None) -> bool:
        """Check if entity exists by ID"""
        query = f"SELECT 1 FROM {self.table_name} WHERE id = :id"
        result = self.execute_scalar(query, {"id": entity_id}, conn=conn)
        return result is not None

    # Abstract methods that concrete repositories must implement
    @abstractmethod
    def get_by_id(self, entity_id: int, conn: Optional[Connection] = None) -> Optional[T]:
        """Get entity by ID"""
        pass

    @property
    @abstractmethod
    def table_name(self) -> str:
        """Table name for the entity"""
        pass
