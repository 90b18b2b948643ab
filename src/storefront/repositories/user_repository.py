from typing import Optional, Dict, Any
from sqlalchemy.engine import Connection
from storefront.repositories.base import BaseRepository
from storefront.models.user import User
from storefront.utils.date_utils import DateUtils


class UserRepository(BaseRepository[User]):
    """Repository for registered users"""

    UPDATABLE_FIELDS = ("email", "hashed_password")

    @property
    def table_name(self) -> str:
        return "users"

    def get_by_id(self, user_id: int, conn: Optional[Connection] = None) -> Optional[User]:
        row = self.execute_single_query(
            "SELECT id, email, hashed_password, created_at, updated_at FROM users WHERE id = :id",
            {"id": user_id},
            conn=conn,
        )
        return self._row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        row = self.execute_single_query(
            "SELECT id, email, hashed_password, created_at, updated_at FROM users WHERE email = :email",
            {"email": email},
        )
        return self._row_to_user(row) if row else None

    def create(self, email: str, hashed_password: str) -> int:
        return self.execute_insert_returning_id(
            "INSERT INTO users (email, hashed_password) VALUES (:email, :hashed_password)",
            {"email": email, "hashed_password": hashed_password},
        )

    def update(self, user_id: int, changes: Dict[str, Any]) -> int:
        unknown = set(changes) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields not updatable: {', '.join(sorted(unknown))}")
        if not changes:
            return 0

        assignments = ", ".join(f"{field} = :{field}" for field in self.UPDATABLE_FIELDS if field in changes)
        params = {field: changes[field] for field in self.UPDATABLE_FIELDS if field in changes}
        params["id"] = user_id

        return self.execute_command(
            f"UPDATE users SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = :id",
            params,
        )

    def delete(self, user_id: int) -> int:
        return self.execute_command("DELETE FROM users WHERE id = :id", {"id": user_id})

    def _row_to_user(self, row: Dict[str, Any]) -> User:
        return User(
            id=int(row["id"]),
            email=row["email"],
            hashed_password=row["hashed_password"],
            created_at=DateUtils.parse_db_timestamp(row["created_at"]),
            updated_at=DateUtils.parse_db_timestamp(row["updated_at"]),
        )
