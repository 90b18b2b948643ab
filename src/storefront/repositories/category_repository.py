from typing import Optional, List, Dict, Any
from sqlalchemy.engine import Connection
from storefront.repositories.base import BaseRepository
from storefront.models.product import Category
from storefront.utils.date_utils import DateUtils


class CategoryRepository(BaseRepository[Category]):
    """Repository for product categories"""

    @property
    def table_name(self) -> str:
        return "categories"

    def get_by_id(self, category_id: int, conn: Optional[Connection] = None) -> Optional[Category]:
        row = self.execute_single_query(
            "SELECT id, name, created_at, updated_at FROM categories WHERE id = :id",
            {"id": category_id},
            conn=conn,
        )
        return self._row_to_category(row) if row else None

    def get_by_name(self, name: str) -> Optional[Category]:
        row = self.execute_single_query(
            "SELECT id, name, created_at, updated_at FROM categories WHERE name = :name",
            {"name": name},
        )
        return self._row_to_category(row) if row else None

    def list_all(self) -> List[Category]:
        rows = self.execute_query(
            "SELECT id, name, created_at, updated_at FROM categories ORDER BY name"
        )
        return [self._row_to_category(r) for r in rows]

    def create(self, name: str) -> int:
        return self.execute_insert_returning_id(
            "INSERT INTO categories (name) VALUES (:name)", {"name": name}
        )

    def rename(self, category_id: int, name: str) -> int:
        return self.execute_command(
            "UPDATE categories SET name = :name, updated_at = CURRENT_TIMESTAMP WHERE id = :id",
            {"id": category_id, "name": name},
        )

    def delete(self, category_id: int) -> int:
        return self.execute_command("DELETE FROM categories WHERE id = :id", {"id": category_id})

    def _row_to_category(self, row: Dict[str, Any]) -> Category:
        return Category(
            id=int(row["id"]),
            name=row["name"],
            created_at=DateUtils.parse_db_timestamp(row["created_at"]),
            updated_at=DateUtils.parse_db_timestamp(row["updated_at"]),
        )
