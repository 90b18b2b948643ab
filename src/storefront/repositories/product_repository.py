from typing import Optional, List, Dict, Any, Tuple
from sqlalchemy.engine import Connection
from storefront.repositories.base import BaseRepository
from storefront.models.product import Product
from storefront.utils.date_utils import DateUtils
import logging

logger = logging.getLogger(__name__)


class ProductRepository(BaseRepository[Product]):
    """Repository for catalog products"""

    # Columns a partial update may touch. Anything else is rejected upstream
    # and never reaches the SQL text.
    UPDATABLE_FIELDS = ("name", "description", "price_cents", "stock", "image_url", "category_id")

    _COLUMNS = """
        id, name, description, price_cents, stock, image_url, category_id,
        created_at, updated_at
    """

    @property
    def table_name(self) -> str:
        return "products"

    def get_by_id(self, product_id: int, conn: Optional[Connection] = None) -> Optional[Product]:
        """Fetch the current catalog row, or None if the product does not exist"""
        row = self.execute_single_query(
            f"SELECT {self._COLUMNS} FROM products WHERE id = :id",
            {"id": product_id},
            conn=conn,
        )
        return self._row_to_product(row) if row else None

    def list_products(
        self,
        limit: int,
        after: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> Tuple[List[Product], bool]:
        """
        List products ordered by ID with cursor-based pagination

        Returns:
            (products, has_more)
        """
        query = f"SELECT {self._COLUMNS} FROM products WHERE 1=1"
        params: Dict[str, Any] = {"limit": limit + 1}

        if after is not None:
            query += " AND id > :after"
            params["after"] = after
        if category_id is not None:
            query += " AND category_id = :category_id"
            params["category_id"] = category_id

        query += " ORDER BY id LIMIT :limit"

        rows = self.execute_query(query, params)
        has_more = len(rows) > limit
        return [self._row_to_product(r) for r in rows[:limit]], has_more

    def create(
        self,
        name: str,
        price_cents: int,
        stock: int,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        category_id: Optional[int] = None,
    ) -> int:
        return self.execute_insert_returning_id(
            """
            INSERT INTO products (name, description, price_cents, stock, image_url, category_id)
            VALUES (:name, :description, :price_cents, :stock, :image_url, :category_id)
            """,
            {
                "name": name,
                "description": description,
                "price_cents": price_cents,
                "stock": stock,
                "image_url": image_url,
                "category_id": category_id,
            },
        )

    def update(self, product_id: int, changes: Dict[str, Any]) -> int:
        """
        Apply a partial update

        Returns:
            Number of affected rows (0 when the product does not exist)
        """
        unknown = set(changes) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields not updatable: {', '.join(sorted(unknown))}")
        if not changes:
            return 0

        # Column names come from the whitelist, values are bound
        assignments = ", ".join(f"{field} = :{field}" for field in self.UPDATABLE_FIELDS if field in changes)
        params = {field: changes[field] for field in self.UPDATABLE_FIELDS if field in changes}
        params["id"] = product_id

        return self.execute_command(
            f"UPDATE products SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = :id",
            params,
        )

    def delete(self, product_id: int) -> int:
        return self.execute_command("DELETE FROM products WHERE id = :id", {"id": product_id})

    def _row_to_product(self, row: Dict[str, Any]) -> Product:
        return Product(
            id=int(row["id"]),
            name=row["name"],
            description=row["description"],
            price_cents=int(row["price_cents"]),
            stock=int(row["stock"]),
            image_url=row["image_url"],
            category_id=int(row["category_id"]) if row["category_id"] is not None else None,
            created_at=DateUtils.parse_db_timestamp(row["created_at"]),
            updated_at=DateUtils.parse_db_timestamp(row["updated_at"]),
        )
