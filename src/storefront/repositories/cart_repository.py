from typing import Optional, List, Dict, Any
from sqlalchemy.engine import Connection
from storefront.repositories.base import BaseRepository
from storefront.models.cart import Cart, CartItem
from storefront.utils.date_utils import DateUtils
import logging

logger = logging.getLogger(__name__)


class CartRepository(BaseRepository[Cart]):
    """
    Repository for carts and cart lines.

    A user has at most one cart row (UNIQUE on carts.user_id) and a cart has
    at most one line per product (UNIQUE on cart_id, product_id).
    """

    @property
    def table_name(self) -> str:
        return "carts"

    def get_by_id(self, cart_id: int, conn: Optional[Connection] = None) -> Optional[Cart]:
        row = self.execute_single_query(
            "SELECT id, user_id, created_at, updated_at FROM carts WHERE id = :id",
            {"id": cart_id},
            conn=conn,
        )
        if not row:
            return None
        return self._row_to_cart(row)

    def find_cart_by_user_id(self, user_id: int, conn: Optional[Connection] = None) -> Optional[Cart]:
        """Cart header (no lines) for a user, or None if the user has none yet"""
        row = self.execute_single_query(
            "SELECT id, user_id, created_at, updated_at FROM carts WHERE user_id = :user_id",
            {"user_id": user_id},
            conn=conn,
        )
        return self._row_to_cart(row) if row else None

    def create_cart(self, user_id: int) -> int:
        """
        Insert an empty cart for the user

        Raises:
            IntegrityViolation: another request created the user's cart first
        """
        return self.execute_insert_returning_id(
            "INSERT INTO carts (user_id) VALUES (:user_id)",
            {"user_id": user_id},
        )

    def get_cart_detail(self, user_id: int, conn: Optional[Connection] = None) -> Cart:
        """
        Get the user's cart with every line joined to its current product.

        Returns a Cart with cart_id=None when the user has no cart row.
        """
        query = """
        SELECT
            c.id as cart_id,
            c.user_id,
            c.created_at,
            c.updated_at,
            ci.id as cart_item_id,
            ci.product_id,
            ci.quantity,
            p.name as product_name,
            p.price_cents as product_price_cents,
            p.image_url as product_image_url
        FROM carts c
        LEFT JOIN cart_items ci ON ci.cart_id = c.id
        LEFT JOIN products p ON p.id = ci.product_id
        WHERE c.user_id = :user_id
        ORDER BY ci.id
        """

        rows = self.execute_query(query, {"user_id": user_id}, conn=conn)

        if not rows:
            return Cart(user_id=user_id)

        return self._build_cart_from_rows(rows)

    def get_line(
        self, cart_id: int, product_id: int, conn: Optional[Connection] = None
    ) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(
            """
            SELECT id, cart_id, product_id, quantity
            FROM cart_items
            WHERE cart_id = :cart_id AND product_id = :product_id
            """,
            {"cart_id": cart_id, "product_id": product_id},
            conn=conn,
        )

    def upsert_item(self, cart_id: int, product_id: int, quantity: int) -> int:
        """
        Add quantity to the line for product_id, creating it if absent.

        A single statement, so two concurrent adds of the same product both
        land on one line with the summed quantity.

        Returns:
            ID of the affected cart line
        """
        return self.execute_insert_returning_id(
            """
            INSERT INTO cart_items (cart_id, product_id, quantity)
            VALUES (:cart_id, :product_id, :quantity)
            ON CONFLICT (cart_id, product_id)
            DO UPDATE SET quantity = cart_items.quantity + excluded.quantity,
                          updated_at = CURRENT_TIMESTAMP
            """,
            {"cart_id": cart_id, "product_id": product_id, "quantity": quantity},
        )

    def decrement_item(self, cart_item_id: int, quantity: int) -> int:
        return self.execute_command(
            """
            UPDATE cart_items
            SET quantity = quantity - :quantity, updated_at = CURRENT_TIMESTAMP
            WHERE id = :id AND quantity > :quantity
            """,
            {"id": cart_item_id, "quantity": quantity},
        )

    def delete_item(self, cart_item_id: int) -> int:
        return self.execute_command("DELETE FROM cart_items WHERE id = :id", {"id": cart_item_id})

    def clear_items(self, cart_id: int, conn: Optional[Connection] = None) -> int:
        """Remove all lines from a cart; returns number of lines removed"""
        return self.execute_command(
            "DELETE FROM cart_items WHERE cart_id = :cart_id",
            {"cart_id": cart_id},
            conn=conn,
        )

    def touch_cart(self, cart_id: int) -> int:
        return self.execute_command(
            "UPDATE carts SET updated_at = CURRENT_TIMESTAMP WHERE id = :id",
            {"id": cart_id},
        )

    def _row_to_cart(self, row: Dict[str, Any]) -> Cart:
        return Cart(
            cart_id=int(row["id"]),
            user_id=int(row["user_id"]),
            created_at=DateUtils.parse_db_timestamp(row["created_at"]),
            updated_at=DateUtils.parse_db_timestamp(row["updated_at"]),
        )

    def _build_cart_from_rows(self, rows: List[Dict[str, Any]]) -> Cart:
        """Build Cart domain object from joined rows"""
        first_row = rows[0]

        items = []
        for row in rows:
            if row["cart_item_id"] is None:  # Cart might be empty
                continue
            if row["product_name"] is None:
                logger.warning(f"Cart line {row['cart_item_id']} points at a missing product")
                continue
            items.append(CartItem(
                cart_item_id=int(row["cart_item_id"]),
                cart_id=int(row["cart_id"]),
                product_id=int(row["product_id"]),
                quantity=int(row["quantity"]),
                product_name=row["product_name"],
                product_price_cents=int(row["product_price_cents"]),
                product_image_url=row["product_image_url"],
            ))

        return Cart(
            cart_id=int(first_row["cart_id"]),
            user_id=int(first_row["user_id"]),
            items=items,
            created_at=DateUtils.parse_db_timestamp(first_row["created_at"]),
            updated_at=DateUtils.parse_db_timestamp(first_row["updated_at"]),
        )
