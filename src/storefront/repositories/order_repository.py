from typing import Optional, List, Dict, Any
from sqlalchemy.engine import Connection
from storefront.repositories.base import BaseRepository
from storefront.models.order import Order, OrderItem, OrderLine, OrderStatus
from storefront.utils.date_utils import DateUtils
import logging

logger = logging.getLogger(__name__)


class OrderRepository(BaseRepository[Order]):
    """
    Repository for orders and their items.

    Order items keep product_id as a nullable reference: deleting a product
    sets it to NULL, and reads surface the product name as None.
    """

    _SELECT_WITH_ITEMS = """
        SELECT
            o.id as order_id,
            o.user_id,
            o.status,
            o.total_cents,
            o.created_at,
            o.updated_at,
            oi.id as order_item_id,
            oi.product_id,
            oi.quantity,
            oi.price_at_order_cents,
            p.name as product_name,
            p.image_url as product_image_url
        FROM orders o
        LEFT JOIN order_items oi ON oi.order_id = o.id
        LEFT JOIN products p ON p.id = oi.product_id
    """

    @property
    def table_name(self) -> str:
        return "orders"

    def insert_order(self, user_id: int, total_cents: int, conn: Connection) -> int:
        """Insert an order header as pending; must run inside a transaction"""
        return self.execute_insert_returning_id(
            """
            INSERT INTO orders (user_id, status, total_cents)
            VALUES (:user_id, :status, :total_cents)
            """,
            {"user_id": user_id, "status": OrderStatus.PENDING.value, "total_cents": total_cents},
            conn=conn,
        )

    def insert_item(self, order_id: int, line: OrderLine, conn: Connection) -> int:
        return self.execute_insert_returning_id(
            """
            INSERT INTO order_items (order_id, product_id, quantity, price_at_order_cents)
            VALUES (:order_id, :product_id, :quantity, :price_at_order_cents)
            """,
            {
                "order_id": order_id,
                "product_id": line.product_id,
                "quantity": line.quantity,
                "price_at_order_cents": line.price_at_order_cents,
            },
            conn=conn,
        )

    def get_by_id(self, order_id: int, conn: Optional[Connection] = None) -> Optional[Order]:
        """Get order with all items"""
        rows = self.execute_query(
            self._SELECT_WITH_ITEMS + " WHERE o.id = :order_id ORDER BY oi.id",
            {"order_id": order_id},
            conn=conn,
        )
        if not rows:
            return None
        return self._build_orders_from_rows(rows)[0]

    def list_by_user(self, user_id: int) -> List[Order]:
        """All orders of a user with their items, newest first"""
        rows = self.execute_query(
            self._SELECT_WITH_ITEMS
            + " WHERE o.user_id = :user_id ORDER BY o.created_at DESC, o.id DESC, oi.id",
            {"user_id": user_id},
        )
        return self._build_orders_from_rows(rows)

    def update_status(self, order_id: int, current: OrderStatus, new_status: OrderStatus) -> int:
        """
        Move an order from current to new_status.

        The current status is part of the WHERE clause, so a concurrent
        change makes this affect 0 rows instead of skipping a state.
        """
        return self.execute_command(
            """
            UPDATE orders
            SET status = :new_status, updated_at = CURRENT_TIMESTAMP
            WHERE id = :id AND status = :current
            """,
            {"id": order_id, "current": current.value, "new_status": new_status.value},
        )

    def _build_orders_from_rows(self, rows: List[Dict[str, Any]]) -> List[Order]:
        """Group joined rows into orders, keeping row order"""
        orders: Dict[int, Order] = {}

        for row in rows:
            order_id = int(row["order_id"])
            order = orders.get(order_id)
            if order is None:
                order = Order(
                    id=order_id,
                    user_id=int(row["user_id"]),
                    status=OrderStatus(row["status"]),
                    total_cents=int(row["total_cents"]),
                    created_at=DateUtils.parse_db_timestamp(row["created_at"]),
                    updated_at=DateUtils.parse_db_timestamp(row["updated_at"]),
                )
                orders[order_id] = order

            if row["order_item_id"] is not None:
                order.items.append(OrderItem(
                    order_item_id=int(row["order_item_id"]),
                    order_id=order_id,
                    product_id=int(row["product_id"]) if row["product_id"] is not None else None,
                    quantity=int(row["quantity"]),
                    price_at_order_cents=int(row["price_at_order_cents"]),
                    product_name=row["product_name"],
                    product_image_url=row["product_image_url"],
                ))

        return list(orders.values())
