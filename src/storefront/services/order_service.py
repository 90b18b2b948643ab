from typing import List, Tuple
from storefront.db.database import Database
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.services.cart_service import CartService
from storefront.models.cart import Cart
from storefront.models.order import Order, OrderLine, OrderStatus
from storefront.core.exceptions import (
    EmptyCartError, ProductMissingError, NotFoundError, InvalidStatusTransitionError,
    StorageError, IntegrityViolation, BaseAPIException,
)
from storefront.utils.retry import storage_retry
import logging

logger = logging.getLogger(__name__)


class OrderService:
    """
    Order workflow service

    Turns a user's cart into an immutable priced order:
    cart -> priced lines -> atomic persistence -> cart clear.
    """

    def __init__(
        self,
        db: Database,
        order_repository: OrderRepository,
        product_repository: ProductRepository,
        cart_service: CartService,
        cart_clear_attempts: int = 3,
    ):
        self.db = db
        self.order_repo = order_repository
        self.product_repo = product_repository
        self.cart_service = cart_service
        self.cart_clear_attempts = cart_clear_attempts

    def create_order(self, user_id: int) -> Order:
        """
        Create an order from the user's cart

        Business Rules:
        - An absent or empty cart is rejected before anything is written
        - Every line is re-priced from the catalog, not from the cart read
        - A line whose product is gone aborts the whole order, cart untouched
        - Order and items are written in one transaction
        - The cart is cleared only after the commit; a failed clear is
          logged and the order is still returned
        """
        logger.info(f"Creating order for user {user_id}")

        cart = self.cart_service.get_cart_detail(user_id)
        if cart.is_empty:
            logger.warning(f"Order rejected for user {user_id}: cart is empty")
            raise EmptyCartError(user_id)

        lines, total_cents = self._price_lines(cart)

        with self.db.transaction() as conn:
            order_id = self.order_repo.insert_order(user_id, total_cents, conn=conn)
            for line in lines:
                try:
                    self.order_repo.insert_item(order_id, line, conn=conn)
                except IntegrityViolation:
                    # Product deleted after pricing; the FK rejects the item
                    logger.warning(f"Order rejected for user {user_id}: product {line.product_id} vanished during checkout")
                    raise ProductMissingError(line.product_id)

        logger.info(f"Order {order_id} committed for user {user_id}: {len(lines)} items, total {total_cents} cents")

        self._clear_cart(user_id, order_id)

        order = self.order_repo.get_by_id(order_id)
        if order is None:
            raise StorageError(f"Order {order_id} not readable after commit", "SELECT")
        return order

    def list_orders(self, user_id: int) -> List[Order]:
        """All orders of the user, newest first, with items"""
        orders = self.order_repo.list_by_user(user_id)
        logger.info(f"Retrieved {len(orders)} orders for user {user_id}")
        return orders

    def get_order(self, user_id: int, order_id: int) -> Order:
        """
        Get one of the user's orders

        Orders of other users are reported as not found.
        """
        order = self.order_repo.get_by_id(order_id)
        if order is None or order.user_id != user_id:
            raise NotFoundError("Order", order_id)
        return order

    def update_status(self, user_id: int, order_id: int, new_status: OrderStatus) -> Order:
        """
        Move an order along pending -> shipped -> completed

        Business Rules:
        - pending may go to shipped or completed
        - shipped may go to completed
        - completed is terminal and nothing returns to pending
        """
        order = self.get_order(user_id, order_id)

        if not order.status.can_transition_to(new_status):
            logger.warning(
                f"Rejected status change for order {order_id}: {order.status.value} -> {new_status.value}"
            )
            raise InvalidStatusTransitionError(order.status.value, new_status.value)

        if self.order_repo.update_status(order_id, order.status, new_status) == 0:
            # Status changed underneath us; report against the fresh value
            current = self.get_order(user_id, order_id).status
            raise InvalidStatusTransitionError(current.value, new_status.value)

        logger.info(f"Order {order_id} moved from {order.status.value} to {new_status.value}")
        return self.get_order(user_id, order_id)

    def _price_lines(self, cart: Cart) -> Tuple[List[OrderLine], int]:
        """Snapshot current catalog prices for every cart line"""
        lines = []
        for item in cart.items:
            product = self.product_repo.get_by_id(item.product_id)
            if product is None:
                logger.warning(f"Order rejected for user {cart.user_id}: product {item.product_id} no longer exists")
                raise ProductMissingError(item.product_id)
            lines.append(OrderLine(
                product_id=product.id,
                quantity=item.quantity,
                price_at_order_cents=product.price_cents,
            ))

        total_cents = sum(line.subtotal_cents for line in lines)
        return lines, total_cents

    def _clear_cart(self, user_id: int, order_id: int) -> None:
        clear = storage_retry(self.cart_clear_attempts)(self.cart_service.clear)
        try:
            clear(user_id)
        except BaseAPIException as e:
            logger.error(
                f"Order {order_id} created but cart of user {user_id} could not be cleared: {e.internal_message}"
            )
