from typing import Optional
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.models.cart import Cart
from storefront.core.exceptions import NotFoundError, ValidationError, IntegrityViolation
import logging

logger = logging.getLogger(__name__)


class CartService:
    """
    Shopping cart business logic service

    Responsibilities:
    - Keep exactly one cart per user, created lazily
    - Merge repeated adds of a product into one line
    - Partial and full removal of lines
    """

    def __init__(self, cart_repository: CartRepository, product_repository: ProductRepository):
        self.cart_repo = cart_repository
        self.product_repo = product_repository

    def get_or_create_cart(self, user_id: int) -> Cart:
        """
        Return the user's cart row, creating it on first use

        Business Rules:
        - Idempotent: repeated calls return the same cart
        - A concurrent creation that wins the UNIQUE(user_id) race is
          re-read, never reported to the caller
        """
        cart = self.cart_repo.find_cart_by_user_id(user_id)
        if cart:
            return cart

        try:
            cart_id = self.cart_repo.create_cart(user_id)
            logger.info(f"Created cart {cart_id} for user {user_id}")
        except IntegrityViolation as e:
            logger.info(f"Cart for user {user_id} was created concurrently, re-reading: {e.internal_message}")

        cart = self.cart_repo.find_cart_by_user_id(user_id)
        if cart is None:
            # Insert failed for a reason other than a concurrent winner (e.g. unknown user)
            raise NotFoundError("User", user_id)
        return cart

    def get_cart_detail(self, user_id: int) -> Cart:
        """
        Get user's cart with current product details

        A user without a cart gets an empty Cart with cart_id=None.
        """
        cart = self.cart_repo.get_cart_detail(user_id)
        logger.info(f"Retrieved cart {cart.cart_id} for user {user_id} with {cart.total_items} items")
        return cart

    def add_item(self, user_id: int, product_id: int, quantity: int) -> Cart:
        """
        Add quantity of a product to the user's cart

        Business Rules:
        - Quantity must be positive
        - Product must exist
        - An existing line for the product is incremented, not duplicated
        """
        logger.info(f"Adding item to cart - user: {user_id}, product: {product_id}, quantity: {quantity}")

        if quantity is None or quantity <= 0:
            raise ValidationError(
                "Quantity must be a positive integer",
                field_errors=[{"field": "quantity", "message": "must be greater than 0"}],
            )

        if not self.product_repo.exists(product_id):
            logger.warning(f"Add to cart rejected, product {product_id} not found")
            raise NotFoundError("Product", product_id)

        cart = self.get_or_create_cart(user_id)

        try:
            cart_item_id = self.cart_repo.upsert_item(cart.cart_id, product_id, quantity)
        except IntegrityViolation:
            # Product deleted between the existence check and the insert
            raise NotFoundError("Product", product_id)
        self.cart_repo.touch_cart(cart.cart_id)

        logger.info(f"Cart item {cart_item_id} updated for user {user_id}")
        return self.get_cart_detail(user_id)

    def remove_item(self, user_id: int, product_id: int, quantity_to_remove: Optional[int] = None) -> Cart:
        """
        Remove a product from the cart, fully or partially

        Business Rules:
        - No quantity, or a quantity at or above the line's quantity, deletes the line
        - A smaller quantity decrements the line
        - Missing cart or missing line is NotFoundError and changes nothing
        """
        logger.info(
            f"Removing product {product_id} from cart of user {user_id} (quantity: {quantity_to_remove or 'all'})"
        )

        if quantity_to_remove is not None and quantity_to_remove <= 0:
            raise ValidationError(
                "Quantity to remove must be a positive integer",
                field_errors=[{"field": "quantity", "message": "must be greater than 0"}],
            )

        cart = self.cart_repo.find_cart_by_user_id(user_id)
        if not cart:
            raise NotFoundError("Cart", f"user_id={user_id}")

        line = self.cart_repo.get_line(cart.cart_id, product_id)
        if not line:
            raise NotFoundError("Cart item", f"product_id={product_id}")

        if quantity_to_remove is None or quantity_to_remove >= line["quantity"]:
            self.cart_repo.delete_item(line["id"])
        elif self.cart_repo.decrement_item(line["id"], quantity_to_remove) == 0:
            # Line shrank concurrently to at most the amount being removed
            self.cart_repo.delete_item(line["id"])

        self.cart_repo.touch_cart(cart.cart_id)
        return self.get_cart_detail(user_id)

    def clear(self, user_id: int) -> int:
        """
        Remove every line from the user's cart

        Returns:
            Number of lines removed (0 for an already empty cart)

        Raises:
            NotFoundError: user has no cart
        """
        cart = self.cart_repo.find_cart_by_user_id(user_id)
        if not cart:
            raise NotFoundError("Cart", f"user_id={user_id}")

        removed = self.cart_repo.clear_items(cart.cart_id)
        if removed:
            self.cart_repo.touch_cart(cart.cart_id)
        logger.info(f"Cleared {removed} lines from cart {cart.cart_id} for user {user_id}")
        return removed
