# Re-export all table models from a single entry point. Importing them here
# also ensures they are registered with Base.metadata before any call to
# Base.metadata.create_all().

from storefront.db.models.cart import Cart, CartItem
from storefront.db.models.order import Order, OrderItem
from storefront.db.models.product import Category, Product
from storefront.db.models.user import User

__all__ = [
    "User",
    "Category",
    "Product",
    "Order",
    "OrderItem",
    "Cart",
    "CartItem",
]
