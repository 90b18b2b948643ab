from .product import Category, Product
from .cart import Cart, CartItem
from .user import User
from .order import Order, OrderItem, OrderLine, OrderStatus

__all__ = [
    "Category", "Product",
    "Cart", "CartItem",
    "User",
    "Order", "OrderItem", "OrderLine", "OrderStatus",
]
