from .base import BaseRepository
from .cart_repository import CartRepository
from .category_repository import CategoryRepository
from .order_repository import OrderRepository
from .product_repository import ProductRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "CartRepository",
    "CategoryRepository",
    "OrderRepository",
    "ProductRepository",
    "UserRepository",
]
