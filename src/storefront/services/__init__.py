from .cart_service import CartService
from .category_service import CategoryService
from .order_service import OrderService
from .product_service import ProductService
from .user_service import UserService

__all__ = ["CartService", "CategoryService", "OrderService", "ProductService", "UserService"]
