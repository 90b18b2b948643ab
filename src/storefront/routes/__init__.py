from .auth import auth_bp
from .cart import cart_bp
from .categories import categories_bp
from .orders import orders_bp
from .products import products_bp
from .users import users_bp

__all__ = ["auth_bp", "cart_bp", "categories_bp", "orders_bp", "products_bp", "users_bp"]
