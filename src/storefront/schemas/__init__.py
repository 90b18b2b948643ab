from .common_schemas import PaginationRequest, PaginationResponse
from .cart_schemas import AddToCartRequest, RemoveFromCartRequest
from .product_schemas import (
    CategoryRequest, ProductCreateRequest, ProductUpdateRequest, ProductListRequest
)
from .user_schemas import RegisterRequest, LoginRequest, UserUpdateRequest
from .order_schemas import OrderStatusUpdateRequest

__all__ = [
    "PaginationRequest", "PaginationResponse",
    "AddToCartRequest", "RemoveFromCartRequest",
    "CategoryRequest", "ProductCreateRequest", "ProductUpdateRequest", "ProductListRequest",
    "RegisterRequest", "LoginRequest", "UserUpdateRequest",
    "OrderStatusUpdateRequest",
]
