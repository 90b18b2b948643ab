import logging

from flask import Blueprint, request

from storefront.core.dependencies import get_service
from storefront.routes.schemas import AddCartItemSchema
from storefront.routes.utils import (
    build_request, get_current_user_id, load_body, no_content, parse_id, parse_int, success_response
)
from storefront.schemas.cart_schemas import AddToCartRequest, RemoveFromCartRequest
from storefront.services.cart_service import CartService

logger = logging.getLogger(__name__)

cart_bp = Blueprint("cart", __name__)

_add_schema = AddCartItemSchema()


@cart_bp.route("", methods=["GET"])
def get_cart():
    """Return the current user's cart; an empty cart if none exists yet."""
    user_id = get_current_user_id()
    cart = get_service(CartService).get_cart_detail(user_id)
    return success_response(cart.to_dict())


@cart_bp.route("/items", methods=["POST"])
def add_cart_item():
    """Add a product to the cart, or increment its quantity if already present."""
    user_id = get_current_user_id()
    req = build_request(AddToCartRequest, load_body(_add_schema))
    cart = get_service(CartService).add_item(user_id, req.product_id, req.quantity)
    return success_response(cart.to_dict(), "Item added to cart")


@cart_bp.route("/items/<product_id>", methods=["DELETE"])
def remove_cart_item(product_id: str):
    """Remove a product from the cart; ?quantity= removes only that many."""
    user_id = get_current_user_id()
    product_id = parse_id(product_id, "product_id")
    req = build_request(RemoveFromCartRequest, {
        "product_id": product_id,
        "quantity": parse_int(request.args.get("quantity"), field_name="quantity"),
    })
    cart = get_service(CartService).remove_item(user_id, req.product_id, req.quantity)
    return success_response(cart.to_dict(), "Item removed from cart")


@cart_bp.route("", methods=["DELETE"])
def clear_cart():
    user_id = get_current_user_id()
    get_service(CartService).clear(user_id)
    return no_content()
