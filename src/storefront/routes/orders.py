import logging

from flask import Blueprint

from storefront.core.dependencies import get_service
from storefront.routes.schemas import OrderStatusSchema
from storefront.routes.utils import build_request, get_current_user_id, load_body, parse_id, success_response
from storefront.schemas.order_schemas import OrderStatusUpdateRequest
from storefront.services.order_service import OrderService

logger = logging.getLogger(__name__)

orders_bp = Blueprint("orders", __name__)

_status_schema = OrderStatusSchema()


@orders_bp.route("", methods=["POST"])
def create_order():
    """Turn the current user's cart into an order."""
    user_id = get_current_user_id()
    order = get_service(OrderService).create_order(user_id)
    return success_response(order.to_dict(), "Order created", status=201)


@orders_bp.route("", methods=["GET"])
def list_orders():
    user_id = get_current_user_id()
    orders = get_service(OrderService).list_orders(user_id)
    return success_response([o.to_dict() for o in orders])


@orders_bp.route("/<order_id>", methods=["GET"])
def get_order(order_id: str):
    user_id = get_current_user_id()
    order_id = parse_id(order_id, "order_id")
    return success_response(get_service(OrderService).get_order(user_id, order_id).to_dict())


@orders_bp.route("/<order_id>/status", methods=["PATCH"])
def update_order_status(order_id: str):
    user_id = get_current_user_id()
    order_id = parse_id(order_id, "order_id")
    req = build_request(OrderStatusUpdateRequest, load_body(_status_schema))
    order = get_service(OrderService).update_status(user_id, order_id, req.status)
    return success_response(order.to_dict(), f"Order status changed to {req.status.value}")
