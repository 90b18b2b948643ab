import logging

from flask import Blueprint

from storefront.core.dependencies import get_service
from storefront.routes.schemas import UserUpdateSchema
from storefront.routes.utils import (
    build_request, get_current_user_id, load_body, no_content, parse_id, success_response
)
from storefront.schemas.user_schemas import UserUpdateRequest
from storefront.services.user_service import UserService

logger = logging.getLogger(__name__)

users_bp = Blueprint("users", __name__)

_update_schema = UserUpdateSchema()


@users_bp.route("/<user_id>", methods=["GET"])
def get_user(user_id: str):
    actor_id = get_current_user_id()
    user_id = parse_id(user_id, "user_id")
    user = get_service(UserService).get_profile(actor_id, user_id)
    return success_response(user.to_dict())


@users_bp.route("/<user_id>", methods=["PATCH"])
def update_user(user_id: str):
    """Update email and/or password of the caller's own account."""
    actor_id = get_current_user_id()
    user_id = parse_id(user_id, "user_id")
    req = build_request(UserUpdateRequest, load_body(_update_schema))
    user = get_service(UserService).update_profile(actor_id, user_id, req)
    return success_response(user.to_dict(), "User updated")


@users_bp.route("/<user_id>", methods=["DELETE"])
def delete_user(user_id: str):
    actor_id = get_current_user_id()
    user_id = parse_id(user_id, "user_id")
    get_service(UserService).delete_account(actor_id, user_id)
    return no_content()
