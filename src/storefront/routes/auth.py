import logging

from flask import Blueprint

from storefront.core.dependencies import get_service
from storefront.routes.schemas import LoginSchema, RegisterSchema
from storefront.routes.utils import build_request, load_body, success_response
from storefront.schemas.user_schemas import LoginRequest, RegisterRequest
from storefront.services.user_service import UserService

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)

_register_schema = RegisterSchema()
_login_schema = LoginSchema()


@auth_bp.route("/register", methods=["POST"])
def register():
    """Create an account and return a token for it."""
    req = build_request(RegisterRequest, load_body(_register_schema))
    user, token = get_service(UserService).register(req)
    return success_response({"token": token, "user": user.to_dict()}, "User registered", status=201)


@auth_bp.route("/login", methods=["POST"])
def login():
    req = build_request(LoginRequest, load_body(_login_schema))
    user, token = get_service(UserService).login(req)
    return success_response({"token": token, "user": user.to_dict()})
