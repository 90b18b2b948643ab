import logging

from flask import Blueprint

from storefront.core.dependencies import get_service
from storefront.routes.schemas import CategorySchema
from storefront.routes.utils import (
    build_request, get_current_user_id, load_body, no_content, parse_id, success_response
)
from storefront.schemas.product_schemas import CategoryRequest
from storefront.services.category_service import CategoryService

logger = logging.getLogger(__name__)

categories_bp = Blueprint("categories", __name__)

_category_schema = CategorySchema()


@categories_bp.route("", methods=["GET"])
def list_categories():
    categories = get_service(CategoryService).list_categories()
    return success_response([c.to_dict() for c in categories])


@categories_bp.route("/<category_id>", methods=["GET"])
def get_category(category_id: str):
    category_id = parse_id(category_id, "category_id")
    return success_response(get_service(CategoryService).get_category(category_id).to_dict())


@categories_bp.route("", methods=["POST"])
def create_category():
    get_current_user_id()
    req = build_request(CategoryRequest, load_body(_category_schema))
    category = get_service(CategoryService).create_category(req)
    return success_response(category.to_dict(), "Category created", status=201)


@categories_bp.route("/<category_id>", methods=["PUT"])
def rename_category(category_id: str):
    get_current_user_id()
    category_id = parse_id(category_id, "category_id")
    req = build_request(CategoryRequest, load_body(_category_schema))
    category = get_service(CategoryService).rename_category(category_id, req)
    return success_response(category.to_dict(), "Category updated")


@categories_bp.route("/<category_id>", methods=["DELETE"])
def delete_category(category_id: str):
    get_current_user_id()
    category_id = parse_id(category_id, "category_id")
    get_service(CategoryService).delete_category(category_id)
    return no_content()
