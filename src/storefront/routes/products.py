import logging

from flask import Blueprint, current_app, request

from storefront.core.dependencies import get_service
from storefront.routes.schemas import ProductCreateSchema, ProductUpdateSchema
from storefront.routes.utils import (
    build_request, get_current_user_id, load_body, no_content, parse_id, parse_int, success_response
)
from storefront.schemas.common_schemas import PaginationResponse
from storefront.schemas.product_schemas import (
    ProductCreateRequest, ProductListRequest, ProductUpdateRequest
)
from storefront.services.product_service import ProductService

logger = logging.getLogger(__name__)

products_bp = Blueprint("products", __name__)

_create_schema = ProductCreateSchema()
_update_schema = ProductUpdateSchema()


@products_bp.route("", methods=["GET"])
def list_products():
    """List products with cursor-based pagination and an optional category filter."""
    api = current_app.config["STOREFRONT"].api
    req = ProductListRequest(
        limit=parse_int(request.args.get("limit"), default=api.default_page_size, min_val=1,
                        max_val=api.max_page_size, field_name="limit"),
        after=parse_int(request.args.get("after"), min_val=1, field_name="after"),
        category_id=parse_int(request.args.get("category_id"), min_val=1, field_name="category_id"),
    )

    products, next_cursor = get_service(ProductService).list_products(req)

    return success_response({
        "products": [p.to_dict() for p in products],
        "pagination": PaginationResponse(
            limit=req.limit,
            count=len(products),
            has_more=next_cursor is not None,
            next_cursor=next_cursor,
        ).model_dump(),
    })


@products_bp.route("/<product_id>", methods=["GET"])
def get_product(product_id: str):
    product_id = parse_id(product_id, "product_id")
    return success_response(get_service(ProductService).get_product_by_id(product_id).to_dict())


@products_bp.route("", methods=["POST"])
def create_product():
    get_current_user_id()
    req = build_request(ProductCreateRequest, load_body(_create_schema))
    product = get_service(ProductService).create_product(req)
    return success_response(product.to_dict(), "Product created", status=201)


@products_bp.route("/<product_id>", methods=["PATCH"])
def update_product(product_id: str):
    """Partial update; only whitelisted fields are accepted."""
    get_current_user_id()
    product_id = parse_id(product_id, "product_id")
    req = build_request(ProductUpdateRequest, load_body(_update_schema))
    product = get_service(ProductService).update_product(product_id, req)
    return success_response(product.to_dict(), "Product updated")


@products_bp.route("/<product_id>", methods=["DELETE"])
def delete_product(product_id: str):
    get_current_user_id()
    product_id = parse_id(product_id, "product_id")
    get_service(ProductService).delete_product(product_id)
    return no_content()
