from typing import List, Optional, Tuple
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.category_repository import CategoryRepository
from storefront.models.product import Product
from storefront.schemas.product_schemas import (
    ProductListRequest, ProductCreateRequest, ProductUpdateRequest
)
from storefront.core.exceptions import NotFoundError, ValidationError, IntegrityViolation
import logging

logger = logging.getLogger(__name__)


class ProductService:
    """
    Product catalog business logic service

    Responsibilities:
    - Catalog CRUD
    - Whitelisted partial updates
    - Category reference checks
    """

    def __init__(
        self,
        product_repository: ProductRepository,
        category_repository: CategoryRepository,
        max_page_size: int = 100,
    ):
        self.product_repo = product_repository
        self.category_repo = category_repository
        self.max_page_size = max_page_size

    def get_product_by_id(self, product_id: int) -> Product:
        logger.info(f"Fetching product {product_id}")

        product = self.product_repo.get_by_id(product_id)
        if product is None:
            logger.warning(f"Product {product_id} not found")
            raise NotFoundError("Product", product_id)
        return product

    def list_products(self, request: ProductListRequest) -> Tuple[List[Product], Optional[int]]:
        """
        List products with filtering and pagination

        Business Rules:
        - Enforce maximum page size

        Returns:
            (products, next_cursor)
        """
        logger.info(f"Listing products with filters: {request.model_dump()}")

        limit = min(request.limit, self.max_page_size)
        products, has_more = self.product_repo.list_products(
            limit=limit,
            after=request.after,
            category_id=request.category_id,
        )

        next_cursor = products[-1].id if has_more and products else None
        return products, next_cursor

    def create_product(self, request: ProductCreateRequest) -> Product:
        logger.info(f"Creating product '{request.name}'")

        self._check_category(request.category_id)

        try:
            product_id = self.product_repo.create(
                name=request.name,
                price_cents=request.price_cents,
                stock=request.stock,
                description=request.description,
                image_url=request.image_url,
                category_id=request.category_id,
            )
        except IntegrityViolation:
            # Category deleted between the check and the insert
            raise ValidationError(
                f"Category {request.category_id} does not exist",
                field_errors=[{"field": "category_id", "message": "unknown category"}],
            )

        logger.info(f"Created product {product_id}")
        return self.get_product_by_id(product_id)

    def update_product(self, product_id: int, request: ProductUpdateRequest) -> Product:
        """
        Apply a partial update

        Business Rules:
        - At least one field must be supplied
        - name, price_cents and stock cannot be set to null
        - A referenced category must exist
        """
        changes = request.changes()
        if not changes:
            raise ValidationError("No fields to update")

        for field in ("name", "price_cents", "stock"):
            if field in changes and changes[field] is None:
                raise ValidationError(
                    f"{field} cannot be null",
                    field_errors=[{"field": field, "message": "cannot be null"}],
                )

        if changes.get("category_id") is not None:
            self._check_category(changes["category_id"])

        try:
            affected = self.product_repo.update(product_id, changes)
        except IntegrityViolation:
            raise ValidationError(
                f"Category {changes.get('category_id')} does not exist",
                field_errors=[{"field": "category_id", "message": "unknown category"}],
            )
        if affected == 0:
            raise NotFoundError("Product", product_id)

        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return self.get_product_by_id(product_id)

    def delete_product(self, product_id: int) -> None:
        """Delete a product; cart lines go with it, order items keep a NULL reference"""
        if self.product_repo.delete(product_id) == 0:
            raise NotFoundError("Product", product_id)
        logger.info(f"Deleted product {product_id}")

    def _check_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and not self.category_repo.exists(category_id):
            raise ValidationError(
                f"Category {category_id} does not exist",
                field_errors=[{"field": "category_id", "message": "unknown category"}],
            )
