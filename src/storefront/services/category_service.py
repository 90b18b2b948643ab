from typing import List
from storefront.repositories.category_repository import CategoryRepository
from storefront.models.product import Category
from storefront.schemas.product_schemas import CategoryRequest
from storefront.core.exceptions import NotFoundError, ConflictError, IntegrityViolation
import logging

logger = logging.getLogger(__name__)


class CategoryService:
    """Category management; names are unique"""

    def __init__(self, category_repository: CategoryRepository):
        self.category_repo = category_repository

    def list_categories(self) -> List[Category]:
        return self.category_repo.list_all()

    def get_category(self, category_id: int) -> Category:
        category = self.category_repo.get_by_id(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    def create_category(self, request: CategoryRequest) -> Category:
        self._ensure_name_free(request.name)
        try:
            category_id = self.category_repo.create(request.name)
        except IntegrityViolation:
            raise ConflictError(f"Category '{request.name}' already exists", conflict_field="name")

        logger.info(f"Created category {category_id} '{request.name}'")
        return self.get_category(category_id)

    def rename_category(self, category_id: int, request: CategoryRequest) -> Category:
        current = self.get_category(category_id)
        if current.name == request.name:
            return current

        self._ensure_name_free(request.name)
        try:
            self.category_repo.rename(category_id, request.name)
        except IntegrityViolation:
            raise ConflictError(f"Category '{request.name}' already exists", conflict_field="name")

        logger.info(f"Renamed category {category_id} to '{request.name}'")
        return self.get_category(category_id)

    def delete_category(self, category_id: int) -> None:
        """Delete a category; its products stay with category_id NULL"""
        if self.category_repo.delete(category_id) == 0:
            raise NotFoundError("Category", category_id)
        logger.info(f"Deleted category {category_id}")

    def _ensure_name_free(self, name: str) -> None:
        if self.category_repo.get_by_name(name) is not None:
            logger.warning(f"Category name '{name}' already taken")
            raise ConflictError(f"Category '{name}' already exists", conflict_field="name")
