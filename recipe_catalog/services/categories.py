# services/categories.py

import logging
from typing import Optional

from recipe_catalog import schemas
from recipe_catalog.core.errors import ConflictError, DeleteFailedError, NotFoundError, UpdateFailedError
from recipe_catalog.repositories.categories import CategoryRepository
from recipe_catalog.repositories.recipes import RecipeRepository
from recipe_catalog.store.base import DocumentStore

logger = logging.getLogger(__name__)


class CategoryService:
    """Category names are unique ignoring case."""

    def __init__(self, store: DocumentStore):
        self.repository = CategoryRepository(store)
        self.recipes = RecipeRepository(store)

    def create_category(self, data: schemas.CategoryCreate) -> schemas.Category:
        if self.repository.find_by_name_case_insensitive(data.name) is not None:
            logger.warning(f"Category name '{data.name}' already taken")
            raise ConflictError("Category with this name already exists", "DUPLICATE_CATEGORY")

        return self.repository.create(data.model_dump(mode="json", by_alias=True))

    def get_category_by_id(self, category_id: str) -> schemas.Category:
        category = self.repository.find_by_id(category_id)
        if category is None:
            logger.warning(f"Category with ID {category_id} not found.")
            raise NotFoundError("Category not found")
        return category

    def get_all_categories(
        self,
        filters: Optional[schemas.CategoryFilterOptions] = None,
        sort: Optional[schemas.SortOptions] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> schemas.Page[schemas.Category]:
        return self.repository.find_page(filters, sort, page, limit)

    def update_category(self, category_id: str, data: schemas.CategoryUpdate) -> schemas.Category:
        category = self.get_category_by_id(category_id)

        changes = data.model_dump(mode="json", by_alias=True, exclude_unset=True)
        new_name = changes.get("name")
        if new_name is not None and new_name != category.name:
            if self.repository.exists_by_name_excluding_id(new_name, category_id):
                logger.warning(f"Category name '{new_name}' already taken")
                raise ConflictError("Category with this name already exists", "DUPLICATE_CATEGORY")

        updated = self.repository.update(category_id, changes)
        if updated is None:
            raise UpdateFailedError("Failed to update category")
        return updated

    def delete_category(self, category_id: str) -> None:
        """
        Removes the category from every recipe that lists it, then deletes it.
        The unlinking is done recipe by recipe and is not rolled back on failure.
        """
        self.get_category_by_id(category_id)

        for recipe_id in self.recipes.find_ids_by_category(category_id):
            self.recipes.remove_category(recipe_id, category_id)

        if not self.repository.delete(category_id):
            raise DeleteFailedError("Failed to delete category")
        logger.debug(f"Deleted category {category_id}")
