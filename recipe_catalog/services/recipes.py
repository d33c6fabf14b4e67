# services/recipes.py

import logging
from typing import List, Optional

from recipe_catalog import schemas
from recipe_catalog.core.errors import DeleteFailedError, ForbiddenError, NotFoundError, UpdateFailedError
from recipe_catalog.repositories.categories import CategoryRepository
from recipe_catalog.repositories.recipes import RecipeRepository
from recipe_catalog.services.ingredients import IngredientService
from recipe_catalog.services.reviews import ReviewService
from recipe_catalog.store.base import DocumentStore

logger = logging.getLogger(__name__)


def _unique(ids: List[str]) -> List[str]:
    return list(dict.fromkeys(ids))


class RecipeService:
    """
    Recipes are owned by their creator. Deleting a recipe also deletes its
    ingredients and reviews through their services.
    """

    def __init__(self, store: DocumentStore, ingredients: IngredientService, reviews: ReviewService):
        self.repository = RecipeRepository(store)
        self.categories = CategoryRepository(store)
        self.ingredients = ingredients
        self.reviews = reviews

    def create_recipe(self, user_id: str, data: schemas.RecipeCreate) -> schemas.Recipe:
        """
        Creates the recipe and any nested ingredients. Category ids are stored
        as given, without checking that the categories exist.
        """
        logger.debug(f"User {user_id} is creating recipe '{data.title}'")
        document = data.model_dump(mode="json", by_alias=True, exclude={"ingredients", "category_ids"})
        document.update({
            "createdBy": user_id,
            "categoryIds": _unique(data.category_ids),
            "ingredientIds": [],
        })
        recipe = self.repository.create(document)

        if data.ingredients:
            self.ingredients.bulk_create_ingredients(recipe.id, data.ingredients, user_id)
            return self.get_recipe_by_id(recipe.id)
        return recipe

    def get_recipe_by_id(self, recipe_id: str) -> schemas.Recipe:
        logger.debug(f"Retrieving recipe with id {recipe_id}")
        recipe = self.repository.find_by_id(recipe_id)
        if recipe is None:
            logger.warning(f"Recipe with ID {recipe_id} not found.")
            raise NotFoundError("Recipe not found")
        return recipe

    def get_all_recipes(
        self,
        filters: Optional[schemas.RecipeFilterOptions] = None,
        sort: Optional[schemas.SortOptions] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> schemas.Page[schemas.Recipe]:
        return self.repository.find_page(filters, sort, page, limit)

    def _get_owned(self, recipe_id: str, user_id: str, action: str) -> schemas.Recipe:
        recipe = self.get_recipe_by_id(recipe_id)
        if recipe.created_by != user_id:
            logger.error(f"User {user_id} is not authorized to {action} recipe with ID: {recipe_id}")
            raise ForbiddenError(f"Unauthorized to {action} this recipe")
        return recipe

    def update_recipe(self, recipe_id: str, user_id: str, data: schemas.RecipeUpdate) -> schemas.Recipe:
        self._get_owned(recipe_id, user_id, "update")

        changes = data.model_dump(mode="json", by_alias=True, exclude_unset=True)
        if "categoryIds" in changes:
            changes["categoryIds"] = _unique(changes["categoryIds"])

        updated = self.repository.update(recipe_id, changes)
        if updated is None:
            raise UpdateFailedError("Failed to update recipe")
        return updated

    def delete_recipe(self, recipe_id: str, user_id: str) -> None:
        """
        Deletes the children first so a failure part way leaves the recipe in
        place. Nothing already deleted is restored.
        """
        self._get_owned(recipe_id, user_id, "delete")

        ingredient_count = self.ingredients.delete_by_recipe_id(recipe_id)
        review_count = self.reviews.delete_by_recipe_id(recipe_id)
        logger.debug(f"Recipe {recipe_id}: deleted {ingredient_count} ingredients and {review_count} reviews")

        if not self.repository.delete(recipe_id):
            raise DeleteFailedError("Failed to delete recipe")

    # --- Category links ---

    def add_category_to_recipe(self, recipe_id: str, category_id: str) -> schemas.Recipe:
        if not self.categories.exists(category_id):
            logger.warning(f"Category with ID {category_id} not found.")
            raise NotFoundError("Category not found")

        recipe = self.repository.add_category(recipe_id, category_id)
        if recipe is None:
            raise NotFoundError("Recipe not found")
        return recipe

    def remove_category_from_recipe(self, recipe_id: str, category_id: str) -> schemas.Recipe:
        recipe = self.repository.remove_category(recipe_id, category_id)
        if recipe is None:
            raise NotFoundError("Recipe not found")
        return recipe
