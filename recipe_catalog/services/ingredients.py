# services/ingredients.py

import logging
from typing import List, Optional

from recipe_catalog import schemas
from recipe_catalog.core.errors import DeleteFailedError, ForbiddenError, NotFoundError, UpdateFailedError
from recipe_catalog.repositories.ingredients import IngredientRepository
from recipe_catalog.repositories.recipes import RecipeRepository
from recipe_catalog.store.base import DocumentStore

logger = logging.getLogger(__name__)


class IngredientService:
    """
    Ingredients belong to exactly one recipe and are listed in the recipe's
    ingredientIds in creation order.

    Ingredients have no owner of their own. Unless `enforce_ownership` is set,
    any authenticated caller may change or delete them.
    """

    def __init__(self, store: DocumentStore, enforce_ownership: bool = False):
        self.repository = IngredientRepository(store)
        self.recipes = RecipeRepository(store)
        self.enforce_ownership = enforce_ownership

    def _get_recipe(self, recipe_id: str) -> schemas.Recipe:
        recipe = self.recipes.find_by_id(recipe_id)
        if recipe is None:
            logger.warning(f"Recipe with ID {recipe_id} not found.")
            raise NotFoundError("Recipe not found")
        return recipe

    def _check_owner(self, recipe: schemas.Recipe, user_id: Optional[str]) -> None:
        if self.enforce_ownership and recipe.created_by != user_id:
            logger.error(f"User {user_id} is not authorized to modify ingredients of recipe {recipe.id}")
            raise ForbiddenError("Unauthorized to modify ingredients of this recipe")

    def create_ingredient(
        self, recipe_id: str, data: schemas.IngredientCreate, user_id: Optional[str] = None
    ) -> schemas.Ingredient:
        recipe = self._get_recipe(recipe_id)
        self._check_owner(recipe, user_id)

        ingredient = self.repository.create({**data.model_dump(mode="json", by_alias=True), "recipeId": recipe_id})

        # Not atomic with the create above. If the recipe vanished meanwhile the
        # ingredient record is left in place and the caller gets NotFound.
        if self.recipes.add_ingredient(recipe_id, ingredient.id) is None:
            logger.error(f"Recipe {recipe_id} vanished while linking ingredient {ingredient.id}")
            raise NotFoundError("Recipe not found")
        return ingredient

    def bulk_create_ingredients(
        self, recipe_id: str, items: List[schemas.IngredientCreate], user_id: Optional[str] = None
    ) -> List[schemas.Ingredient]:
        # Sequential so every id lands in ingredientIds in input order
        return [self.create_ingredient(recipe_id, item, user_id) for item in items]

    def get_ingredient_by_id(self, ingredient_id: str) -> schemas.Ingredient:
        ingredient = self.repository.find_by_id(ingredient_id)
        if ingredient is None:
            logger.warning(f"Ingredient with ID {ingredient_id} not found.")
            raise NotFoundError("Ingredient not found")
        return ingredient

    def get_ingredients_by_recipe_id(
        self,
        recipe_id: str,
        filters: Optional[schemas.IngredientFilterOptions] = None,
        sort: Optional[schemas.SortOptions] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> schemas.Page[schemas.Ingredient]:
        self._get_recipe(recipe_id)
        return self.repository.find_by_recipe_id(recipe_id, filters, sort, page, limit)

    def update_ingredient(
        self, ingredient_id: str, data: schemas.IngredientUpdate, user_id: Optional[str] = None
    ) -> schemas.Ingredient:
        ingredient = self.get_ingredient_by_id(ingredient_id)
        if self.enforce_ownership:
            self._check_owner(self._get_recipe(ingredient.recipe_id), user_id)

        changes = data.model_dump(mode="json", by_alias=True, exclude_unset=True)
        updated = self.repository.update(ingredient_id, changes)
        if updated is None:
            raise UpdateFailedError("Failed to update ingredient")
        return updated

    def delete_ingredient(self, ingredient_id: str, user_id: Optional[str] = None) -> None:
        """
        Unlinks the ingredient from its recipe, then deletes it. If the recipe
        is gone the record is kept and NotFound is raised. A failure between
        the two steps leaves the record without its link; nothing is rolled back.
        """
        ingredient = self.get_ingredient_by_id(ingredient_id)
        if self.enforce_ownership:
            self._check_owner(self._get_recipe(ingredient.recipe_id), user_id)

        if self.recipes.remove_ingredient(ingredient.recipe_id, ingredient_id) is None:
            logger.error(f"Recipe {ingredient.recipe_id} of ingredient {ingredient_id} not found")
            raise NotFoundError("Recipe not found")

        if not self.repository.delete(ingredient_id):
            raise DeleteFailedError("Failed to delete ingredient")
        logger.debug(f"Deleted ingredient {ingredient_id} of recipe {ingredient.recipe_id}")

    def delete_by_recipe_id(self, recipe_id: str) -> int:
        return self.repository.delete_by_recipe_id(recipe_id)
