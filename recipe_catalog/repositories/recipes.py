# repositories/recipes.py

import logging
from typing import List, Optional

from recipe_catalog import schemas
from recipe_catalog.repositories.base import BaseRepository, QuerySpec
from recipe_catalog.store.base import ARRAY_CONTAINS, EQ, GTE, LTE

logger = logging.getLogger(__name__)


def _in_range(value: float, low: Optional[float], high: Optional[float]) -> bool:
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


class RecipeRepository(BaseRepository[schemas.Recipe]):
    collection_name = "recipes"
    model = schemas.Recipe
    default_sort = schemas.SortOptions(field="createdAt", order="desc")
    default_limit = 10
    sort_fields = ("createdAt", "updatedAt", "title", "prepTime", "cookTime", "servings", "difficulty")

    def build_query(self, filters: schemas.RecipeFilterOptions) -> QuerySpec[schemas.Recipe]:
        """
        Category membership, difficulty, owner and the createdAt range go to the
        store. Text search and the prep/cook/servings ranges are applied in memory
        since the store allows range filters on one field only.
        """
        spec: QuerySpec[schemas.Recipe] = QuerySpec()

        if filters.category_id:
            spec.where("categoryIds", ARRAY_CONTAINS, filters.category_id)
        if filters.difficulty:
            spec.where("difficulty", EQ, filters.difficulty.value)
        if filters.created_by:
            spec.where("createdBy", EQ, filters.created_by)
        if filters.created_after is not None:
            spec.where("createdAt", GTE, filters.created_after)
        if filters.created_before is not None:
            spec.where("createdAt", LTE, filters.created_before)

        if filters.search:
            needle = filters.search.lower()
            spec.keep(lambda r: needle in r.title.lower() or needle in r.description.lower())
        if filters.min_prep_time is not None or filters.max_prep_time is not None:
            spec.keep(lambda r: _in_range(r.prep_time, filters.min_prep_time, filters.max_prep_time))
        if filters.min_cook_time is not None or filters.max_cook_time is not None:
            spec.keep(lambda r: _in_range(r.cook_time, filters.min_cook_time, filters.max_cook_time))
        if filters.min_servings is not None or filters.max_servings is not None:
            spec.keep(lambda r: _in_range(r.servings, filters.min_servings, filters.max_servings))

        return spec

    def find_page(
        self,
        filters: Optional[schemas.RecipeFilterOptions] = None,
        sort: Optional[schemas.SortOptions] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> schemas.Page[schemas.Recipe]:
        spec = self.build_query(filters or schemas.RecipeFilterOptions())
        return self.paginate(spec, sort, page, limit)

    def find_ids_by_category(self, category_id: str) -> List[str]:
        spec: QuerySpec[schemas.Recipe] = QuerySpec().where("categoryIds", ARRAY_CONTAINS, category_id)
        return [recipe.id for recipe in self.find_all(spec)]

    # --- Relationship arrays ---
    # Read-modify-write without concurrency control: two concurrent writers
    # to the same recipe can lose one of the changes.

    def add_category(self, recipe_id: str, category_id: str) -> Optional[schemas.Recipe]:
        recipe = self.find_by_id(recipe_id)
        if recipe is None:
            return None
        if category_id in recipe.category_ids:
            return recipe
        return self.update(recipe_id, {"categoryIds": [*recipe.category_ids, category_id]})

    def remove_category(self, recipe_id: str, category_id: str) -> Optional[schemas.Recipe]:
        recipe = self.find_by_id(recipe_id)
        if recipe is None:
            return None
        remaining = [cid for cid in recipe.category_ids if cid != category_id]
        return self.update(recipe_id, {"categoryIds": remaining})

    def add_ingredient(self, recipe_id: str, ingredient_id: str) -> Optional[schemas.Recipe]:
        recipe = self.find_by_id(recipe_id)
        if recipe is None:
            return None
        if ingredient_id in recipe.ingredient_ids:
            return recipe
        return self.update(recipe_id, {"ingredientIds": [*recipe.ingredient_ids, ingredient_id]})

    def remove_ingredient(self, recipe_id: str, ingredient_id: str) -> Optional[schemas.Recipe]:
        recipe = self.find_by_id(recipe_id)
        if recipe is None:
            return None
        remaining = [iid for iid in recipe.ingredient_ids if iid != ingredient_id]
        return self.update(recipe_id, {"ingredientIds": remaining})
