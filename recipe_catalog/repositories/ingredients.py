# repositories/ingredients.py

from typing import Optional

from recipe_catalog import schemas
from recipe_catalog.repositories.base import BaseRepository, QuerySpec
from recipe_catalog.store.base import EQ


class IngredientRepository(BaseRepository[schemas.Ingredient]):
    collection_name = "ingredients"
    model = schemas.Ingredient
    default_sort = schemas.SortOptions(field="name", order="asc")
    default_limit = 50
    sort_fields = ("name", "quantity", "createdAt")

    def build_query(
        self, recipe_id: str, filters: schemas.IngredientFilterOptions
    ) -> QuerySpec[schemas.Ingredient]:
        spec: QuerySpec[schemas.Ingredient] = QuerySpec().where("recipeId", EQ, recipe_id)
        if filters.search:
            needle = filters.search.lower()
            spec.keep(lambda i: needle in i.name.lower())
        return spec

    def find_by_recipe_id(
        self,
        recipe_id: str,
        filters: Optional[schemas.IngredientFilterOptions] = None,
        sort: Optional[schemas.SortOptions] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> schemas.Page[schemas.Ingredient]:
        spec = self.build_query(recipe_id, filters or schemas.IngredientFilterOptions())
        return self.paginate(spec, sort, page, limit)

    def delete_by_recipe_id(self, recipe_id: str) -> int:
        return self.delete_where(QuerySpec().where("recipeId", EQ, recipe_id))
