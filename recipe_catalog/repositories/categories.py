# repositories/categories.py

from typing import Optional

from recipe_catalog import schemas
from recipe_catalog.repositories.base import BaseRepository, QuerySpec
from recipe_catalog.store.base import EQ, FieldFilter


class CategoryRepository(BaseRepository[schemas.Category]):
    collection_name = "categories"
    model = schemas.Category
    default_sort = schemas.SortOptions(field="name", order="asc")
    default_limit = 50
    sort_fields = ("name", "createdAt", "updatedAt")

    def build_query(self, filters: schemas.CategoryFilterOptions) -> QuerySpec[schemas.Category]:
        spec: QuerySpec[schemas.Category] = QuerySpec()
        if filters.search:
            needle = filters.search.lower()
            spec.keep(
                lambda c: needle in c.name.lower()
                or (c.description is not None and needle in c.description.lower())
            )
        return spec

    def find_page(
        self,
        filters: Optional[schemas.CategoryFilterOptions] = None,
        sort: Optional[schemas.SortOptions] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> schemas.Page[schemas.Category]:
        spec = self.build_query(filters or schemas.CategoryFilterOptions())
        return self.paginate(spec, sort, page, limit)

    def find_by_name(self, name: str) -> Optional[schemas.Category]:
        docs = self.store.query(self.collection_name, [FieldFilter("name", EQ, name)], limit=1)
        if not docs:
            return None
        return self._to_entity(docs[0].id, docs[0].data)

    # The store has no case-insensitive comparison, so these scan the collection.

    def find_by_name_case_insensitive(self, name: str) -> Optional[schemas.Category]:
        wanted = name.lower()
        for category in self.scan():
            if category.name.lower() == wanted:
                return category
        return None

    def exists_by_name_excluding_id(self, name: str, exclude_id: str) -> bool:
        wanted = name.lower()
        return any(
            category.id != exclude_id and category.name.lower() == wanted
            for category in self.scan()
        )
