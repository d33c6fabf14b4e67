# repositories/reviews.py

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from recipe_catalog import schemas
from recipe_catalog.repositories.base import BaseRepository, QuerySpec
from recipe_catalog.store.base import EQ, FieldFilter, GTE, LTE


def average_rating(ratings) -> schemas.RatingSummary:
    """
    Mean of `ratings` rounded to one decimal, halves away from zero.
    An empty input gives an average of 0.
    """
    ratings = list(ratings)
    if not ratings:
        return schemas.RatingSummary(average=0, count=0)
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    rounded = mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return schemas.RatingSummary(average=float(rounded), count=len(ratings))


class ReviewRepository(BaseRepository[schemas.Review]):
    collection_name = "reviews"
    model = schemas.Review
    default_sort = schemas.SortOptions(field="createdAt", order="desc")
    default_limit = 20
    sort_fields = ("createdAt", "rating")

    def build_query(
        self, field: str, value: str, filters: schemas.ReviewFilterOptions
    ) -> QuerySpec[schemas.Review]:
        # Every review filter is store-pushable: the rating range is the only range.
        spec: QuerySpec[schemas.Review] = QuerySpec().where(field, EQ, value)
        if filters.min_rating is not None:
            spec.where("rating", GTE, filters.min_rating)
        if filters.max_rating is not None:
            spec.where("rating", LTE, filters.max_rating)
        return spec

    def find_by_recipe_id(
        self,
        recipe_id: str,
        filters: Optional[schemas.ReviewFilterOptions] = None,
        sort: Optional[schemas.SortOptions] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> schemas.Page[schemas.Review]:
        spec = self.build_query("recipeId", recipe_id, filters or schemas.ReviewFilterOptions())
        return self.paginate(spec, sort, page, limit)

    def find_by_user_id(
        self,
        user_id: str,
        filters: Optional[schemas.ReviewFilterOptions] = None,
        sort: Optional[schemas.SortOptions] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> schemas.Page[schemas.Review]:
        spec = self.build_query("userId", user_id, filters or schemas.ReviewFilterOptions())
        return self.paginate(spec, sort, page, limit)

    def find_by_recipe_and_user(self, recipe_id: str, user_id: str) -> Optional[schemas.Review]:
        docs = self.store.query(
            self.collection_name,
            [FieldFilter("recipeId", EQ, recipe_id), FieldFilter("userId", EQ, user_id)],
            limit=1,
        )
        if not docs:
            return None
        return self._to_entity(docs[0].id, docs[0].data)

    def get_average_rating(self, recipe_id: str) -> schemas.RatingSummary:
        docs = self.store.query(self.collection_name, [FieldFilter("recipeId", EQ, recipe_id)])
        return average_rating(doc.data["rating"] for doc in docs)

    def delete_by_recipe_id(self, recipe_id: str) -> int:
        return self.delete_where(QuerySpec().where("recipeId", EQ, recipe_id))
