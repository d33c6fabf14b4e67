# filters.py
# Turns list query parameters into filter, sort and paging options.
# Parameter names are part of the public API and stay camelCase.

from datetime import datetime
from typing import Optional, Type

from fastapi import Query

from recipe_catalog import schemas
from recipe_catalog.core.errors import ValidationError
from recipe_catalog.repositories.base import BaseRepository
from recipe_catalog.repositories.categories import CategoryRepository
from recipe_catalog.repositories.ingredients import IngredientRepository
from recipe_catalog.repositories.recipes import RecipeRepository
from recipe_catalog.repositories.reviews import ReviewRepository

SORT_ORDERS = ("asc", "desc")


class Pagination:
    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number, starting at 1"),
        limit: Optional[int] = Query(None, ge=1, description="Items per page"),
    ):
        self.page = page
        self.limit = limit

    def __repr__(self):
        return f"Pagination(page={self.page}, limit={self.limit})"


def parse_sort(
    sort_by: Optional[str], sort_order: Optional[str], repository: Type[BaseRepository]
) -> Optional[schemas.SortOptions]:
    """
    Returns None when neither parameter is given so the repository default
    applies. A single missing parameter takes the repository's default.
    """
    if not sort_by and not sort_order:
        return None

    field = sort_by or repository.default_sort.field
    order = sort_order or repository.default_sort.order

    if field not in repository.sort_fields:
        raise ValidationError(f"Invalid sort field. Must be one of: {', '.join(repository.sort_fields)}")
    if order not in SORT_ORDERS:
        raise ValidationError('Invalid sort order. Must be "asc" or "desc"')

    return schemas.SortOptions(field=field, order=order)


def sort_params(repository: Type[BaseRepository]):
    def dependency(
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        sort_order: Optional[str] = Query(None, alias="sortOrder"),
    ) -> Optional[schemas.SortOptions]:
        return parse_sort(sort_by, sort_order, repository)

    return dependency


recipe_sort = sort_params(RecipeRepository)
category_sort = sort_params(CategoryRepository)
ingredient_sort = sort_params(IngredientRepository)
review_sort = sort_params(ReviewRepository)


def recipe_filters(
    search: Optional[str] = Query(None, description="Search in title and description"),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    difficulty: Optional[schemas.Difficulty] = Query(None),
    created_by: Optional[str] = Query(None, alias="createdBy"),
    min_prep_time: Optional[float] = Query(None, alias="minPrepTime"),
    max_prep_time: Optional[float] = Query(None, alias="maxPrepTime"),
    min_cook_time: Optional[float] = Query(None, alias="minCookTime"),
    max_cook_time: Optional[float] = Query(None, alias="maxCookTime"),
    min_servings: Optional[int] = Query(None, alias="minServings"),
    max_servings: Optional[int] = Query(None, alias="maxServings"),
    created_after: Optional[datetime] = Query(None, alias="createdAfter"),
    created_before: Optional[datetime] = Query(None, alias="createdBefore"),
) -> schemas.RecipeFilterOptions:
    return schemas.RecipeFilterOptions(
        search=search,
        category_id=category_id,
        difficulty=difficulty,
        created_by=created_by,
        min_prep_time=min_prep_time,
        max_prep_time=max_prep_time,
        min_cook_time=min_cook_time,
        max_cook_time=max_cook_time,
        min_servings=min_servings,
        max_servings=max_servings,
        created_after=created_after,
        created_before=created_before,
    )


def category_filters(
    search: Optional[str] = Query(None, description="Search in name and description"),
) -> schemas.CategoryFilterOptions:
    return schemas.CategoryFilterOptions(search=search)


def ingredient_filters(
    search: Optional[str] = Query(None, description="Search in name"),
) -> schemas.IngredientFilterOptions:
    return schemas.IngredientFilterOptions(search=search)


def review_filters(
    min_rating: Optional[int] = Query(None, alias="minRating"),
    max_rating: Optional[int] = Query(None, alias="maxRating"),
) -> schemas.ReviewFilterOptions:
    return schemas.ReviewFilterOptions(min_rating=min_rating, max_rating=max_rating)
