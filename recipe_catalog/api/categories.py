# api/categories.py
# Category endpoints and the recipe/category link endpoints.

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from recipe_catalog import schemas
from recipe_catalog.api.auth import get_current_user, require_roles
from recipe_catalog.api.deps import get_category_service, get_recipe_service
from recipe_catalog.filters import Pagination, category_filters, category_sort
from recipe_catalog.services.categories import CategoryService
from recipe_catalog.services.recipes import RecipeService

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("", response_model=schemas.Page[schemas.Category])
def read_categories(
    pagination: Pagination = Depends(),
    filters: schemas.CategoryFilterOptions = Depends(category_filters),
    sort: Optional[schemas.SortOptions] = Depends(category_sort),
    service: CategoryService = Depends(get_category_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    return service.get_all_categories(filters, sort, pagination.page, pagination.limit)


@router.get("/{category_id}", response_model=schemas.Category)
def read_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    return service.get_category_by_id(category_id)


@router.post("", response_model=schemas.Category, status_code=status.HTTP_201_CREATED)
def create_category(
    category: schemas.CategoryCreate,
    service: CategoryService = Depends(get_category_service),
    current_user: schemas.Caller = Depends(require_roles("admin"))
):
    """
    Create a category. Admin only.
    """
    logger.debug(f"Admin {current_user.id} is creating category '{category.name}'")
    return service.create_category(category)


@router.put("/{category_id}", response_model=schemas.Category)
def update_category(
    category_id: str,
    category: schemas.CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
    current_user: schemas.Caller = Depends(require_roles("admin"))
):
    """
    Update a category. Admin only.
    """
    return service.update_category(category_id, category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
    current_user: schemas.Caller = Depends(require_roles("admin"))
):
    """
    Delete a category and remove it from every recipe. Admin only.
    """
    service.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/recipes/{recipe_id}/categories/{category_id}", response_model=schemas.Recipe)
def add_category_to_recipe(
    recipe_id: str,
    category_id: str,
    service: RecipeService = Depends(get_recipe_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    """
    Attach an existing category to a recipe.
    """
    logger.debug(f"User {current_user.id} is adding category {category_id} to recipe {recipe_id}")
    return service.add_category_to_recipe(recipe_id, category_id)


@router.delete("/recipes/{recipe_id}/categories/{category_id}", response_model=schemas.Recipe)
def remove_category_from_recipe(
    recipe_id: str,
    category_id: str,
    service: RecipeService = Depends(get_recipe_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    """
    Detach a category from a recipe.
    """
    logger.debug(f"User {current_user.id} is removing category {category_id} from recipe {recipe_id}")
    return service.remove_category_from_recipe(recipe_id, category_id)
