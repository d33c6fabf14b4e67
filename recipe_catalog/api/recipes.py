# api/recipes.py
# Handles all API endpoints related to recipes.

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from recipe_catalog import schemas
from recipe_catalog.api.auth import require_roles
from recipe_catalog.api.deps import get_recipe_service
from recipe_catalog.filters import Pagination, recipe_filters, recipe_sort
from recipe_catalog.services.recipes import RecipeService

# Create an API router
router = APIRouter()

# Get a logger instance
logger = logging.getLogger(__name__)


@router.get("", response_model=schemas.Page[schemas.Recipe])
def read_recipes(
        pagination: Pagination = Depends(),
        filters: schemas.RecipeFilterOptions = Depends(recipe_filters),
        sort: Optional[schemas.SortOptions] = Depends(recipe_sort),
        service: RecipeService = Depends(get_recipe_service),
):
    """
    Retrieve recipes with pagination, filtering, and sorting. Public.
    """
    logger.debug(f"Fetching recipes with {pagination}, filters={filters}, sort={sort}.")
    return service.get_all_recipes(filters, sort, pagination.page, pagination.limit)


@router.get("/{recipe_id}", response_model=schemas.Recipe)
def read_recipe(
        recipe_id: str,
        service: RecipeService = Depends(get_recipe_service),
):
    """
    Retrieve a single recipe by its ID. Public.
    """
    return service.get_recipe_by_id(recipe_id)


@router.post("", response_model=schemas.Recipe, status_code=status.HTTP_201_CREATED)
def create_recipe(
        recipe: schemas.RecipeCreate,
        service: RecipeService = Depends(get_recipe_service),
        current_user: schemas.Caller = Depends(require_roles("user", "admin"))
):
    """
    Create a new recipe, and optionally its ingredients, for the current caller.
    """
    logger.debug(f"User {current_user.id} is creating a new recipe.")
    return service.create_recipe(current_user.id, recipe)


@router.put("/{recipe_id}", response_model=schemas.Recipe)
def update_recipe(
        recipe_id: str,
        recipe: schemas.RecipeUpdate,
        service: RecipeService = Depends(get_recipe_service),
        current_user: schemas.Caller = Depends(require_roles("user"))
):
    """
    Update a recipe. Only the owner of the recipe can perform this action.
    """
    logger.debug(f"User {current_user.id} is updating recipe with ID: {recipe_id}")
    return service.update_recipe(recipe_id, current_user.id, recipe)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(
        recipe_id: str,
        service: RecipeService = Depends(get_recipe_service),
        current_user: schemas.Caller = Depends(require_roles("user"))
):
    """
    Delete a recipe with its ingredients and reviews. Only the owner can do this.
    """
    logger.debug(f"User {current_user.id} is deleting recipe with ID: {recipe_id}")
    service.delete_recipe(recipe_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
