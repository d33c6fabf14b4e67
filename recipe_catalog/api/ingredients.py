# api/ingredients.py
# Ingredient endpoints, mounted under /ingredients.

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from recipe_catalog import schemas
from recipe_catalog.api.auth import get_current_user
from recipe_catalog.api.deps import get_ingredient_service
from recipe_catalog.filters import Pagination, ingredient_filters, ingredient_sort
from recipe_catalog.services.ingredients import IngredientService

router = APIRouter()

logger = logging.getLogger(__name__)


# Registered before the /{recipe_id}/... routes so "ingredients" is never taken for a recipe id

@router.get("/ingredients/{ingredient_id}", response_model=schemas.Ingredient)
def read_ingredient(
    ingredient_id: str,
    service: IngredientService = Depends(get_ingredient_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    return service.get_ingredient_by_id(ingredient_id)


@router.put("/ingredients/{ingredient_id}", response_model=schemas.Ingredient)
def update_ingredient(
    ingredient_id: str,
    ingredient: schemas.IngredientUpdate,
    service: IngredientService = Depends(get_ingredient_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    """
    Update an ingredient.
    """
    logger.debug(f"User {current_user.id} is updating ingredient {ingredient_id}")
    return service.update_ingredient(ingredient_id, ingredient, current_user.id)


@router.delete("/ingredients/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ingredient(
    ingredient_id: str,
    service: IngredientService = Depends(get_ingredient_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    """
    Delete an ingredient and remove it from its recipe.
    """
    logger.debug(f"User {current_user.id} is deleting ingredient {ingredient_id}")
    service.delete_ingredient(ingredient_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{recipe_id}/ingredients", response_model=schemas.Page[schemas.Ingredient])
def read_recipe_ingredients(
    recipe_id: str,
    pagination: Pagination = Depends(),
    filters: schemas.IngredientFilterOptions = Depends(ingredient_filters),
    sort: Optional[schemas.SortOptions] = Depends(ingredient_sort),
    service: IngredientService = Depends(get_ingredient_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    """
    List the ingredients of a recipe.
    """
    return service.get_ingredients_by_recipe_id(recipe_id, filters, sort, pagination.page, pagination.limit)


@router.post("/{recipe_id}/ingredients", response_model=schemas.Ingredient, status_code=status.HTTP_201_CREATED)
def create_ingredient(
    recipe_id: str,
    ingredient: schemas.IngredientCreate,
    service: IngredientService = Depends(get_ingredient_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    """
    Add an ingredient to a recipe.
    """
    logger.debug(f"User {current_user.id} is adding an ingredient to recipe {recipe_id}")
    return service.create_ingredient(recipe_id, ingredient, current_user.id)
