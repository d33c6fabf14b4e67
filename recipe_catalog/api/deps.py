# api/deps.py
# Request-scoped service construction. All services of one request share a store.

from fastapi import Depends

from recipe_catalog.core.config import settings
from recipe_catalog.services.categories import CategoryService
from recipe_catalog.services.ingredients import IngredientService
from recipe_catalog.services.recipes import RecipeService
from recipe_catalog.services.reviews import ReviewService
from recipe_catalog.store.base import DocumentStore
from recipe_catalog.store.provider import get_store


def get_ingredient_service(store: DocumentStore = Depends(get_store)) -> IngredientService:
    return IngredientService(store, enforce_ownership=settings.ENFORCE_INGREDIENT_OWNERSHIP)


def get_review_service(store: DocumentStore = Depends(get_store)) -> ReviewService:
    return ReviewService(store)


def get_category_service(store: DocumentStore = Depends(get_store)) -> CategoryService:
    return CategoryService(store)


def get_recipe_service(
    store: DocumentStore = Depends(get_store),
    ingredients: IngredientService = Depends(get_ingredient_service),
    reviews: ReviewService = Depends(get_review_service),
) -> RecipeService:
    return RecipeService(store, ingredients, reviews)
