# api/reviews.py
# Review endpoints, mounted under /reviews.

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from recipe_catalog import schemas
from recipe_catalog.api.auth import get_current_user, require_roles
from recipe_catalog.api.deps import get_review_service
from recipe_catalog.filters import Pagination, review_filters, review_sort
from recipe_catalog.services.reviews import ReviewService

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("/users/me/reviews", response_model=schemas.Page[schemas.Review])
def read_my_reviews(
    pagination: Pagination = Depends(),
    filters: schemas.ReviewFilterOptions = Depends(review_filters),
    sort: Optional[schemas.SortOptions] = Depends(review_sort),
    service: ReviewService = Depends(get_review_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    """
    Reviews written by the current caller.
    """
    return service.get_reviews_by_user_id(current_user.id, filters, sort, pagination.page, pagination.limit)


@router.get("/reviews/{review_id}", response_model=schemas.Review)
def read_review(
    review_id: str,
    service: ReviewService = Depends(get_review_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    return service.get_review_by_id(review_id)


@router.put("/reviews/{review_id}", response_model=schemas.Review)
def update_review(
    review_id: str,
    review: schemas.ReviewUpdate,
    service: ReviewService = Depends(get_review_service),
    current_user: schemas.Caller = Depends(require_roles("user"))
):
    """
    Update a review. Only its author can do this.
    """
    logger.debug(f"User {current_user.id} is updating review {review_id}")
    return service.update_review(review_id, current_user.id, review)


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: str,
    service: ReviewService = Depends(get_review_service),
    current_user: schemas.Caller = Depends(require_roles("user", "admin"))
):
    """
    Delete a review. Its author or an admin can do this.
    """
    logger.debug(f"User {current_user.id} is deleting review {review_id}")
    service.delete_review(review_id, current_user.id, is_admin=current_user.is_admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{recipe_id}/reviews", response_model=schemas.Page[schemas.Review])
def read_recipe_reviews(
    recipe_id: str,
    pagination: Pagination = Depends(),
    filters: schemas.ReviewFilterOptions = Depends(review_filters),
    sort: Optional[schemas.SortOptions] = Depends(review_sort),
    service: ReviewService = Depends(get_review_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    return service.get_reviews_by_recipe_id(recipe_id, filters, sort, pagination.page, pagination.limit)


@router.post("/{recipe_id}/reviews", response_model=schemas.Review, status_code=status.HTTP_201_CREATED)
def create_review(
    recipe_id: str,
    review: schemas.ReviewCreate,
    service: ReviewService = Depends(get_review_service),
    current_user: schemas.Caller = Depends(require_roles("user"))
):
    """
    Review a recipe. Each caller can review a recipe once.
    """
    return service.create_review(recipe_id, current_user.id, current_user.display_name, review)


@router.get("/{recipe_id}/rating", response_model=schemas.RatingSummary)
def read_recipe_rating(
    recipe_id: str,
    service: ReviewService = Depends(get_review_service),
    current_user: schemas.Caller = Depends(get_current_user)
):
    """
    Average rating of a recipe, rounded to one decimal.
    """
    return service.get_average_rating(recipe_id)
