# services/reviews.py

import logging
from typing import Optional

from recipe_catalog import schemas
from recipe_catalog.core.errors import (
    ConflictError, DeleteFailedError, ForbiddenError, NotFoundError, UpdateFailedError,
)
from recipe_catalog.repositories.recipes import RecipeRepository
from recipe_catalog.repositories.reviews import ReviewRepository
from recipe_catalog.store.base import DocumentStore

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, store: DocumentStore):
        self.repository = ReviewRepository(store)
        self.recipes = RecipeRepository(store)

    def _require_recipe(self, recipe_id: str) -> None:
        if not self.recipes.exists(recipe_id):
            logger.warning(f"Recipe with ID {recipe_id} not found.")
            raise NotFoundError("Recipe not found")

    def create_review(
        self,
        recipe_id: str,
        user_id: str,
        user_name: Optional[str],
        data: schemas.ReviewCreate,
    ) -> schemas.Review:
        """
        One review per user and recipe. `user_name` is stored as given and is
        not kept in sync with later profile changes.
        """
        self._require_recipe(recipe_id)

        if self.repository.find_by_recipe_and_user(recipe_id, user_id) is not None:
            logger.warning(f"User {user_id} already reviewed recipe {recipe_id}")
            raise ConflictError("You have already reviewed this recipe", "DUPLICATE_REVIEW")

        logger.debug(f"User {user_id} is reviewing recipe {recipe_id}")
        return self.repository.create({
            "recipeId": recipe_id,
            "userId": user_id,
            "userName": user_name,
            "rating": data.rating,
            "comment": data.comment,
        })

    def get_review_by_id(self, review_id: str) -> schemas.Review:
        review = self.repository.find_by_id(review_id)
        if review is None:
            logger.warning(f"Review with ID {review_id} not found.")
            raise NotFoundError("Review not found")
        return review

    def get_reviews_by_recipe_id(
        self,
        recipe_id: str,
        filters: Optional[schemas.ReviewFilterOptions] = None,
        sort: Optional[schemas.SortOptions] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> schemas.Page[schemas.Review]:
        self._require_recipe(recipe_id)
        return self.repository.find_by_recipe_id(recipe_id, filters, sort, page, limit)

    def get_reviews_by_user_id(
        self,
        user_id: str,
        filters: Optional[schemas.ReviewFilterOptions] = None,
        sort: Optional[schemas.SortOptions] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> schemas.Page[schemas.Review]:
        return self.repository.find_by_user_id(user_id, filters, sort, page, limit)

    def update_review(self, review_id: str, user_id: str, data: schemas.ReviewUpdate) -> schemas.Review:
        review = self.get_review_by_id(review_id)

        if review.user_id != user_id:
            logger.error(f"User {user_id} is not authorized to update review {review_id}")
            raise ForbiddenError("Unauthorized to update this review")

        changes = data.model_dump(mode="json", by_alias=True, exclude_unset=True)
        updated = self.repository.update(review_id, changes)
        if updated is None:
            raise UpdateFailedError("Failed to update review")
        return updated

    def delete_review(self, review_id: str, user_id: str, is_admin: bool = False) -> None:
        review = self.get_review_by_id(review_id)

        if review.user_id != user_id and not is_admin:
            logger.error(f"User {user_id} is not authorized to delete review {review_id}")
            raise ForbiddenError("Unauthorized to delete this review")

        if not self.repository.delete(review_id):
            raise DeleteFailedError("Failed to delete review")

    def get_average_rating(self, recipe_id: str) -> schemas.RatingSummary:
        return self.repository.get_average_rating(recipe_id)

    def delete_by_recipe_id(self, recipe_id: str) -> int:
        return self.repository.delete_by_recipe_id(recipe_id)
