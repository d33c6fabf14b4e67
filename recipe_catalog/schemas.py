# schemas.py
# Defines the Pydantic models (schemas) for data validation and serialization.
# Field names are snake_case in Python and camelCase on the wire and in stored documents.

import enum
from datetime import datetime
from typing import Annotated, Generic, List, Literal, Optional, TypeVar
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must be a non-empty string")
    return value


def _valid_url(value: str) -> str:
    parsed = urlparse(value)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("must be a valid URL")
    return value


NonBlankStr = Annotated[str, AfterValidator(_not_blank)]
UrlStr = Annotated[str, AfterValidator(_valid_url)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Ingredient Schemas ---
class IngredientCreate(CamelModel):
    name: NonBlankStr = Field(..., max_length=100)
    unit: NonBlankStr = Field(..., max_length=50)
    quantity: float = Field(..., gt=0)


class IngredientUpdate(CamelModel):
    # Fields default to None but explicit nulls are rejected
    name: NonBlankStr = Field(None, max_length=100)
    unit: NonBlankStr = Field(None, max_length=50)
    quantity: float = Field(None, gt=0)


class Ingredient(CamelModel):
    id: str
    name: str
    unit: str
    quantity: float
    recipe_id: str
    created_at: datetime
    updated_at: datetime


# --- Recipe Schemas ---
class RecipeCreate(CamelModel):
    title: NonBlankStr = Field(..., max_length=200)
    description: NonBlankStr = Field(..., max_length=2000)
    instructions: NonBlankStr
    prep_time: float = Field(..., ge=0, le=10000)
    cook_time: float = Field(..., ge=0, le=10000)
    servings: int = Field(..., ge=1, le=1000)
    difficulty: Difficulty
    image_url: Optional[UrlStr] = None
    category_ids: List[str] = Field(default_factory=list)
    ingredients: List[IngredientCreate] = Field(default_factory=list)


class RecipeUpdate(CamelModel):
    title: NonBlankStr = Field(None, max_length=200)
    description: NonBlankStr = Field(None, max_length=2000)
    instructions: NonBlankStr = None
    prep_time: float = Field(None, ge=0, le=10000)
    cook_time: float = Field(None, ge=0, le=10000)
    servings: int = Field(None, ge=1, le=1000)
    difficulty: Difficulty = None
    image_url: Optional[UrlStr] = None
    category_ids: List[str] = None


class Recipe(CamelModel):
    id: str
    title: str
    description: str
    instructions: str
    prep_time: float
    cook_time: float
    servings: int
    difficulty: Difficulty
    image_url: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: datetime
    category_ids: List[str] = Field(default_factory=list)
    ingredient_ids: List[str] = Field(default_factory=list)


# --- Category Schemas ---
class CategoryCreate(CamelModel):
    name: NonBlankStr = Field(..., max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class CategoryUpdate(CamelModel):
    name: NonBlankStr = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class Category(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# --- Review Schemas ---
class ReviewCreate(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewUpdate(CamelModel):
    rating: int = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class Review(CamelModel):
    id: str
    recipe_id: str
    user_id: str
    user_name: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class RatingSummary(BaseModel):
    average: float
    count: int


# --- Query Options ---
SortOrder = Literal["asc", "desc"]


class SortOptions(BaseModel):
    field: str
    order: SortOrder


class RecipeFilterOptions(BaseModel):
    category_id: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    created_by: Optional[str] = None
    search: Optional[str] = None
    min_prep_time: Optional[float] = None
    max_prep_time: Optional[float] = None
    min_cook_time: Optional[float] = None
    max_cook_time: Optional[float] = None
    min_servings: Optional[int] = None
    max_servings: Optional[int] = None
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None


class CategoryFilterOptions(BaseModel):
    search: Optional[str] = None


class IngredientFilterOptions(BaseModel):
    search: Optional[str] = None


class ReviewFilterOptions(BaseModel):
    min_rating: Optional[int] = None
    max_rating: Optional[int] = None


# --- Pagination ---
T = TypeVar("T")


class Page(CamelModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


# --- Caller ---
class Caller(BaseModel):
    """The authenticated identity a request acts on behalf of."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    roles: List[str] = Field(default_factory=lambda: ["user"])

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles

    @property
    def display_name(self) -> Optional[str]:
        return self.name or self.email
