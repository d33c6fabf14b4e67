# Shared builders for test data and tokens.

from recipe_catalog import schemas
from recipe_catalog.api.auth import create_access_token


def recipe_data(**overrides) -> schemas.RecipeCreate:
    data = {
        "title": "Tomato Soup",
        "description": "A simple soup",
        "instructions": "Simmer everything for 20 minutes.",
        "prepTime": 10,
        "cookTime": 20,
        "servings": 4,
        "difficulty": "easy",
    }
    data.update(overrides)
    return schemas.RecipeCreate.model_validate(data)


def recipe_document(**overrides) -> dict:
    """A stored recipe document, for tests that go straight to the repository."""
    document = {
        "title": "Tomato Soup",
        "description": "A simple soup",
        "instructions": "Simmer everything for 20 minutes.",
        "prepTime": 10,
        "cookTime": 20,
        "servings": 4,
        "difficulty": "easy",
        "imageUrl": None,
        "createdBy": "user-1",
        "categoryIds": [],
        "ingredientIds": [],
    }
    document.update(overrides)
    return document


def auth_headers(user_id: str, roles=None, email=None, name=None) -> dict:
    claims = {"sub": user_id, "email": email or f"{user_id}@example.com"}
    if name:
        claims["name"] = name
    if roles is not None:
        claims["roles"] = roles
    token = create_access_token(claims)
    return {"Authorization": f"Bearer {token}"}
