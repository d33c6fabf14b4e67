from unittest.mock import patch

import pytest

from recipe_catalog import schemas
from recipe_catalog.core.errors import ForbiddenError, NotFoundError
from recipe_catalog.repositories.ingredients import IngredientRepository
from recipe_catalog.repositories.recipes import RecipeRepository
from recipe_catalog.services.ingredients import IngredientService
from tests.helpers import recipe_data


def tomato(**overrides):
    return schemas.IngredientCreate.model_validate({"name": "Tomato", "unit": "piece", "quantity": 3, **overrides})


def test_create_links_to_recipe(recipe_service, ingredient_service):
    recipe = recipe_service.create_recipe("user-1", recipe_data())

    first = ingredient_service.create_ingredient(recipe.id, tomato())
    second = ingredient_service.create_ingredient(recipe.id, tomato(name="Basil", unit="leaf"))

    assert first.recipe_id == recipe.id
    assert recipe_service.get_recipe_by_id(recipe.id).ingredient_ids == [first.id, second.id]


def test_create_on_missing_recipe(ingredient_service):
    with pytest.raises(NotFoundError):
        ingredient_service.create_ingredient("missing", tomato())


def test_list_by_recipe(recipe_service, ingredient_service):
    recipe = recipe_service.create_recipe("user-1", recipe_data())
    for name in ("Tomato", "Basil", "Garlic", "Black pepper"):
        ingredient_service.create_ingredient(recipe.id, tomato(name=name))

    page = ingredient_service.get_ingredients_by_recipe_id(recipe.id)
    assert [i.name for i in page.data] == ["Basil", "Black pepper", "Garlic", "Tomato"]
    assert page.limit == 50

    searched = ingredient_service.get_ingredients_by_recipe_id(
        recipe.id, schemas.IngredientFilterOptions(search="b"), limit=1
    )
    assert searched.total == 2
    assert searched.total_pages == 2
    assert [i.name for i in searched.data] == ["Basil"]


def test_list_on_missing_recipe(ingredient_service):
    with pytest.raises(NotFoundError):
        ingredient_service.get_ingredients_by_recipe_id("missing")


def test_update(recipe_service, ingredient_service):
    recipe = recipe_service.create_recipe("user-1", recipe_data())
    ingredient = ingredient_service.create_ingredient(recipe.id, tomato())

    updated = ingredient_service.update_ingredient(
        ingredient.id, schemas.IngredientUpdate.model_validate({"quantity": 5})
    )
    assert updated.quantity == 5
    assert updated.name == "Tomato"

    with pytest.raises(NotFoundError):
        ingredient_service.update_ingredient("missing", schemas.IngredientUpdate())


def test_delete_unlinks_from_recipe(recipe_service, ingredient_service):
    recipe = recipe_service.create_recipe("user-1", recipe_data())
    keep = ingredient_service.create_ingredient(recipe.id, tomato(name="Keep"))
    drop = ingredient_service.create_ingredient(recipe.id, tomato(name="Drop"))

    ingredient_service.delete_ingredient(drop.id)

    assert recipe_service.get_recipe_by_id(recipe.id).ingredient_ids == [keep.id]
    with pytest.raises(NotFoundError):
        ingredient_service.get_ingredient_by_id(drop.id)
    with pytest.raises(NotFoundError):
        ingredient_service.delete_ingredient(drop.id)


def test_any_caller_may_edit_by_default(recipe_service, ingredient_service):
    recipe = recipe_service.create_recipe("user-1", recipe_data())
    ingredient = ingredient_service.create_ingredient(recipe.id, tomato(), "user-1")

    updated = ingredient_service.update_ingredient(
        ingredient.id, schemas.IngredientUpdate.model_validate({"unit": "kg"}), "user-2"
    )
    assert updated.unit == "kg"


def test_enforced_ownership(store, recipe_service):
    recipe = recipe_service.create_recipe("user-1", recipe_data())
    strict = IngredientService(store, enforce_ownership=True)
    ingredient = strict.create_ingredient(recipe.id, tomato(), "user-1")

    with pytest.raises(ForbiddenError):
        strict.create_ingredient(recipe.id, tomato(), "user-2")
    with pytest.raises(ForbiddenError):
        strict.update_ingredient(ingredient.id, schemas.IngredientUpdate.model_validate({"unit": "kg"}), "user-2")
    with pytest.raises(ForbiddenError):
        strict.delete_ingredient(ingredient.id, "user-2")

    strict.delete_ingredient(ingredient.id, "user-1")
    assert recipe_service.get_recipe_by_id(recipe.id).ingredient_ids == []


def test_update_rejects_explicit_null():
    with pytest.raises(ValueError):
        schemas.IngredientUpdate.model_validate({"name": None})


def test_create_fails_when_recipe_vanishes_before_link(store, recipe_service, ingredient_service):
    recipe = recipe_service.create_recipe("user-1", recipe_data())
    create = ingredient_service.repository.create

    def create_then_drop_recipe(data):
        ingredient = create(data)
        RecipeRepository(store).delete(recipe.id)
        return ingredient

    with patch.object(ingredient_service.repository, "create", side_effect=create_then_drop_recipe):
        with pytest.raises(NotFoundError):
            ingredient_service.create_ingredient(recipe.id, tomato())

    # No compensation: the written record stays behind
    assert IngredientRepository(store).find_by_recipe_id(recipe.id).total == 1


def test_delete_fails_when_recipe_is_gone(store, recipe_service, ingredient_service):
    recipe = recipe_service.create_recipe("user-1", recipe_data())
    ingredient = ingredient_service.create_ingredient(recipe.id, tomato())
    RecipeRepository(store).delete(recipe.id)

    with pytest.raises(NotFoundError):
        ingredient_service.delete_ingredient(ingredient.id)
    assert ingredient_service.get_ingredient_by_id(ingredient.id).id == ingredient.id
