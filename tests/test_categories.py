import pytest

from recipe_catalog import schemas
from recipe_catalog.core.errors import ConflictError, NotFoundError
from tests.helpers import recipe_data


def create(category_service, name, description=None):
    return category_service.create_category(schemas.CategoryCreate(name=name, description=description))


def test_create_and_get(category_service):
    category = create(category_service, "Desserts", "Sweet things")
    fetched = category_service.get_category_by_id(category.id)
    assert fetched.name == "Desserts"
    assert fetched.description == "Sweet things"


def test_names_are_unique_ignoring_case(category_service):
    create(category_service, "Desserts")
    with pytest.raises(ConflictError) as exc_info:
        create(category_service, "DESSERTS")
    assert exc_info.value.code == "DUPLICATE_CATEGORY"
    assert exc_info.value.status_code == 409


def test_rename_to_taken_name(category_service):
    create(category_service, "Desserts")
    mains = create(category_service, "Mains")

    with pytest.raises(ConflictError):
        category_service.update_category(mains.id, schemas.CategoryUpdate(name="desserts"))
    assert category_service.get_category_by_id(mains.id).name == "Mains"


def test_rename_own_case_and_keep_name(category_service):
    mains = create(category_service, "Mains")

    assert category_service.update_category(mains.id, schemas.CategoryUpdate(name="MAINS")).name == "MAINS"
    updated = category_service.update_category(mains.id, schemas.CategoryUpdate(description="Big plates"))
    assert updated.name == "MAINS"
    assert updated.description == "Big plates"


def test_missing_category(category_service):
    with pytest.raises(NotFoundError):
        category_service.get_category_by_id("missing")
    with pytest.raises(NotFoundError):
        category_service.update_category("missing", schemas.CategoryUpdate(name="x"))
    with pytest.raises(NotFoundError):
        category_service.delete_category("missing")


def test_list_search_and_sort(category_service):
    for name, description in [("Soups", None), ("Salads", "Fresh and green"), ("Breads", "Baked")]:
        create(category_service, name, description)

    page = category_service.get_all_categories()
    assert [c.name for c in page.data] == ["Breads", "Salads", "Soups"]

    searched = category_service.get_all_categories(schemas.CategoryFilterOptions(search="GREEN"))
    assert [c.name for c in searched.data] == ["Salads"]
    assert searched.total == 1

    by_name_desc = category_service.get_all_categories(sort=schemas.SortOptions(field="name", order="desc"))
    assert by_name_desc.data[0].name == "Soups"


def test_delete_unlinks_recipes(category_service, recipe_service):
    soups = create(category_service, "Soups")
    vegan = create(category_service, "Vegan")
    recipe = recipe_service.create_recipe("user-1", recipe_data(categoryIds=[soups.id, vegan.id]))
    untouched = recipe_service.create_recipe("user-2", recipe_data(categoryIds=[vegan.id]))

    category_service.delete_category(soups.id)

    with pytest.raises(NotFoundError):
        category_service.get_category_by_id(soups.id)
    assert recipe_service.get_recipe_by_id(recipe.id).category_ids == [vegan.id]
    assert recipe_service.get_recipe_by_id(untouched.id).category_ids == [vegan.id]
    assert recipe_service.get_all_recipes(schemas.RecipeFilterOptions(category_id=soups.id)).total == 0
