from datetime import datetime, timedelta, timezone

from recipe_catalog import schemas
from tests.helpers import recipe_data


def seed(recipe_service):
    """Three recipes from two users, tagged with categories."""
    soup = recipe_service.create_recipe("user-1", recipe_data(
        title="Tomato Soup", description="Warm and red", prepTime=10, cookTime=30, servings=4,
        difficulty="easy", categoryIds=["soups", "vegetarian"],
    ))
    stew = recipe_service.create_recipe("user-1", recipe_data(
        title="Beef Stew", description="Slow cooked", prepTime=25, cookTime=120, servings=6,
        difficulty="hard", categoryIds=["mains"],
    ))
    salad = recipe_service.create_recipe("user-2", recipe_data(
        title="Green Salad", description="Crunchy tomato topping", prepTime=15, cookTime=0, servings=2,
        difficulty="easy", categoryIds=["vegetarian"],
    ))
    return soup, stew, salad


def titles(page):
    return sorted(r.title for r in page.data)


def find(recipe_service, **filters):
    return recipe_service.get_all_recipes(schemas.RecipeFilterOptions(**filters))


def test_filter_by_category(recipe_service):
    seed(recipe_service)
    page = find(recipe_service, category_id="vegetarian")
    assert titles(page) == ["Green Salad", "Tomato Soup"]
    assert page.total == 2


def test_filter_by_difficulty_and_owner(recipe_service):
    seed(recipe_service)
    assert titles(find(recipe_service, difficulty=schemas.Difficulty.EASY, created_by="user-1")) == ["Tomato Soup"]
    assert titles(find(recipe_service, created_by="user-2")) == ["Green Salad"]


def test_search_matches_title_or_description(recipe_service):
    seed(recipe_service)
    # "tomato" is in one title and one description
    assert titles(find(recipe_service, search="ToMaTo")) == ["Green Salad", "Tomato Soup"]
    assert find(recipe_service, search="nothing like this").total == 0


def test_numeric_ranges(recipe_service):
    seed(recipe_service)
    assert titles(find(recipe_service, min_prep_time=12)) == ["Beef Stew", "Green Salad"]
    assert titles(find(recipe_service, max_cook_time=30)) == ["Green Salad", "Tomato Soup"]
    assert titles(find(recipe_service, min_servings=3, max_servings=5)) == ["Tomato Soup"]
    # Bounds are inclusive
    assert titles(find(recipe_service, min_prep_time=10, max_prep_time=10)) == ["Tomato Soup"]


def test_created_range(recipe_service):
    seed(recipe_service)
    now = datetime.now(timezone.utc)
    assert find(recipe_service, created_after=now - timedelta(hours=1)).total == 3
    assert find(recipe_service, created_after=now + timedelta(hours=1)).total == 0
    assert find(recipe_service, created_before=now - timedelta(hours=1)).total == 0


def test_store_and_memory_filters_combined(recipe_service):
    seed(recipe_service)
    page = find(recipe_service, category_id="vegetarian", search="soup", max_prep_time=20)
    assert titles(page) == ["Tomato Soup"]
    assert page.total == 1


def test_sort_by_title(recipe_service):
    seed(recipe_service)
    page = recipe_service.get_all_recipes(sort=schemas.SortOptions(field="title", order="desc"))
    assert [r.title for r in page.data] == ["Tomato Soup", "Green Salad", "Beef Stew"]
