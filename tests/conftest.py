import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# It is important to set environment variables before importing app modules
os.environ["STORE_BACKEND"] = "memory"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "testing"

from recipe_catalog.db import models
from recipe_catalog.main import app
from recipe_catalog.services.categories import CategoryService
from recipe_catalog.services.ingredients import IngredientService
from recipe_catalog.services.recipes import RecipeService
from recipe_catalog.services.reviews import ReviewService
from recipe_catalog.store.memory import MemoryDocumentStore
from recipe_catalog.store.provider import memory_store
from recipe_catalog.store.sql import SqlDocumentStore
from tests.helpers import auth_headers


@pytest.fixture(scope="session")
def sql_engine():
    # One shared in-memory SQLite connection for the whole session
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    models.Base.metadata.create_all(bind=engine)
    yield engine
    models.Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sql_store(sql_engine) -> Generator:
    session = sessionmaker(autocommit=False, autoflush=False, bind=sql_engine)()
    yield SqlDocumentStore(session)
    session.query(models.DocumentRecord).delete()
    session.commit()
    session.close()


@pytest.fixture
def memory_document_store():
    return MemoryDocumentStore()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Runs the test once against each store backend."""
    if request.param == "memory":
        return request.getfixturevalue("memory_document_store")
    return request.getfixturevalue("sql_store")


@pytest.fixture
def ingredient_service(store):
    return IngredientService(store)


@pytest.fixture
def review_service(store):
    return ReviewService(store)


@pytest.fixture
def category_service(store):
    return CategoryService(store)


@pytest.fixture
def recipe_service(store, ingredient_service, review_service):
    return RecipeService(store, ingredient_service, review_service)


# --- API fixtures ---

@pytest.fixture
def client() -> Generator:
    memory_store.clear()
    with TestClient(app) as c:
        yield c
    memory_store.clear()


@pytest.fixture
def user_headers():
    return auth_headers("user-1", name="Alice")


@pytest.fixture
def other_user_headers():
    return auth_headers("user-2", name="Bob")


@pytest.fixture
def admin_headers():
    return auth_headers("admin-1", roles=["admin"])
