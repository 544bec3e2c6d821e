"""Root conftest — shared fixtures: an article store, collection and marshaller.

Invariants:
    - Every test gets a fresh store, collection and event manager
    - Settings cache cleared around each test so env overrides never leak

Design Decisions:
    - In-memory store seeded fixture-style: persistence is outside the engine,
      only the read side is needed to load "existing" documents
"""

import pytest

from docmarshal.config import get_settings
from docmarshal.infrastructure.memory_store import InMemoryDocumentStore
from docmarshal.services.collection import Collection
from docmarshal.services.marshaller import Marshaller

FIRST_ID = "507f191e810c19729de860ea"
SECOND_ID = "507f191e810c19729de860eb"

ARTICLES = [
    {
        "id": FIRST_ID,
        "title": "First article",
        "body": "First article body",
        "user_id": 1,
    },
    {
        "id": SECOND_ID,
        "title": "Second article",
        "body": "Second article body",
        "user_id": 2,
    },
]


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store():
    return InMemoryDocumentStore().load("articles", ARTICLES)


@pytest.fixture
def collection(store):
    return Collection("articles", store=store)


@pytest.fixture
def marshaller(collection):
    return Marshaller(collection)


@pytest.fixture
def article_data():
    return {
        "title": "Testing",
        "body": "MongoDB text",
        "user_id": 1,
    }
