"""Shared fixtures for the docwrap test suite."""

from __future__ import annotations

import pytest

from docwrap import DocumentRegistry, Repository

from .fake_collection import FakeCollection
from .models import Note, User


@pytest.fixture
def users_collection() -> FakeCollection:
    collection = FakeCollection("users")
    collection.create_index("email", unique=True)
    return collection


@pytest.fixture
def registry() -> DocumentRegistry:
    return DocumentRegistry()


@pytest.fixture
def users(users_collection: FakeCollection, registry: DocumentRegistry) -> Repository[User]:
    return Repository(User, registry, collection=users_collection)


@pytest.fixture
def notes(registry: DocumentRegistry) -> Repository[Note]:
    return Repository(Note, registry, collection=FakeCollection("notes"))
