"""Shared fixtures for persistent-set tests."""

from __future__ import annotations

import pytest

from tests.fakes.fake_store import FakeListStore
from tests.fakes.fake_values import Person


@pytest.fixture
def store() -> FakeListStore:
    """Empty recording store."""
    return FakeListStore()


@pytest.fixture
def people() -> list[Person]:
    """Three people with distinct ages and tags."""
    return [
        Person(id="ada", name="Ada", age=28, tags={"admin", "active"}),
        Person(id="linus", name="Linus", age=33, tags={"active"}),
        Person(id="grace", name="Grace", age=52, tags={"inactive", "vip"}),
    ]
