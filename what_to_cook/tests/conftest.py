"""Pytest configuration and fixtures for What To Cook tests."""

import pytest
from fastapi.testclient import TestClient

from what_to_cook.api import create_app
from what_to_cook.core.recipes.service import RecipeService
from what_to_cook.infrastructure.rate_limit import QuotaPolicy
from what_to_cook.tests.fakes import FakeClock, InMemoryRecipeRepository, StubGenerator


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def generator():
    return StubGenerator()


@pytest.fixture
def repository():
    return InMemoryRecipeRepository()


@pytest.fixture
def recipe_service(generator, repository):
    return RecipeService(generator=generator, repository=repository)


@pytest.fixture
def policy(clock):
    return QuotaPolicy(max_requests=5, window_seconds=3600, clock=clock)


@pytest.fixture
def client(recipe_service, policy):
    app = create_app(recipe_service=recipe_service, quota_policy=policy)
    with TestClient(app) as test_client:
        yield test_client
