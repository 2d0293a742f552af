import pytest
from fastapi.testclient import TestClient

from user_lookup.config import Settings
from user_lookup.db import get_pool
from user_lookup.main import create_app

from .fakes import ALICE, BOB, FakePool


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture()
def pool() -> FakePool:
    return FakePool([BOB, ALICE])


@pytest.fixture()
def app(settings, pool):
    app = create_app(settings)
    app.dependency_overrides[get_pool] = lambda: pool
    return app


@pytest.fixture()
def client(app) -> TestClient:
    # Not entered as a context manager: lifespan would open a real pool
    return TestClient(app)
