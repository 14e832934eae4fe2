"""Shared fixtures: an app wired to an in-memory SQLite database."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from products_api.core.config import Settings
from products_api.db.session import Database
from products_api.main import create_app

FRONTEND_URL = "http://frontend.test"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        frontend_url=FRONTEND_URL,
        log_level="WARNING",
    )


@pytest.fixture
def database(settings: Settings) -> Generator[Database, None, None]:
    db = Database(settings.database_url)
    db.init()
    yield db
    db.dispose()


@pytest.fixture
def session(database: Database) -> Generator[Session, None, None]:
    yield from database.session()


@pytest.fixture
def app(settings: Settings, database: Database) -> FastAPI:
    return create_app(settings=settings, database=database)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def created_product(client: TestClient) -> dict:
    response = client.post(
        "/api/products", json={"name": "Mouse-Testing", "price": 100}
    )
    assert response.status_code == 201
    return response.json()["data"]
