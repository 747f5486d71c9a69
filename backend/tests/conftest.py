"""Test configuration for the Neoori backend.

The app runs against SQLite (aiosqlite) and an in-memory MongoDB
(mongomock-motor), with uploads written under ``tmp_path``.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from neoori.config import Settings
from neoori.main import create_app


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        mongodb_database="neoori_test",
        upload_dir=str(tmp_path / "uploads"),
        api_base_url="http://testserver",
        jwt_secret="test-access-secret",
        jwt_refresh_secret="test-refresh-secret",
    )


@pytest.fixture()
def client(settings: Settings) -> Iterator[TestClient]:
    app = create_app(settings=settings, mongo_client=AsyncMongoMockClient())
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register(
    client: TestClient,
    email: str = "a@x.com",
    password: str = "pw123456",
    name: str = "Ann",
) -> dict[str, Any]:
    """Register an account and return the response ``data``."""

    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": name},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture()
def account(client: TestClient) -> dict[str, Any]:
    """A registered account with its tokens and ready-made auth headers."""

    data = register(client)
    data["headers"] = auth_headers(data["accessToken"])
    return data
