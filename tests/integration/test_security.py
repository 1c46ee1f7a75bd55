"""Security-related integration tests."""

from __future__ import annotations

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from tastypath.config import get_settings
from tastypath.server import deps
from tastypath.server.app import create_app
from tests.helpers import day, make_plan


@pytest.fixture()
def secure_client(monkeypatch) -> TestClient:
    monkeypatch.setenv("TASTYPATH_API_TOKEN", "secret-token")
    get_settings.cache_clear()
    deps.reset_stores()
    client = TestClient(create_app())
    yield client
    monkeypatch.delenv("TASTYPATH_API_TOKEN", raising=False)
    deps.reset_stores()
    get_settings.cache_clear()


def test_shopping_list_requires_api_token(secure_client):
    response = secure_client.post("/shopping-list", json={"name": "huevos", "amount": 12})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    headers = {"Authorization": "Bearer secret-token"}
    response = secure_client.post("/shopping-list", json={"name": "huevos", "amount": 12}, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED


def test_plan_endpoint_enforces_api_token(secure_client):
    payload = make_plan(days=[day(lunch=["100 g pollo"])])

    response = secure_client.post("/plans/shopping-list", json=payload)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = secure_client.post("/plans/shopping-list", json=payload, headers={"X-API-Key": "secret-token"})
    assert response.status_code == status.HTTP_200_OK

    response = secure_client.delete("/plans/plan-1", params={"api_token": "wrong"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_reads_do_not_require_token(secure_client):
    assert secure_client.get("/shopping-list").status_code == status.HTTP_200_OK
    assert secure_client.get("/shopping-list/summary").status_code == status.HTTP_200_OK
