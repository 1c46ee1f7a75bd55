"""Integration tests for metrics and health endpoints."""

from __future__ import annotations

from tests.helpers import day, make_plan


def test_metrics_endpoint_available(client):
    client.get("/healthz")
    response = client.get("/metrics")
    assert response.status_code == 200
    body = response.content.decode()
    assert "tastypath_http_requests_total" in body
    assert 'path="/healthz"' in body


def test_aggregation_metrics_are_exported(client):
    client.post("/plans/shopping-list", json=make_plan(days=[day(lunch=["2 huevos"])]))

    body = client.get("/metrics").content.decode()
    assert 'tastypath_plan_aggregations_total{result="items"}' in body
    assert 'tastypath_ingredient_lines_total{result="parsed"}' in body


def test_healthcheck(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
