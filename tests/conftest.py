"""Shared pytest fixtures for the TastyPath test suite."""

from __future__ import annotations

from typing import Any, Dict, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tastypath.config import get_settings
from tastypath.server import deps
from tastypath.server.app import create_app
from tastypath.shopping.heuristics import get_heuristics
from tests.helpers import day, make_plan


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every test at its own shopping list file."""

    monkeypatch.setenv("TASTYPATH_DATABASE_PATH", str(tmp_path / "tastypath.db"))
    monkeypatch.delenv("TASTYPATH_API_TOKEN", raising=False)
    monkeypatch.delenv("TASTYPATH_HEURISTICS_PATH", raising=False)
    get_settings.cache_clear()
    get_heuristics.cache_clear()
    deps.reset_stores()
    yield
    get_settings.cache_clear()
    get_heuristics.cache_clear()
    deps.reset_stores()


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def sample_plan() -> Dict[str, Any]:
    """Two days mixing repeated, fractional and unquantified ingredients."""

    return make_plan(
        days=[
            day(
                breakfast=["2 huevos", "1 yogur natural"],
                lunch=["100 g pollo", "1/2 taza de arroz", "Sal al gusto"],
                dinner=["2 cucharadas de aceite de oliva", "150 g salmón"],
                snacks=[["1 manzana"], ["30 g nueces"]],
            ),
            day(
                breakfast=["3 huevos", "1 yogur natural"],
                lunch=["150 g pollo", "1 taza de arroz"],
                dinner=None,
                snacks=[["1 manzana"]],
            ),
        ],
    )
