"""Tests for the tastypath command line."""

from __future__ import annotations

import json
import logging

import pytest
from typer.testing import CliRunner

from tastypath.cli import app
from tastypath.config import get_settings
from tests.helpers import day, make_plan

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    monkeypatch.setenv("TASTYPATH_LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture()
def plan_file(tmp_path):
    path = tmp_path / "plan.json"
    path.write_text(json.dumps(make_plan(days=[day(breakfast=["2 huevos"], lunch=["100 g pollo"])])), encoding="utf-8")
    return path


@pytest.fixture()
def store_file(tmp_path):
    return tmp_path / "store" / "list.db"


def test_aggregate_prints_plan_json(plan_file, store_file):
    result = runner.invoke(app, ["aggregate", str(plan_file)])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["totalItems"] == 2
    assert {item["name"] for item in payload["items"]} == {"Huevos", "Pollo"}
    assert not store_file.exists()


def test_add_show_and_remove(plan_file, store_file):
    result = runner.invoke(app, ["add", str(plan_file), "--store", str(store_file)])
    assert result.exit_code == 0, result.output
    assert "Added 2 item(s) from plan plan-1" in result.output
    assert store_file.exists()

    result = runner.invoke(app, ["show", "--store", str(store_file)])
    assert result.exit_code == 0, result.output
    assert "== Semana ligera · 04 mar – 10 mar" in result.output
    assert "CARNES Y AVES" in result.output
    assert "[ ] Pollo — 1 paquete  6.50" in result.output
    assert "Pending cost 7.00, total 7.00" in result.output

    result = runner.invoke(app, ["show", "--store", str(store_file), "--budget", "3.5"])
    assert "Pollo — 1 paquete  3.25" in result.output
    assert "(budget 3.50)" in result.output

    result = runner.invoke(app, ["remove-plan", "plan-1", "--store", str(store_file)])
    assert result.exit_code == 0
    assert "Removed 2 item(s)" in result.output

    result = runner.invoke(app, ["show", "--store", str(store_file)])
    assert "Shopping list is empty." in result.output


def test_export_pdf(plan_file, store_file, tmp_path):
    output = tmp_path / "lista.pdf"

    result = runner.invoke(app, ["export-pdf", str(output), "--store", str(store_file)])
    assert result.exit_code == 1
    assert not output.exists()

    runner.invoke(app, ["add", str(plan_file), "--store", str(store_file)])
    result = runner.invoke(app, ["export-pdf", str(output), "--store", str(store_file)])

    assert result.exit_code == 0, result.output
    assert output.read_bytes().startswith(b"%PDF")


def test_unreadable_plan_exits_with_error(tmp_path):
    missing = runner.invoke(app, ["aggregate", str(tmp_path / "missing.json")])
    invalid_path = tmp_path / "invalid.json"
    invalid_path.write_text(json.dumps({"name": "sin id"}), encoding="utf-8")
    invalid = runner.invoke(app, ["aggregate", str(invalid_path)])

    assert missing.exit_code == 1
    assert invalid.exit_code == 1
