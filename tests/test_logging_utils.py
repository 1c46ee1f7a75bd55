"""Tests for logging utilities and sensitive data redaction."""

from __future__ import annotations

import json
import logging

import pytest

from tastypath.logging_utils import JsonFormatter, Redactor, configure_logging
from tastypath.shopping.store import ShoppingListStore
from tests.helpers import day, make_plan


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.mark.parametrize("fmt", ["plain", "json"])
def test_sensitive_data_filter_redacts_tokens(fmt):
    secret = "top-secret-token"
    configure_logging("INFO", fmt, [secret])

    handler = logging.getLogger().handlers[0]
    record = logging.LogRecord(
        name="tastypath.test.redaction",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg="Authorization header Bearer %s",
        args=(secret,),
        exc_info=None,
    )

    for filter_ in handler.filters:
        filter_.filter(record)

    formatted = handler.format(record)
    assert secret not in formatted
    assert "[redacted]" in formatted


def test_redactor_masks_query_tokens_and_literals():
    redact = Redactor(["hunter2", None, "  "])

    assert redact("GET /shopping-list?api_token=abc123&x=1") == "GET /shopping-list?api_token=[redacted]&x=1"
    assert redact("password is hunter2") == "password is [redacted]"


def test_json_formatter_includes_context_fields():
    record = logging.LogRecord(
        name="tastypath.access",
        level=logging.WARNING,
        pathname=__file__,
        lineno=0,
        msg="HTTP %s %s",
        args=("GET", "/shopping-list"),
        exc_info=None,
    )
    record.request_id = "req-1"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "HTTP GET /shopping-list"
    assert payload["level"] == "WARNING"
    assert payload["request_id"] == "req-1"
    assert "plan_id" not in payload


def test_store_logs_carry_plan_id_into_json(caplog):
    store = ShoppingListStore()

    with caplog.at_level("INFO", logger="tastypath.shopping.store"):
        store.add_plan(make_plan("plan-9", days=[day(lunch=["1 pepino"])]))
        store.remove_plan("plan-9")

    records = [record for record in caplog.records if record.name == "tastypath.shopping.store"]
    payloads = [json.loads(JsonFormatter().format(record)) for record in records]

    assert [payload["plan_id"] for payload in payloads] == ["plan-9", "plan-9"]
    assert payloads[0]["message"] == "Merged plan plan-9 into shopping list (1 item(s))"


def test_configure_logging_sets_level():
    configure_logging("debug", "plain")

    assert logging.getLogger().level == logging.DEBUG
    assert len(logging.getLogger().handlers) == 1
