"""Unit tests for contextual log fields."""

from __future__ import annotations

import logging

from llama_relay.logging import (
    LogFields,
    current_log_context,
    install_log_context,
    log_context,
    reset_log_context,
    set_log_context,
)


def test_log_context_sets_and_restores_fields() -> None:
    with log_context(user_id="7", request_id="req-1"):
        assert current_log_context() == {"user_id": "7", "request_id": "req-1", "connection_id": "-"}
        with log_context(request_id="req-2"):
            assert current_log_context()["request_id"] == "req-2"
        assert current_log_context()["request_id"] == "req-1"
    assert current_log_context() == {"user_id": "-", "request_id": "-", "connection_id": "-"}


def test_reset_log_context_undoes_set() -> None:
    token = set_log_context(connection_id="abc")
    assert current_log_context()["connection_id"] == "abc"
    reset_log_context(token)
    assert current_log_context()["connection_id"] == "-"


def test_records_carry_context_fields() -> None:
    install_log_context()
    install_log_context()
    with log_context(user_id="42", connection_id="conn"):
        record = logging.getLogger("llama_relay.test").makeRecord(
            "llama_relay.test", logging.INFO, __file__, 1, "msg", (), None
        )
    assert record.user_id == "42"
    assert record.connection_id == "conn"
    assert record.request_id == "-"


def test_nested_bindings_layer_over_outer_fields() -> None:
    with log_context(connection_id="conn") as outer:
        with log_context(user_id=7) as inner:
            assert inner == LogFields(user_id="7", connection_id="conn")
        assert outer == LogFields(connection_id="conn")


def test_bind_without_changes_returns_same_fields() -> None:
    fields = LogFields(request_id="r")
    assert fields.bind() is fields
    assert fields.bind(request_id="s").request_id == "s"
    assert fields.request_id == "r"
