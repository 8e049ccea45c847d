"""Unit tests for expected-disconnect classification."""

from __future__ import annotations

import pytest
from anyio import BrokenResourceError, ClosedResourceError
from fastapi import WebSocketDisconnect
from websockets.exceptions import ConnectionClosedOK

from llama_relay.handlers.websocket.disconnects import is_expected_disconnect


@pytest.mark.parametrize(
    "exc",
    [
        WebSocketDisconnect(code=1001),
        ConnectionClosedOK(None, None),
        ConnectionResetError(),
        BrokenPipeError(),
        BrokenResourceError(),
        ClosedResourceError(),
        RuntimeError('Cannot call "send" once a close message has been sent.'),
        RuntimeError("WebSocket is not connected. Need to call \"accept\" first."),
    ],
)
def test_transport_teardown_is_expected(exc: BaseException) -> None:
    assert is_expected_disconnect(exc)


@pytest.mark.parametrize(
    "exc",
    [
        RuntimeError("something else broke"),
        ValueError("bad payload"),
        KeyError("type"),
    ],
)
def test_other_errors_are_not_expected(exc: BaseException) -> None:
    assert not is_expected_disconnect(exc)
