"""Unit tests for generate request body validation."""

from __future__ import annotations

import pytest

from llama_relay.errors import ValidationError
from llama_relay.messages import extract_sampling, parse_generate_body


def test_minimal_body_defaults_to_non_streaming() -> None:
    request = parse_generate_body({"model": " llama3 ", "prompt": "hi"})
    assert request.model == "llama3"
    assert request.prompt == "hi"
    assert request.stream is False
    assert request.request_id


def test_request_id_prefers_body_over_header() -> None:
    assert parse_generate_body({"model": "m", "prompt": "p", "requestId": "body-1"}, header_request_id="hdr").request_id == "body-1"
    assert parse_generate_body({"model": "m", "prompt": "p"}, header_request_id="hdr-2").request_id == "hdr-2"


@pytest.mark.parametrize(
    ("body", "code"),
    [
        ([], "invalid_body"),
        (None, "invalid_body"),
        ({"prompt": "p"}, "missing_model_or_prompt"),
        ({"model": "m"}, "missing_model_or_prompt"),
        ({"model": "   ", "prompt": "p"}, "missing_model_or_prompt"),
        ({"model": "m", "prompt": ""}, "missing_model_or_prompt"),
        ({"model": "m", "prompt": "p", "stream": "yes"}, "invalid_stream"),
        ({"model": "m", "prompt": "p", "requestId": "has spaces"}, "invalid_request_id"),
        ({"model": "m", "prompt": "p", "requestId": 12}, "invalid_request_id"),
    ],
)
def test_invalid_bodies(body, code: str) -> None:
    with pytest.raises(ValidationError) as exc_info:
        parse_generate_body(body)
    assert exc_info.value.error_code == code


def test_sampling_accepts_camel_and_snake_case() -> None:
    params = extract_sampling({"temperature": "0.7", "topP": 0.9, "top_k": 40.0, "maxTokens": 256})
    assert params.temperature == 0.7
    assert params.top_p == 0.9
    assert params.top_k == 40
    assert params.max_tokens == 256


def test_absent_sampling_stays_unset() -> None:
    params = extract_sampling({})
    assert params.to_upstream() == {"temperature": None, "top_p": None, "top_k": None, "max_tokens": None}


@pytest.mark.parametrize(
    ("body", "code"),
    [
        ({"temperature": "hot"}, "invalid_temperature"),
        ({"temperature": True}, "invalid_temperature"),
        ({"temperature": 5}, "temperature_out_of_range"),
        ({"topP": 1.5}, "top_p_out_of_range"),
        ({"topK": 2.5}, "invalid_top_k"),
        ({"maxTokens": 0}, "max_tokens_out_of_range"),
    ],
)
def test_invalid_sampling(body, code: str) -> None:
    with pytest.raises(ValidationError) as exc_info:
        extract_sampling(body)
    assert exc_info.value.error_code == code
