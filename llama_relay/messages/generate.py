"""Generate request body parsing and sampling validation.

Browsers post ``{model, prompt, stream, temperature?, topP?, topK?,
maxTokens?, requestId?}``. Sampling keys are accepted in camelCase or
snake_case and validated against the configured bounds. Every failure is a
``ValidationError`` raised before the upstream is contacted, so the caller
is never charged for a rejected request.
"""

from __future__ import annotations

import re
import uuid
from typing import Any

from ..errors import ValidationError
from ..config import (
    PROMPT_MAX_CHARS,
    CHAT_TOP_K_MAX,
    CHAT_TOP_K_MIN,
    CHAT_TOP_P_MAX,
    CHAT_TOP_P_MIN,
    CHAT_MAX_TOKENS_MAX,
    CHAT_MAX_TOKENS_MIN,
    CHAT_TEMPERATURE_MAX,
    CHAT_TEMPERATURE_MIN,
)
from ..upstream.types import GenerationRequest, SamplingParams

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9_.:-]{1,128}$")

# (attribute, accepted keys, type, min, max)
_SAMPLING_FIELDS: tuple[tuple[str, tuple[str, ...], type, float | int, float | int], ...] = (
    ("temperature", ("temperature",), float, CHAT_TEMPERATURE_MIN, CHAT_TEMPERATURE_MAX),
    ("top_p", ("topP", "top_p"), float, CHAT_TOP_P_MIN, CHAT_TOP_P_MAX),
    ("top_k", ("topK", "top_k"), int, CHAT_TOP_K_MIN, CHAT_TOP_K_MAX),
    ("max_tokens", ("maxTokens", "max_tokens"), int, CHAT_MAX_TOKENS_MIN, CHAT_MAX_TOKENS_MAX),
)


def _coerce_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("bool not allowed")
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str) and value.strip():
        return float(value.strip())
    raise TypeError("unsupported type")


def _coerce_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("bool not allowed")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip():
        return int(value.strip())
    raise TypeError("unsupported type")


def extract_sampling(body: dict[str, Any]) -> SamplingParams:
    """Read optional sampling overrides from a request body.

    Raises:
        ValidationError: If a value has the wrong type or is out of range.
    """
    params = SamplingParams()
    for attr, keys, caster, minimum, maximum in _SAMPLING_FIELDS:
        raw_value = next((body[key] for key in keys if body.get(key) is not None), None)
        if raw_value is None:
            continue
        try:
            value = _coerce_int(raw_value) if caster is int else _coerce_float(raw_value)
        except (TypeError, ValueError):
            raise ValidationError(f"invalid_{attr}", f"{keys[0]} must be a valid {caster.__name__}") from None
        if not (minimum <= value <= maximum):
            raise ValidationError(
                f"{attr}_out_of_range",
                f"{keys[0]} must be between {minimum} and {maximum}",
            )
        setattr(params, attr, value)
    return params


def _resolve_request_id(*candidates: Any) -> str:
    for candidate in candidates:
        if candidate is None:
            continue
        if not isinstance(candidate, str) or not _REQUEST_ID_RE.match(candidate):
            raise ValidationError("invalid_request_id", "requestId must be 1-128 URL-safe characters")
        return candidate
    return uuid.uuid4().hex


def parse_generate_body(body: Any, *, header_request_id: str | None = None) -> GenerationRequest:
    """Validate a generate body and build the ``GenerationRequest``.

    The body's ``requestId`` wins over the ``X-Request-Id`` header; when
    neither is present a fresh id is generated.
    """
    if not isinstance(body, dict):
        raise ValidationError("invalid_body", "Request body must be a JSON object")

    model = body.get("model")
    prompt = body.get("prompt")
    if not isinstance(model, str) or not model.strip() or not isinstance(prompt, str) or not prompt:
        raise ValidationError("missing_model_or_prompt", "Model and prompt are required")
    if len(prompt) > PROMPT_MAX_CHARS:
        raise ValidationError("prompt_too_long", f"prompt exceeds {PROMPT_MAX_CHARS} characters")

    stream = body.get("stream", False)
    if not isinstance(stream, bool):
        raise ValidationError("invalid_stream", "stream must be a boolean")

    return GenerationRequest(
        model=model.strip(),
        prompt=prompt,
        stream=stream,
        sampling=extract_sampling(body),
        request_id=_resolve_request_id(body.get("requestId"), header_request_id),
    )


__all__ = ["extract_sampling", "parse_generate_body"]
