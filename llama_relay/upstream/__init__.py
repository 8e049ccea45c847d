"""Inference backend client and NDJSON stream decoding."""

from .client import InferenceClient, UpstreamStream
from .decoder import NdjsonLineDecoder, decode_line, parse_line
from .settings import LlmSettings
from .types import GenerationRequest, SamplingParams, StreamFragment, UpstreamLine

__all__ = [
    "InferenceClient",
    "UpstreamStream",
    "NdjsonLineDecoder",
    "decode_line",
    "parse_line",
    "LlmSettings",
    "GenerationRequest",
    "SamplingParams",
    "StreamFragment",
    "UpstreamLine",
]
