"""Inbound HTTP message parsing."""

from .generate import extract_sampling, parse_generate_body

__all__ = ["extract_sampling", "parse_generate_body"]
