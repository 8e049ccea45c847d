"""Prompt content filters."""

from .keywords import KeywordMatcher

__all__ = ["KeywordMatcher"]
