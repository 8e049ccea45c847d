"""Blocked-keyword matching for prompts."""

from __future__ import annotations

from collections.abc import Iterable


class KeywordMatcher:
    """Case-insensitive substring matcher over a set of blocked keywords."""

    def __init__(self, keywords: Iterable[str] = ()) -> None:
        self._keywords: set[str] = set()
        for keyword in keywords:
            self.add(keyword)

    def add(self, keyword: str) -> bool:
        normalized = keyword.strip().lower()
        if not normalized or normalized in self._keywords:
            return False
        self._keywords.add(normalized)
        return True

    def remove(self, keyword: str) -> bool:
        normalized = keyword.strip().lower()
        if normalized not in self._keywords:
            return False
        self._keywords.discard(normalized)
        return True

    @property
    def keywords(self) -> list[str]:
        return sorted(self._keywords)

    def matches(self, text: str) -> str | None:
        """Return the first blocked keyword (alphabetically) found in ``text``."""
        if not text or not self._keywords:
            return None
        lowered = text.lower()
        for keyword in self.keywords:
            if keyword in lowered:
                return keyword
        return None

    def __len__(self) -> int:
        return len(self._keywords)


__all__ = ["KeywordMatcher"]
