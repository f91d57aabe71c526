"""
Relevance filter: decides whether a block of text is job-description content
or page chrome (navigation, auth prompts, legal boilerplate, metadata labels).

Pure functions of the input text; no page access.
"""

from __future__ import annotations

from typing import Iterable, Optional

import structlog

from .keywords import DEFAULT_KEYWORDS, KeywordSets
from .models import Classification

logger = structlog.get_logger(__name__)

DEFAULT_MIN_LENGTH = 300


def find_phrase(text: str, phrases: Iterable[str]) -> Optional[str]:
    """Return the first phrase contained in ``text`` (case-insensitive), if any."""
    lowered = text.lower()
    for phrase in sorted(phrases):
        if phrase in lowered:
            return phrase
    return None


class RelevanceFilter:
    """Classifies text blocks against a length floor and keyword sets."""

    def __init__(self, keywords: Optional[KeywordSets] = None, min_length: int = DEFAULT_MIN_LENGTH) -> None:
        self.keywords = keywords or DEFAULT_KEYWORDS
        self.min_length = min_length

    def rejection_reason(
        self,
        text: str,
        *,
        min_length: Optional[int] = None,
        require_positive: bool = False,
    ) -> Optional[str]:
        """Return why ``text`` is rejected, or None when it is relevant.

        Rules apply in order and the first match wins: length floor, negative
        keyword, then (only when ``require_positive``) the positive keyword
        requirement.
        """
        floor = self.min_length if min_length is None else min_length
        if len(text) < floor:
            return f"too short ({len(text)} < {floor})"

        negative = find_phrase(text, self.keywords.negative)
        if negative is not None:
            return f"negative keyword '{negative}'"

        if require_positive and find_phrase(text, self.keywords.positive) is None:
            return "no positive keyword"

        return None

    def classify(
        self,
        text: str,
        *,
        min_length: Optional[int] = None,
        require_positive: bool = False,
    ) -> Classification:
        reason = self.rejection_reason(text, min_length=min_length, require_positive=require_positive)
        if reason is None:
            return Classification.RELEVANT
        logger.debug("Text block rejected", reason=reason, length=len(text))
        return Classification.REJECTED

    def is_relevant(self, text: str, *, min_length: Optional[int] = None, require_positive: bool = False) -> bool:
        verdict = self.classify(text, min_length=min_length, require_positive=require_positive)
        return verdict is Classification.RELEVANT

    def has_negative(self, text: str) -> bool:
        return find_phrase(text, self.keywords.negative) is not None

    def has_metadata(self, text: str) -> bool:
        return find_phrase(text, self.keywords.metadata) is not None

    def needs_retry(self, text: str) -> bool:
        """True when accepted text still looks like metadata rather than a description."""
        return find_phrase(text, self.keywords.retry_markers) is not None


_default_filter = RelevanceFilter()


def classify(text: str, *, min_length: int = DEFAULT_MIN_LENGTH, require_positive: bool = False) -> Classification:
    """Classify ``text`` with the default keyword sets."""
    return _default_filter.classify(text, min_length=min_length, require_positive=require_positive)
