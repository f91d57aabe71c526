"""
Data models for job-description extraction.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

NOT_FOUND_TEXT = "Description not found - the full job description could not be located on the page"


class SelectorKind(Enum):
    """How a SelectorRule pattern is interpreted."""

    CSS = "css"
    ATTRIBUTE_FRAGMENT = "attribute_fragment"


class Classification(Enum):
    """Outcome of the relevance filter."""

    RELEVANT = "relevant"
    REJECTED = "rejected"


class ExtractionStatus(Enum):
    """Terminal status of one extraction call."""

    ACCEPTED = "accepted"
    NOT_FOUND = "not_found"


@dataclass(slots=True, frozen=True)
class SelectorRule:
    """A structural hint from the selector catalog.

    CSS rules carry a complete selector in ``pattern``. Attribute-fragment rules
    carry a substring that must appear in ``attribute`` of the element.
    """

    pattern: str
    kind: SelectorKind
    priority: int
    attribute: str = "class"

    def __post_init__(self) -> None:
        if not self.pattern.strip():
            raise ValueError("SelectorRule pattern must not be empty")

    def to_css(self) -> str:
        if self.kind is SelectorKind.CSS:
            return self.pattern
        fragment = self.pattern.replace("\\", "\\\\").replace('"', '\\"')
        return f'[{self.attribute}*="{fragment}"]'


@dataclass(slots=True, frozen=True)
class TextCandidate:
    """A block of text produced by one rule or strategy, pending classification."""

    raw_text: str
    source_rule: Optional[SelectorRule] = None
    strategy: Optional[str] = None

    @property
    def length_chars(self) -> int:
        return len(self.raw_text)


@dataclass(slots=True, frozen=True)
class ExtractionResult:
    """Result of one extraction call.

    ``NOT_FOUND`` results always carry ``NOT_FOUND_TEXT`` so callers can tell
    "ran but found nothing" apart from an empty or failed run.
    """

    status: ExtractionStatus
    text: str
    strategy: Optional[str] = None
    passes: int = 1

    def __post_init__(self) -> None:
        """Validate the result."""
        if self.status is ExtractionStatus.NOT_FOUND and self.text != NOT_FOUND_TEXT:
            raise ValueError("NOT_FOUND results must carry the not-found sentinel text")
        if self.status is ExtractionStatus.ACCEPTED and not self.text.strip():
            raise ValueError("ACCEPTED results must carry text")

    @classmethod
    def accepted(cls, text: str, strategy: Optional[str] = None, passes: int = 1) -> ExtractionResult:
        return cls(status=ExtractionStatus.ACCEPTED, text=text, strategy=strategy, passes=passes)

    @classmethod
    def not_found(cls, passes: int = 1) -> ExtractionResult:
        return cls(status=ExtractionStatus.NOT_FOUND, text=NOT_FOUND_TEXT, strategy=None, passes=passes)

    @property
    def is_accepted(self) -> bool:
        return self.status is ExtractionStatus.ACCEPTED

    @property
    def length_chars(self) -> int:
        return len(self.text)


class ExtractionError(Exception):
    """The page snapshot could not be obtained, so nothing could be extracted."""

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url
