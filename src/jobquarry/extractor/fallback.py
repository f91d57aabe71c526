"""
Fallback strategies, tried in order when the selector catalog finds nothing.

Each strategy is cheaper and more precise than the one after it. Later
strategies look at larger, less structured regions of the page, so the
expensive ones must positively confirm relevance instead of merely clearing
the negative checks.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

import structlog

from .models import TextCandidate
from .protocols import PageSnapshot, SnapshotElement
from .relevance import RelevanceFilter

logger = structlog.get_logger(__name__)

_LINE_SPACES = re.compile(r"[ \t]+")
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def strip_boilerplate(text: str, phrases: Sequence[str]) -> str:
    """Remove every literal occurrence of ``phrases`` (case-insensitive) and tidy whitespace.

    This is blind substring removal: a phrase embedded in a longer word is
    removed too.
    """
    for phrase in phrases:
        text = re.sub(re.escape(phrase), "", text, flags=re.IGNORECASE)
    lines = [_LINE_SPACES.sub(" ", line).strip() for line in text.split("\n")]
    return _EXTRA_BLANK_LINES.sub("\n\n", "\n".join(lines)).strip()


def _select(snapshot: PageSnapshot, selector: str, strategy: str) -> List[SnapshotElement]:
    try:
        return list(snapshot.select(selector))
    except Exception as e:
        logger.debug("Strategy query failed", strategy=strategy, selector=selector, error=str(e))
        return []


def _text_of(element: SnapshotElement, strategy: str) -> Optional[str]:
    try:
        return element.displayed_text().strip()
    except Exception as e:
        logger.debug("Could not read element text", strategy=strategy, error=str(e))
        return None


class AttributeSweepStrategy:
    """Elements whose identifying attribute mentions the job or its description."""

    name = "attribute_sweep"

    def __init__(
        self,
        relevance: RelevanceFilter,
        *,
        attributes: Sequence[str] = ("data-test-id",),
        fragments: Sequence[str] = ("job", "description", "detail"),
        min_length: int = 500,
    ) -> None:
        if not attributes or not fragments:
            raise ValueError("attribute sweep needs at least one attribute and one fragment")
        self.relevance = relevance
        self.min_length = min_length
        self.selector = ", ".join(f'[{attr}*="{fragment}"]' for attr in attributes for fragment in fragments)

    def attempt(self, snapshot: PageSnapshot) -> Optional[TextCandidate]:
        for element in _select(snapshot, self.selector, self.name):
            text = _text_of(element, self.name)
            if text and self.relevance.is_relevant(text, min_length=self.min_length):
                return TextCandidate(raw_text=text, strategy=self.name)
        return None


class ClassSweepStrategy:
    """Any element whose class or test id hints at a job posting, confirmed by a positive keyword.

    Wider than the attribute sweep: a bare ``job`` in any class name qualifies,
    so the text must also read like a description.
    """

    name = "class_sweep"

    def __init__(
        self,
        relevance: RelevanceFilter,
        *,
        selector: str = '[data-test-id], [class*="job"], [class*="description"]',
        min_length: int = 300,
    ) -> None:
        self.relevance = relevance
        self.selector = selector
        self.min_length = min_length

    def attempt(self, snapshot: PageSnapshot) -> Optional[TextCandidate]:
        for element in _select(snapshot, self.selector, self.name):
            text = _text_of(element, self.name)
            if not text or len(text) <= self.min_length:
                continue
            if self.relevance.is_relevant(text, min_length=0, require_positive=True):
                return TextCandidate(raw_text=text, strategy=self.name)
        return None


class ParagraphAggregationStrategy:
    """Descriptions split over many small leaf elements inside one container.

    For every container, the text of its leaf fragments (paragraphs, list
    items, spans, childless divs) is concatenated when each fragment is long
    enough and is not a metadata label.
    """

    name = "paragraph_aggregation"

    CONTAINERS = "section, div, article"
    FRAGMENTS = "p, li, div, span"
    BLOCK_FRAGMENTS = "p, li, div"

    def __init__(
        self,
        relevance: RelevanceFilter,
        *,
        fragment_min_length: int = 50,
        min_fragments: int = 3,
        aggregate_min_length: int = 500,
    ) -> None:
        self.relevance = relevance
        self.fragment_min_length = fragment_min_length
        self.min_fragments = min_fragments
        self.aggregate_min_length = aggregate_min_length

    def attempt(self, snapshot: PageSnapshot) -> Optional[TextCandidate]:
        for container in _select(snapshot, self.CONTAINERS, self.name):
            try:
                aggregate = self._aggregate(container)
            except Exception as e:
                logger.debug("Container aggregation failed", strategy=self.name, error=str(e))
                continue
            if aggregate is not None and not self.relevance.has_negative(aggregate):
                return TextCandidate(raw_text=aggregate, strategy=self.name)
        return None

    def _aggregate(self, container: SnapshotElement) -> Optional[str]:
        fragments: List[str] = []
        covered = set()
        for element in container.select(self.FRAGMENTS):
            if self._inside(element, covered, container):
                continue
            if element.select(self.BLOCK_FRAGMENTS):
                continue
            covered.add(element)

            text = element.displayed_text().strip()
            if len(text) > self.fragment_min_length and not self.relevance.has_metadata(text):
                fragments.append(text)

        if len(fragments) < self.min_fragments:
            return None
        aggregate = "\n\n".join(fragments)
        if len(aggregate) <= self.aggregate_min_length:
            return None
        return aggregate

    @staticmethod
    def _inside(element: SnapshotElement, covered: set, container: SnapshotElement) -> bool:
        for ancestor in element.iter_ancestors():
            if ancestor == container:
                return False
            if ancestor in covered:
                return True
        return False


class KeywordScanStrategy:
    """First generic container, in document order, that reads like a description.

    Unlike the largest-block scan this does not compare candidates, so a
    wrapper that also holds page metadata is skipped in favour of a later,
    cleaner block.
    """

    name = "keyword_scan"

    CONTAINERS = "div, section"

    def __init__(self, relevance: RelevanceFilter, *, min_length: int = 400) -> None:
        self.relevance = relevance
        self.min_length = min_length

    def attempt(self, snapshot: PageSnapshot) -> Optional[TextCandidate]:
        for element in _select(snapshot, self.CONTAINERS, self.name):
            text = _text_of(element, self.name)
            if not text or len(text) <= self.min_length:
                continue
            if self.relevance.has_metadata(text):
                continue
            if self.relevance.is_relevant(text, min_length=0, require_positive=True):
                return TextCandidate(raw_text=text, strategy=self.name)
        return None


class LargestBlockStrategy:
    """The longest container on the page that is positively a job description."""

    name = "largest_block"

    CONTAINERS = "div, section, article, main"

    def __init__(self, relevance: RelevanceFilter, *, min_length: int = 500) -> None:
        self.relevance = relevance
        self.min_length = min_length

    def attempt(self, snapshot: PageSnapshot) -> Optional[TextCandidate]:
        best: Optional[str] = None
        for element in _select(snapshot, self.CONTAINERS, self.name):
            text = _text_of(element, self.name)
            if not text or (best is not None and len(text) <= len(best)):
                continue
            if self.relevance.is_relevant(text, min_length=self.min_length, require_positive=True):
                best = text
        if best is None:
            return None
        return TextCandidate(raw_text=best, strategy=self.name)


class BoilerplateStripStrategy:
    """Degraded last resort: main-content text with known boilerplate removed."""

    name = "boilerplate_strip"

    REGIONS = 'main, article, [role="main"]'

    def __init__(
        self,
        relevance: RelevanceFilter,
        *,
        region_min_length: int = 500,
        min_length: int = 300,
    ) -> None:
        self.relevance = relevance
        self.region_min_length = region_min_length
        self.min_length = min_length

    def attempt(self, snapshot: PageSnapshot) -> Optional[TextCandidate]:
        phrases = self.relevance.keywords.boilerplate
        for region in _select(snapshot, self.REGIONS, self.name):
            text = _text_of(region, self.name)
            if not text or len(text) <= self.region_min_length:
                continue
            stripped = strip_boilerplate(text, phrases)
            if len(stripped) > self.min_length:
                return TextCandidate(raw_text=stripped, strategy=self.name)
        return None


class LineFilterStrategy:
    """Keeps the individual lines of the main region that look like prose."""

    name = "line_filter"

    REGION = 'main, [role="main"], .jobs-search__job-details'

    def __init__(
        self,
        relevance: RelevanceFilter,
        *,
        region_min_length: int = 1000,
        line_min_length: int = 20,
        min_lines: int = 5,
    ) -> None:
        self.relevance = relevance
        self.region_min_length = region_min_length
        self.line_min_length = line_min_length
        self.min_lines = min_lines

    def attempt(self, snapshot: PageSnapshot) -> Optional[TextCandidate]:
        regions = _select(snapshot, self.REGION, self.name)
        if not regions:
            return None
        text = _text_of(regions[0], self.name)
        if not text or len(text) <= self.region_min_length:
            return None

        lines = [
            line.strip()
            for line in text.split("\n")
            if len(line.strip()) > self.line_min_length
            and not self.relevance.has_negative(line)
            and not self.relevance.has_metadata(line)
        ]
        if len(lines) <= self.min_lines:
            return None
        return TextCandidate(raw_text="\n\n".join(lines), strategy=self.name)
