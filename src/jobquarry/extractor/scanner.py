"""
Candidate scanner: walks the selector catalog against a snapshot and yields
the displayed text of the first element each rule matches.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

import structlog

from .catalog import SELECTOR_CATALOG
from .models import SelectorRule, TextCandidate
from .protocols import PageSnapshot
from .relevance import RelevanceFilter

logger = structlog.get_logger(__name__)

DEFAULT_SHORT_TEXT_THRESHOLD = 200


class CandidateScanner:
    """Turns selector rules into text candidates, in rule order."""

    def __init__(self, short_text_threshold: int = DEFAULT_SHORT_TEXT_THRESHOLD) -> None:
        self.short_text_threshold = short_text_threshold

    def iter_candidates(self, snapshot: PageSnapshot, rules: Sequence[SelectorRule]) -> Iterator[TextCandidate]:
        """Lazily yield one candidate per rule that matches an element.

        A rule that raises while being queried yields nothing; the scan goes on
        with the next rule.
        """
        for rule in rules:
            try:
                candidate = self._candidate_for(snapshot, rule)
            except Exception as e:
                logger.debug(
                    "Selector rule failed",
                    rule=rule.pattern,
                    priority=rule.priority,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue
            if candidate is not None:
                yield candidate

    def scan(self, snapshot: PageSnapshot, rules: Sequence[SelectorRule] = SELECTOR_CATALOG) -> List[TextCandidate]:
        return list(self.iter_candidates(snapshot, rules))

    def _candidate_for(self, snapshot: PageSnapshot, rule: SelectorRule) -> Optional[TextCandidate]:
        element = snapshot.select_one(rule.to_css())
        if element is None:
            return None

        text = element.displayed_text().strip()
        if len(text) < self.short_text_threshold:
            # Content collapsed inline by styles is still in the markup.
            recovered = element.detached_text().strip()
            if recovered:
                text = recovered

        return TextCandidate(raw_text=text, source_rule=rule, strategy=CatalogStrategy.name)


class CatalogStrategy:
    """First strategy of the chain: the selector catalog, rejection checks only."""

    name = "catalog"

    def __init__(
        self,
        relevance: RelevanceFilter,
        *,
        rules: Sequence[SelectorRule] = SELECTOR_CATALOG,
        scanner: Optional[CandidateScanner] = None,
        min_length: int = 300,
    ) -> None:
        self.relevance = relevance
        self.rules = tuple(rules)
        self.scanner = scanner or CandidateScanner()
        self.min_length = min_length

    def attempt(self, snapshot: PageSnapshot) -> Optional[TextCandidate]:
        for candidate in self.scanner.iter_candidates(snapshot, self.rules):
            if self.relevance.is_relevant(candidate.raw_text, min_length=self.min_length):
                logger.debug(
                    "Catalog rule matched",
                    rule=candidate.source_rule.pattern if candidate.source_rule else None,
                    length=candidate.length_chars,
                )
                return candidate
        return None
