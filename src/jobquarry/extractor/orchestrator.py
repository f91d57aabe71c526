"""
Extraction orchestrator.

Runs the strategy chain (selector catalog, then the fallback strategies in
configured order) against a page snapshot and decides whether the result is
good enough. A result that looks incomplete gets exactly one re-scan on a
freshly captured snapshot after a settle delay; the second outcome is final.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional

import structlog

from ..config.config import ExtractionSettings
from .catalog import catalog_from_settings
from .fallback import (
    AttributeSweepStrategy,
    BoilerplateStripStrategy,
    ClassSweepStrategy,
    KeywordScanStrategy,
    LargestBlockStrategy,
    LineFilterStrategy,
    ParagraphAggregationStrategy,
)
from .keywords import DEFAULT_KEYWORDS, KeywordSets
from .models import ExtractionError, ExtractionResult
from .protocols import PageSnapshot, SnapshotSource, Strategy
from .relevance import RelevanceFilter
from .scanner import CandidateScanner, CatalogStrategy

logger = structlog.get_logger(__name__)

StrategyFactory = Callable[[RelevanceFilter, ExtractionSettings], Strategy]

FALLBACK_FACTORIES: Dict[str, StrategyFactory] = {
    AttributeSweepStrategy.name: lambda relevance, s: AttributeSweepStrategy(
        relevance,
        attributes=s.sweep_attributes,
        fragments=s.sweep_fragments,
        min_length=s.attribute_sweep_min_length,
    ),
    ClassSweepStrategy.name: lambda relevance, s: ClassSweepStrategy(
        relevance, selector=s.class_sweep_selector, min_length=s.class_sweep_min_length
    ),
    ParagraphAggregationStrategy.name: lambda relevance, s: ParagraphAggregationStrategy(
        relevance,
        fragment_min_length=s.fragment_min_length,
        min_fragments=s.min_fragments,
        aggregate_min_length=s.aggregate_min_length,
    ),
    KeywordScanStrategy.name: lambda relevance, s: KeywordScanStrategy(relevance, min_length=s.keyword_scan_min_length),
    LargestBlockStrategy.name: lambda relevance, s: LargestBlockStrategy(
        relevance, min_length=s.largest_block_min_length
    ),
    BoilerplateStripStrategy.name: lambda relevance, s: BoilerplateStripStrategy(
        relevance,
        region_min_length=s.strip_region_min_length,
        min_length=s.strip_min_length,
    ),
    LineFilterStrategy.name: lambda relevance, s: LineFilterStrategy(
        relevance,
        region_min_length=s.line_region_min_length,
        line_min_length=s.line_min_length,
        min_lines=s.min_lines,
    ),
}


class ExtractionOrchestrator:
    """
    Sequences the extraction strategies and applies the acceptability check.

    Holds no per-call state: one instance can serve any number of postings,
    including concurrently for independent pages.
    """

    def __init__(
        self,
        settings: Optional[ExtractionSettings] = None,
        keywords: Optional[KeywordSets] = None,
        *,
        strategies: Optional[List[Strategy]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Args:
            settings: thresholds and fallback ordering
            keywords: keyword sets for the relevance filter
            strategies: replaces the configured chain entirely (catalog included)
            sleep: coroutine used for the settle delay before the re-scan
        """
        self.settings = settings or ExtractionSettings()
        self.relevance = RelevanceFilter(keywords or DEFAULT_KEYWORDS, min_length=self.settings.catalog_min_length)
        self.strategies: List[Strategy] = strategies if strategies is not None else self._build_chain()
        self._sleep = sleep
        self.logger = logger.bind(component="ExtractionOrchestrator")

    def _build_chain(self) -> List[Strategy]:
        catalog = CatalogStrategy(
            self.relevance,
            rules=catalog_from_settings(self.settings.selectors),
            scanner=CandidateScanner(short_text_threshold=self.settings.short_text_threshold),
            min_length=self.settings.catalog_min_length,
        )
        chain: List[Strategy] = [catalog]
        for name in self.settings.fallback_order:
            chain.append(FALLBACK_FACTORIES[name](self.relevance, self.settings))
        return chain

    def run_chain(self, snapshot: PageSnapshot, *, passes: int = 1) -> ExtractionResult:
        """Run every strategy in order against one snapshot; first acceptable candidate wins."""
        for strategy in self.strategies:
            try:
                candidate = strategy.attempt(snapshot)
            except Exception as e:
                self.logger.warning(
                    "Strategy failed",
                    strategy=strategy.name,
                    url=snapshot.url,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue

            if candidate is None:
                self.logger.debug("Strategy found nothing", strategy=strategy.name, url=snapshot.url)
                continue

            text = candidate.raw_text.strip()
            if len(text) < self.settings.min_accept_length:
                self.logger.debug(
                    "Candidate below acceptance floor",
                    strategy=strategy.name,
                    length=len(text),
                    floor=self.settings.min_accept_length,
                )
                continue

            return ExtractionResult.accepted(text, strategy=strategy.name, passes=passes)

        return ExtractionResult.not_found(passes=passes)

    def is_low_confidence(self, result: ExtractionResult) -> bool:
        """Accepted text that is short or still reads like metadata."""
        if not result.is_accepted:
            return False
        return result.length_chars < self.settings.low_confidence_length or self.relevance.needs_retry(result.text)

    async def extract(self, source: SnapshotSource, *, url: Optional[str] = None) -> ExtractionResult:
        """
        Extract the job description from the page behind ``source``.

        Returns:
            ExtractionResult, ``NOT_FOUND`` when every strategy failed

        Raises:
            ExtractionError: if a snapshot cannot be captured
        """
        snapshot = await self._capture(source, url)
        result = self.run_chain(snapshot)

        if not self.is_low_confidence(result):
            self._log_outcome(result, url)
            return result

        self.logger.info(
            "Result looks incomplete, re-scanning once",
            url=url,
            strategy=result.strategy,
            length=result.length_chars,
            settle_delay=self.settings.retry_settle_delay,
        )
        await self._sleep(self.settings.retry_settle_delay)

        snapshot = await self._capture(source, url)
        result = self.run_chain(snapshot, passes=2)
        self._log_outcome(result, url)
        return result

    async def _capture(self, source: SnapshotSource, url: Optional[str]) -> PageSnapshot:
        try:
            return await source.capture()
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"Could not capture page snapshot: {e}", url=url) from e

    def _log_outcome(self, result: ExtractionResult, url: Optional[str]) -> None:
        if result.is_accepted:
            self.logger.info(
                "Description extracted",
                url=url,
                strategy=result.strategy,
                length=result.length_chars,
                passes=result.passes,
            )
        else:
            self.logger.info("Description not found", url=url, passes=result.passes)


class StaticSnapshotSource:
    """Snapshot source that always returns the same snapshot (saved pages, tests)."""

    def __init__(self, snapshot: PageSnapshot) -> None:
        self.snapshot = snapshot

    async def capture(self) -> PageSnapshot:
        return self.snapshot
