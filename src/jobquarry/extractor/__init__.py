"""
jobquarry content extraction.

Recovers the job-description text from a rendered job posting with a chain
of strategies that progressively relaxes structural assumptions:

1. Selector catalog: known description containers, most reliable first
2. Attribute sweep: elements whose test id mentions the job or description
3. Class sweep: job-ish class names or test ids, confirmed by a positive keyword
4. Paragraph aggregation: descriptions split over many small elements
5. Keyword scan: the first container that reads as a description
6. Largest block: the longest container that positively reads as a description
7. Boilerplate strip: main-content text with known chrome removed
8. Line filter: prose-looking lines of the main region

The orchestrator re-scans once when the accepted text looks incomplete.
"""

from .catalog import DEFAULT_SELECTOR_RULES, SELECTOR_CATALOG, build_catalog, catalog_from_settings
from .fallback import (
    AttributeSweepStrategy,
    BoilerplateStripStrategy,
    ClassSweepStrategy,
    KeywordScanStrategy,
    LargestBlockStrategy,
    LineFilterStrategy,
    ParagraphAggregationStrategy,
    strip_boilerplate,
)
from .keywords import DEFAULT_KEYWORDS, ENGLISH, PORTUGUESE, KeywordSets, keywords_for_locales
from .models import (
    NOT_FOUND_TEXT,
    Classification,
    ExtractionError,
    ExtractionResult,
    ExtractionStatus,
    SelectorKind,
    SelectorRule,
    TextCandidate,
)
from .orchestrator import ExtractionOrchestrator, StaticSnapshotSource
from .protocols import PageSnapshot, SnapshotElement, SnapshotSource, Strategy
from .relevance import RelevanceFilter, classify
from .scanner import CandidateScanner, CatalogStrategy

__all__ = [
    "AttributeSweepStrategy",
    "BoilerplateStripStrategy",
    "CandidateScanner",
    "CatalogStrategy",
    "ClassSweepStrategy",
    "Classification",
    "DEFAULT_KEYWORDS",
    "DEFAULT_SELECTOR_RULES",
    "ENGLISH",
    "ExtractionError",
    "ExtractionOrchestrator",
    "ExtractionResult",
    "ExtractionStatus",
    "KeywordSets",
    "KeywordScanStrategy",
    "LargestBlockStrategy",
    "LineFilterStrategy",
    "NOT_FOUND_TEXT",
    "PORTUGUESE",
    "PageSnapshot",
    "ParagraphAggregationStrategy",
    "RelevanceFilter",
    "SELECTOR_CATALOG",
    "SelectorKind",
    "SelectorRule",
    "SnapshotElement",
    "SnapshotSource",
    "StaticSnapshotSource",
    "Strategy",
    "TextCandidate",
    "build_catalog",
    "catalog_from_settings",
    "classify",
    "keywords_for_locales",
    "strip_boilerplate",
]
