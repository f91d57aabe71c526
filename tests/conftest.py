"""
Shared fixtures for jobquarry tests.

Pages are built from small HTML templates so each test states exactly which
structures exist on the page. None of the filler text may contain a negative
keyword from either keyword preset.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence
from unittest.mock import AsyncMock

import pytest

from jobquarry.config.config import ExtractionSettings
from jobquarry.extractor.models import ExtractionError
from jobquarry.snapshot import HtmlSnapshot

FILLER_SENTENCE = "Our team builds reliable payment services with Python and modern cloud tooling. "

DESCRIPTION_PARAGRAPHS = [
    "We need a backend engineer to build and operate the services behind our payments "
    "platform, working closely with product managers and designers.",
    "Responsibilities include designing, building and maintaining Python services that process "
    "millions of transactions per day across several regions.",
    "Requirements: at least four years of professional experience with Python, relational databases "
    "and asynchronous programming in production systems.",
    "Benefits: health insurance, flexible hours, a yearly learning budget and the option to work "
    "remote for most of the week with an inclusive team.",
]

PAGE_CHROME_TOP = (
    "<header><nav><a href='/'>LinkedIn</a> <a href='/login'>Sign in</a> "
    "<a href='/signup'>Join now</a></nav></header>"
)
PAGE_CHROME_BOTTOM = "<footer><p>Privacy Policy</p><p>Cookie Policy</p></footer>"


def filler(n: int) -> str:
    """Exactly ``n`` characters of description-like prose with no leading or trailing space."""
    text = (FILLER_SENTENCE * (n // len(FILLER_SENTENCE) + 1))[:n]
    if text.endswith(" "):
        text = text[:-1] + "x"
    return text


def job_page(body: str, *, chrome: bool = True, title: str = "Backend Engineer") -> str:
    """Wrap ``body`` in a minimal job page, with navigation chrome by default."""
    top = PAGE_CHROME_TOP if chrome else ""
    bottom = PAGE_CHROME_BOTTOM if chrome else ""
    return (
        "<!DOCTYPE html><html><head><title>{title}</title>"
        "<script>window.tracking = {{ 'sign in': true }};</script></head>"
        "<body>{top}<h1>{title}</h1>{body}{bottom}</body></html>"
    ).format(title=title, top=top, body=body, bottom=bottom)


class SnapshotSequence:
    """Snapshot source returning a fixed series of snapshots; the last one repeats."""

    def __init__(self, snapshots: Sequence[HtmlSnapshot], *, fail_on: Optional[int] = None) -> None:
        self.snapshots: List[HtmlSnapshot] = list(snapshots)
        self.fail_on = fail_on
        self.calls = 0

    async def capture(self) -> HtmlSnapshot:
        self.calls += 1
        if self.fail_on is not None and self.calls == self.fail_on:
            raise RuntimeError("page crashed")
        return self.snapshots[min(self.calls, len(self.snapshots)) - 1]


@pytest.fixture
def page() -> Callable[..., str]:
    return job_page


@pytest.fixture
def snapshot_of() -> Callable[..., HtmlSnapshot]:
    def _make(html: str, url: str = "https://www.linkedin.com/jobs/view/4242") -> HtmlSnapshot:
        return HtmlSnapshot(html, url=url)

    return _make


@pytest.fixture
def description_paragraphs() -> List[str]:
    return list(DESCRIPTION_PARAGRAPHS)


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Replacement for ``asyncio.sleep`` that records the requested delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def extraction_settings() -> ExtractionSettings:
    return ExtractionSettings()


@pytest.fixture
def failing_source():
    class _FailingSource:
        async def capture(self):
            raise ExtractionError("navigation failed", url="https://example.com/job")

    return _FailingSource()


@pytest.fixture
def make_filler() -> Callable[[int], str]:
    return filler


@pytest.fixture
def sequence_source() -> type:
    return SnapshotSequence
