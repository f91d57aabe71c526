"""
Batch pipeline: for every posting in the list, extract the description, save
it, and optionally rewrite the resume against it.

Postings are processed strictly one after another with a pause in between.
A failure on one posting is recorded in the run summary and never stops the
batch.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncContextManager, Awaitable, Callable, List, Optional, Sequence

import structlog
from structlog.contextvars import bound_contextvars

from .config.config import Config
from .driver.links import normalize_job_link
from .driver.page_driver import BrowserSession, PlaywrightPageDriver
from .extractor.keywords import keywords_for_locales
from .extractor.models import ExtractionError, ExtractionResult
from .extractor.orchestrator import ExtractionOrchestrator
from .intake.postings import JobPosting, read_postings, read_resume, read_text_file
from .rewriter.resume_rewriter import ResumeRewriter, RewriteError, is_eligible
from .storage.summary import PostingOutcome, PostingStatus, RunSummary, write_run_summary
from .storage.writers import DescriptionWriter, ResumeDocumentWriter

logger = structlog.get_logger(__name__)

OpenPosting = Callable[[str], AsyncContextManager[PlaywrightPageDriver]]


def build_orchestrator(config: Config) -> ExtractionOrchestrator:
    """Orchestrator wired from the extraction and keyword settings."""
    kw = config.keywords
    keywords = keywords_for_locales(
        kw.locales,
        extra_negative=kw.extra_negative,
        extra_positive=kw.extra_positive,
        extra_metadata=kw.extra_metadata,
    )
    return ExtractionOrchestrator(config.extraction, keywords)


class BatchPipeline:
    """Runs extraction, persistence and rewriting over a list of postings."""

    def __init__(
        self,
        config: Config,
        *,
        orchestrator: Optional[ExtractionOrchestrator] = None,
        rewriter: Optional[ResumeRewriter] = None,
        resume: Optional[str] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self.orchestrator = orchestrator or build_orchestrator(config)
        self.rewriter = rewriter
        self.resume = resume
        self.descriptions = DescriptionWriter(config.output.descriptions_dir)
        self.resumes = ResumeDocumentWriter(config.output.resumes_dir)
        self._sleep = sleep
        self.logger = logger.bind(component="BatchPipeline")

    async def run(self, postings: Sequence[JobPosting], open_posting: OpenPosting) -> RunSummary:
        summary = RunSummary(started_at=datetime.now(timezone.utc))
        total = len(postings)
        self.logger.info("Batch started", postings=total, rewrite=self.rewriter is not None)

        for position, posting in enumerate(postings):
            with bound_contextvars(posting=posting.number, link=posting.link):
                self.logger.info("Processing posting", progress=f"{position + 1}/{total}")
                outcome = await self.process(posting, open_posting)
            summary.outcomes.append(outcome)

            if position < total - 1 and posting.link:
                await self._sleep(self.config.driver.inter_posting_delay)

        summary.finished_at = datetime.now(timezone.utc)
        self.logger.info("Batch finished", **summary.counts())
        return summary

    async def process(self, posting: JobPosting, open_posting: OpenPosting) -> PostingOutcome:
        if not posting.link:
            self.logger.warning("Posting has no link, skipping", row=posting.row)
            return PostingOutcome(index=posting.index, link=None, status=PostingStatus.SKIPPED)

        outcome = PostingOutcome(
            index=posting.index,
            link=posting.link,
            status=PostingStatus.ERROR,
            resolved_url=normalize_job_link(posting.link, self.config.driver.job_view_url),
        )

        try:
            async with open_posting(posting.link) as driver:
                outcome.resolved_url = driver.url
                result = await self.orchestrator.extract(driver, url=driver.url)
        except ExtractionError as e:
            self.logger.error("Extraction failed", error=str(e), url=e.url)
            outcome.error = str(e)
            return outcome
        except Exception as e:
            self.logger.error("Unexpected error while processing posting", error=str(e), error_type=type(e).__name__)
            outcome.error = f"{type(e).__name__}: {e}"
            return outcome

        outcome.status = PostingStatus.ACCEPTED if result.is_accepted else PostingStatus.NOT_FOUND
        outcome.strategy = result.strategy
        outcome.length = result.length_chars if result.is_accepted else 0
        outcome.passes = result.passes

        try:
            outcome.description_path = str(self.descriptions.write(posting.number, posting.link, result.text))
        except OSError as e:
            self.logger.error("Could not save description", error=str(e))
            outcome.error = str(e)

        await self._rewrite(posting, result, outcome)
        return outcome

    async def _rewrite(self, posting: JobPosting, result: ExtractionResult, outcome: PostingOutcome) -> None:
        if self.rewriter is None or self.resume is None:
            return
        if not is_eligible(result, self.config.rewriter.min_description_length):
            self.logger.info("Description too short or not found, skipping resume rewrite", length=outcome.length)
            return
        try:
            rewritten = await self.rewriter.rewrite(self.resume, result.text)
            outcome.resume_path = str(self.resumes.write(posting.number, posting.link or "", rewritten.text))
        except (RewriteError, OSError) as e:
            self.logger.error("Resume rewrite failed, continuing with next posting", error=str(e))
            outcome.error = str(e)


async def run_batch(
    config: Config,
    postings_path: Path,
    *,
    resume_path: Optional[Path] = None,
    prompt_path: Optional[Path] = None,
    rewrite: bool = True,
) -> RunSummary:
    """
    Read the inputs, drive the browser over every posting and write the run summary.

    Raises:
        IntakeError: if the posting list, resume or prompt file cannot be read;
            raised before the browser is started
    """
    postings: List[JobPosting] = read_postings(postings_path)

    rewriter: Optional[ResumeRewriter] = None
    resume: Optional[str] = None
    if rewrite and config.rewriter.enabled and resume_path is not None:
        resume = read_resume(resume_path)
        prompt_file = prompt_path or config.rewriter.prompt_path
        instructions = read_text_file(prompt_file, "prompt") if prompt_file else None
        if instructions:
            logger.info("Using custom rewrite prompt", path=str(prompt_file))
        rewriter = ResumeRewriter(config.rewriter, instructions=instructions or None)

    pipeline = BatchPipeline(config, rewriter=rewriter, resume=resume)
    async with BrowserSession(config.driver) as session:
        summary = await pipeline.run(postings, session.posting)

    write_run_summary(config.output.summary_path, summary)
    return summary
