"""Batch output files."""

from .summary import PostingOutcome, PostingStatus, RunSummary, write_run_summary
from .writers import DescriptionWriter, ResumeDocumentWriter, format_description

__all__ = [
    "DescriptionWriter",
    "PostingOutcome",
    "PostingStatus",
    "ResumeDocumentWriter",
    "RunSummary",
    "format_description",
    "write_run_summary",
]
