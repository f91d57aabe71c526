"""Batch inputs: posting list and resume."""

from .postings import LINK_COLUMNS, IntakeError, JobPosting, read_postings, read_resume, read_text_file

__all__ = ["IntakeError", "JobPosting", "LINK_COLUMNS", "read_postings", "read_resume", "read_text_file"]
