"""
Reading the batch inputs: the CSV list of job postings and the resume.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import structlog

logger = structlog.get_logger(__name__)

LINK_COLUMNS: Sequence[str] = ("link", "Link", "url", "URL")


class IntakeError(Exception):
    """A posting list or resume file is missing or unreadable."""


@dataclass(slots=True, frozen=True)
class JobPosting:
    """One row of the posting list.

    ``index`` is zero-based; ``link`` is ``None`` when the row has no link
    in any recognised column.
    """

    index: int
    link: Optional[str]
    row: Dict[str, str] = field(default_factory=dict)

    @property
    def number(self) -> int:
        return self.index + 1


def _link_of(row: Dict[str, str], columns: Sequence[str]) -> Optional[str]:
    for column in columns:
        value = (row.get(column) or "").strip()
        if value:
            return value
    return None


def read_postings(path: Path, *, link_columns: Sequence[str] = LINK_COLUMNS) -> List[JobPosting]:
    """
    Read postings from a CSV file whose first line is a header.

    Blank lines are skipped and cell values are trimmed.

    Raises:
        IntakeError: if the file is missing or is not valid CSV
    """
    path = Path(path)
    if not path.is_file():
        raise IntakeError(f"Posting list not found: {path}")

    postings: List[JobPosting] = []
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f, skipinitialspace=True)
            for row in reader:
                cleaned = {
                    (key or "").strip(): (value or "").strip()
                    for key, value in row.items()
                    if isinstance(value, str)
                }
                if not any(cleaned.values()):
                    continue
                postings.append(JobPosting(len(postings), _link_of(cleaned, link_columns), cleaned))
    except (csv.Error, UnicodeDecodeError) as e:
        raise IntakeError(f"Could not parse posting list {path}: {e}") from e

    logger.info("Posting list loaded", path=str(path), postings=len(postings))
    return postings


def read_text_file(path: Path, what: str) -> str:
    """Read a UTF-8 text file and strip surrounding whitespace."""
    path = Path(path)
    if not path.is_file():
        raise IntakeError(f"{what.capitalize()} file not found: {path}")
    try:
        return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise IntakeError(f"Could not read {what} file {path}: {e}") from e


def read_resume(path: Path) -> str:
    """
    Raises:
        IntakeError: if the resume is missing, unreadable or empty
    """
    resume = read_text_file(path, "resume")
    if not resume:
        raise IntakeError(f"Resume file is empty: {path}")
    logger.info("Resume loaded", path=str(path), length=len(resume))
    return resume
