"""
Output files for a batch: one description text file and, when rewriting is
enabled, one resume document per posting.
"""

from __future__ import annotations

import io
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog
from docx import Document
from docx.shared import Pt

from ..utils.atomic import atomic_write_bytes, atomic_write_text

logger = structlog.get_logger(__name__)

SEPARATOR = "=" * 80


def _timestamp(at: Optional[datetime]) -> str:
    return (at or datetime.now(timezone.utc)).isoformat(timespec="seconds")


def format_description(link: str, text: str, extracted_at: Optional[datetime] = None) -> str:
    return (
        f"JOB LINK: {link}\n\n"
        f"EXTRACTED AT: {_timestamp(extracted_at)}\n\n"
        f"DESCRIPTION:\n{SEPARATOR}\n\n"
        f"{text}\n"
    )


class DescriptionWriter:
    """Writes ``posting_<n>.txt`` files."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, number: int) -> Path:
        return self.directory / f"posting_{number}.txt"

    def write(self, number: int, link: str, text: str, *, extracted_at: Optional[datetime] = None) -> Path:
        path = self.path_for(number)
        atomic_write_text(path, format_description(link, text, extracted_at))
        logger.info("Description saved", path=str(path), length=len(text))
        return path


class ResumeDocumentWriter:
    """Writes rewritten resumes as ``resume_<n>.docx`` documents."""

    TITLE_SIZE = Pt(14)
    BODY_SIZE = Pt(12)

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, number: int) -> Path:
        return self.directory / f"resume_{number}.docx"

    def render(self, number: int, link: str, resume: str, *, generated_at: Optional[datetime] = None) -> bytes:
        doc = Document()

        title = doc.add_paragraph().add_run(f"OPTIMIZED RESUME FOR POSTING {number}")
        title.bold = True
        title.font.size = self.TITLE_SIZE

        for line in (SEPARATOR, f"JOB LINK: {link}", f"GENERATED AT: {_timestamp(generated_at)}", SEPARATOR):
            doc.add_paragraph().add_run(line).font.size = self.BODY_SIZE

        for paragraph in resume.split("\n"):
            doc.add_paragraph().add_run(paragraph.rstrip()).font.size = self.BODY_SIZE

        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    def write(self, number: int, link: str, resume: str, *, generated_at: Optional[datetime] = None) -> Path:
        path = self.path_for(number)
        atomic_write_bytes(path, self.render(number, link, resume, generated_at=generated_at))
        logger.info("Resume saved", path=str(path))
        return path
