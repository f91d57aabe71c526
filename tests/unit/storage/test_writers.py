"""Tests for description and resume output files."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from docx import Document

from jobquarry.extractor.models import NOT_FOUND_TEXT
from jobquarry.storage.writers import SEPARATOR, DescriptionWriter, ResumeDocumentWriter, format_description

WHEN = datetime(2024, 5, 17, 14, 30, tzinfo=timezone.utc)


@pytest.mark.unit
class TestDescriptionWriter:
    def test_format(self):
        text = format_description("https://example.com/job", "Build things.", WHEN)
        assert text == (
            "JOB LINK: https://example.com/job\n\n"
            "EXTRACTED AT: 2024-05-17T14:30:00+00:00\n\n"
            f"DESCRIPTION:\n{SEPARATOR}\n\n"
            "Build things.\n"
        )

    def test_writes_numbered_file(self, tmp_path):
        writer = DescriptionWriter(tmp_path / "descriptions")
        path = writer.write(3, "https://example.com/job", "Build things.", extracted_at=WHEN)
        assert path == tmp_path / "descriptions" / "posting_3.txt"
        assert "Build things." in path.read_text(encoding="utf-8")

    def test_not_found_sentinel_is_written(self, tmp_path):
        path = DescriptionWriter(tmp_path).write(1, "https://example.com/job", NOT_FOUND_TEXT)
        assert NOT_FOUND_TEXT in path.read_text(encoding="utf-8")

    def test_no_temporary_files_left(self, tmp_path):
        DescriptionWriter(tmp_path).write(1, "https://example.com/job", "Text")
        assert [p.name for p in tmp_path.iterdir()] == ["posting_1.txt"]


@pytest.mark.unit
class TestResumeDocumentWriter:
    def test_document_layout(self, tmp_path):
        writer = ResumeDocumentWriter(tmp_path / "resumes")
        path = writer.write(2, "https://example.com/job", "Jane Doe\nPython developer", generated_at=WHEN)

        assert path.name == "resume_2.docx"
        paragraphs = [p.text for p in Document(str(path)).paragraphs]
        assert paragraphs[0] == "OPTIMIZED RESUME FOR POSTING 2"
        assert paragraphs[1] == SEPARATOR
        assert paragraphs[2] == "JOB LINK: https://example.com/job"
        assert paragraphs[3] == "GENERATED AT: 2024-05-17T14:30:00+00:00"
        assert paragraphs[5:] == ["Jane Doe", "Python developer"]

    def test_title_is_bold(self, tmp_path):
        path = ResumeDocumentWriter(tmp_path).write(1, "https://example.com/job", "Resume")
        title = Document(str(path)).paragraphs[0].runs[0]
        assert title.bold
