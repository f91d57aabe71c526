"""Job-link normalization."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

import structlog

logger = structlog.get_logger(__name__)

JOB_VIEW_URL = "https://www.linkedin.com/jobs/view/{job_id}"

_QUERY_ID = re.compile(r"currentJobId=(\d+)")
_PATH_ID = re.compile(r"/jobs/view/(\d+)")


def extract_job_id(link: str) -> Optional[str]:
    """Return the posting id from a search link (``currentJobId``) or a posting path."""
    job_id: Optional[str] = None
    try:
        values = parse_qs(urlparse(link).query).get("currentJobId")
        if values:
            job_id = values[0]
    except ValueError:
        match = _QUERY_ID.search(link)
        job_id = match.group(1) if match else None

    if not job_id:
        match = _PATH_ID.search(link)
        job_id = match.group(1) if match else None
    return job_id


def normalize_job_link(link: str, template: str = JOB_VIEW_URL) -> str:
    """Rewrite ``link`` to the direct posting URL when it carries a job id."""
    link = link.strip()
    job_id = extract_job_id(link)
    if job_id is None:
        return link
    resolved = template.format(job_id=job_id)
    if resolved != link:
        logger.debug("Resolved job link", link=link, resolved=resolved, job_id=job_id)
    return resolved
