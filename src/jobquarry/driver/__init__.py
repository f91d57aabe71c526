"""Browser page driver and job-link handling."""

from .links import JOB_VIEW_URL, extract_job_id, normalize_job_link
from .page_driver import BrowserSession, PlaywrightPageDriver

__all__ = ["BrowserSession", "JOB_VIEW_URL", "PlaywrightPageDriver", "extract_job_id", "normalize_job_link"]
