"""Resume rewriting against extracted job descriptions."""

from .resume_rewriter import (
    DEFAULT_INSTRUCTIONS,
    SYSTEM_PROMPT,
    ResumeRewriter,
    RewriteError,
    RewrittenResume,
    build_user_prompt,
    is_eligible,
)

__all__ = [
    "DEFAULT_INSTRUCTIONS",
    "ResumeRewriter",
    "RewriteError",
    "RewrittenResume",
    "SYSTEM_PROMPT",
    "build_user_prompt",
    "is_eligible",
]
