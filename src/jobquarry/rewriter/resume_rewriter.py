"""
Generative resume rewriting.

Sends the candidate's resume together with an extracted job description to
an OpenAI chat-completions model and returns a resume tailored to the
posting for applicant tracking systems.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import openai
import structlog

from ..config.config import RewriterSettings
from ..extractor.models import NOT_FOUND_TEXT, ExtractionResult

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = (
    "You are an expert in optimizing resumes for applicant tracking systems (ATS). "
    "Always keep every piece of information truthful and tailor the resume to the job posting."
)

DEFAULT_INSTRUCTIONS = """\
You are a recruiting specialist who optimizes resumes for applicant tracking systems (ATS).

Your task is to write an ATS-friendly resume based on the original resume and the job description below.

IMPORTANT INSTRUCTIONS:
1. Keep ALL the truthful information from the original resume
2. Match keywords and skills to the job description
3. Use simple, ATS-compatible formatting (no complex tables, columns or graphics)
4. Organize sections clearly and consistently
5. Highlight the experience and skills most relevant to the position
6. Use keywords from the job description where appropriate
7. Keep the resume professional and objective
8. Make sure the resume is easy for ATS software to parse

Return ONLY the optimized resume, without any additional explanation."""


class RewriteError(Exception):
    """The generative model could not produce a rewritten resume."""


def is_eligible(result: ExtractionResult, min_length: int = 200) -> bool:
    """Only accepted descriptions longer than ``min_length`` are worth rewriting against."""
    return result.is_accepted and result.length_chars > min_length and NOT_FOUND_TEXT not in result.text


def build_user_prompt(resume: str, description: str, instructions: Optional[str] = None) -> str:
    return (
        f"{(instructions or DEFAULT_INSTRUCTIONS).strip()}\n\n"
        f"ORIGINAL RESUME:\n{resume}\n\n"
        f"JOB DESCRIPTION:\n{description}"
    )


@dataclass(slots=True, frozen=True)
class RewrittenResume:
    text: str
    model: str
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


class ResumeRewriter:
    """Wraps an ``openai.AsyncOpenAI`` client for resume rewriting."""

    def __init__(
        self,
        settings: Optional[RewriterSettings] = None,
        *,
        instructions: Optional[str] = None,
        client: Optional[Any] = None,
    ) -> None:
        self.settings = settings or RewriterSettings()
        self.instructions = instructions
        self._client = client
        self.logger = logger.bind(component="ResumeRewriter", model=self.settings.model)

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self.settings.api_key:
                raise RewriteError("OPENAI_API_KEY is not configured")
            self._client = openai.AsyncOpenAI(api_key=self.settings.api_key)
        return self._client

    async def rewrite(self, resume: str, description: str) -> RewrittenResume:
        """
        Produce a resume tailored to ``description``.

        Raises:
            RewriteError: on API failure or an empty completion
        """
        s = self.settings
        self.logger.info("Rewriting resume", description_length=len(description))
        try:
            response = await self.client.chat.completions.create(
                model=s.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_user_prompt(resume, description, self.instructions)},
                ],
                temperature=s.temperature,
                max_tokens=s.max_tokens,
            )
        except openai.OpenAIError as e:
            raise RewriteError(f"Resume rewrite request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise RewriteError("Model returned an empty resume")

        usage = getattr(response, "usage", None)
        rewritten = RewrittenResume(
            text=content.strip(),
            model=s.model,
            input_tokens=getattr(usage, "prompt_tokens", None),
            output_tokens=getattr(usage, "completion_tokens", None),
        )
        self.logger.info("Resume rewritten", length=len(rewritten.text), output_tokens=rewritten.output_tokens)
        return rewritten
