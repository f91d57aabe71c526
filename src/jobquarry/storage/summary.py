"""Per-run JSON summary of what happened to every posting."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog

from ..utils.atomic import atomic_write_json

logger = structlog.get_logger(__name__)


class PostingStatus(str, Enum):
    ACCEPTED = "accepted"
    NOT_FOUND = "not_found"
    ERROR = "error"
    SKIPPED = "skipped"


@dataclass(slots=True)
class PostingOutcome:
    """What the batch did with one posting."""

    index: int
    link: Optional[str]
    status: PostingStatus
    resolved_url: Optional[str] = None
    strategy: Optional[str] = None
    length: int = 0
    passes: int = 0
    description_path: Optional[str] = None
    resume_path: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass(slots=True)
class RunSummary:
    started_at: datetime
    finished_at: Optional[datetime] = None
    outcomes: List[PostingOutcome] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        totals = {status.value: 0 for status in PostingStatus}
        for outcome in self.outcomes:
            totals[outcome.status.value] += 1
        return totals

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(timespec="seconds"),
            "finished_at": self.finished_at.isoformat(timespec="seconds") if self.finished_at else None,
            "total": len(self.outcomes),
            "counts": self.counts(),
            "postings": [outcome.to_dict() for outcome in self.outcomes],
        }


def write_run_summary(path: Path, summary: RunSummary) -> Path:
    path = Path(path)
    atomic_write_json(path, summary.to_dict())
    logger.info("Run summary saved", path=str(path), **summary.counts())
    return path
