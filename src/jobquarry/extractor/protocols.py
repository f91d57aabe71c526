"""
Protocols for page snapshots and pluggable extraction strategies.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Protocol, runtime_checkable

from .models import TextCandidate


@runtime_checkable
class SnapshotElement(Protocol):
    """One element of a rendered document tree."""

    @property
    def tag(self) -> str: ...

    def get_attribute(self, name: str) -> Optional[str]: ...

    def displayed_text(self) -> str:
        """Text as the page displays it; hidden content does not count."""
        ...

    def detached_text(self) -> str:
        """Text of the element's inner markup re-read in a detached container."""
        ...

    def select(self, selector: str) -> List["SnapshotElement"]: ...

    def iter_ancestors(self) -> Iterator["SnapshotElement"]: ...


@runtime_checkable
class PageSnapshot(Protocol):
    """Read-only view of a rendered document at one point in time."""

    url: Optional[str]

    def select_one(self, selector: str) -> Optional[SnapshotElement]: ...

    def select(self, selector: str) -> List[SnapshotElement]: ...


@runtime_checkable
class SnapshotSource(Protocol):
    """Produces fresh snapshots of an already-loaded page (the page driver)."""

    async def capture(self) -> PageSnapshot:
        """Capture the page as it is rendered right now."""
        ...


@runtime_checkable
class Strategy(Protocol):
    """One step of the extraction chain."""

    name: str

    def attempt(self, snapshot: PageSnapshot) -> Optional[TextCandidate]:
        """Return an acceptable candidate, or None when this strategy finds nothing."""
        ...
