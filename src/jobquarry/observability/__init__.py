"""Logging setup for jobquarry."""

from __future__ import annotations

from .logging import add_posting_context, configure_logging

__all__ = ["add_posting_context", "configure_logging"]
