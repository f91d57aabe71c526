"""
jobquarry - job description extraction and resume tailoring.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .extractor import ExtractionOrchestrator, ExtractionResult
from .pipeline import BatchPipeline

__all__ = ["__version__", "BatchPipeline", "Config", "ExtractionOrchestrator", "ExtractionResult"]
