"""
Configuration management for jobquarry using Pydantic.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

FALLBACK_STRATEGY_NAMES = (
    "attribute_sweep",
    "class_sweep",
    "paragraph_aggregation",
    "keyword_scan",
    "largest_block",
    "boilerplate_strip",
    "line_filter",
)

# --- Nested Configuration Models ---


class SelectorRuleSettings(BaseModel):
    """One custom selector catalog entry."""

    pattern: str = Field(min_length=1, description="CSS selector, or the substring an attribute must contain.")
    kind: Literal["css", "attribute_fragment"] = "css"
    priority: Optional[int] = Field(default=None, description="Lower runs first. Defaults to list position.")
    attribute: str = Field(default="class", min_length=1)

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("pattern must not be blank")
        return v


class ExtractionSettings(BaseModel):
    """Thresholds and ordering for the extraction strategy chain."""

    catalog_min_length: int = Field(default=300, ge=0, description="Length floor for selector catalog candidates.")
    attribute_sweep_min_length: int = Field(default=500, ge=0, description="Length floor for the attribute sweep.")
    largest_block_min_length: int = Field(default=500, ge=0, description="Length floor for the largest-block scan.")
    short_text_threshold: int = Field(
        default=200, ge=0, description="Catalog text shorter than this is re-read from the element's inner markup."
    )
    min_accept_length: int = Field(
        default=200, ge=1, description="No result shorter than this is ever accepted."
    )
    low_confidence_length: int = Field(
        default=300, ge=0, description="Accepted text shorter than this triggers the single re-scan."
    )
    retry_settle_delay: float = Field(default=2.0, ge=0.0, description="Seconds to wait before the re-scan.")
    fallback_order: List[str] = Field(
        default_factory=lambda: list(FALLBACK_STRATEGY_NAMES),
        description="Order of fallback strategies tried after the selector catalog.",
    )
    selectors: List[SelectorRuleSettings] = Field(
        default_factory=list,
        description="Custom selector catalog entries (pattern, kind, priority, attribute). Empty uses the default.",
    )
    sweep_attributes: List[str] = Field(default_factory=lambda: ["data-test-id"])
    sweep_fragments: List[str] = Field(default_factory=lambda: ["job", "description", "detail"])
    class_sweep_selector: str = Field(default='[data-test-id], [class*="job"], [class*="description"]')
    class_sweep_min_length: int = Field(default=300, ge=0, description="Text must be longer than this.")
    keyword_scan_min_length: int = Field(default=400, ge=0, description="Text must be longer than this.")
    fragment_min_length: int = Field(default=50, ge=0)
    min_fragments: int = Field(default=3, ge=1)
    aggregate_min_length: int = Field(default=500, ge=0)
    strip_region_min_length: int = Field(default=500, ge=0)
    strip_min_length: int = Field(default=300, ge=0)
    line_region_min_length: int = Field(default=1000, ge=0)
    line_min_length: int = Field(default=20, ge=0)
    min_lines: int = Field(default=5, ge=0)

    @field_validator("fallback_order")
    @classmethod
    def validate_fallback_order(cls, v: List[str]) -> List[str]:
        """Ensure every fallback strategy name is known and used once."""
        unknown = [name for name in v if name not in FALLBACK_STRATEGY_NAMES]
        if unknown:
            raise ValueError(
                f"Invalid strategy {unknown} in fallback_order. Available strategies: {list(FALLBACK_STRATEGY_NAMES)}"
            )
        if len(set(v)) != len(v):
            raise ValueError("fallback_order must not repeat a strategy")
        return v


class KeywordSettings(BaseModel):
    """Which keyword presets the relevance filter uses, plus local additions."""

    locales: List[str] = Field(default_factory=lambda: ["pt", "en"], description="Keyword presets to merge.")
    extra_negative: List[str] = Field(default_factory=list)
    extra_positive: List[str] = Field(default_factory=list)
    extra_metadata: List[str] = Field(default_factory=list)

    @field_validator("locales")
    @classmethod
    def validate_locales(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("locales must contain at least one keyword preset")
        return v


class DriverSettings(BaseModel):
    """Browser page driver configuration."""

    headless: bool = True
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        description="User-Agent string for the browser context.",
    )
    navigation_timeout: float = Field(default=30.0, gt=0, description="Navigation timeout in seconds.")
    wait_until: str = Field(default="networkidle", description="Playwright load state to wait for.")
    initial_settle: float = Field(default=2.0, ge=0.0)
    scroll_settle: float = Field(default=1.0, ge=0.0)
    expand_settle: float = Field(default=2.0, ge=0.0)
    selector_wait_timeout: float = Field(default=10.0, ge=0.0)
    content_settle: float = Field(default=3.0, ge=0.0)
    scroll_into_view_settle: float = Field(default=2.0, ge=0.0)
    expander_labels: List[str] = Field(default_factory=lambda: ["ver mais", "show more", "see more", "expandir"])
    expander_aria_fragment: str = Field(default="more")
    inter_posting_delay: float = Field(default=2.0, ge=0.0, description="Pause between postings in a batch.")
    job_view_url: str = Field(
        default="https://www.linkedin.com/jobs/view/{job_id}",
        description="Direct posting URL template used when a job id is found in the link.",
    )

    @field_validator("job_view_url")
    @classmethod
    def validate_job_view_url(cls, v: str) -> str:
        if "{job_id}" not in v:
            raise ValueError("job_view_url must contain the {job_id} placeholder")
        return v


class RewriterSettings(BaseModel):
    """Generative resume rewriting configuration."""

    enabled: bool = True
    api_key: Optional[str] = Field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    model: str = Field(default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-4"))
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4000, gt=0)
    min_description_length: int = Field(
        default=200, ge=0, description="Descriptions this short or shorter are never sent for rewriting."
    )
    prompt_path: Optional[Path] = Field(default=None, description="Custom instruction prompt file.")


class OutputSettings(BaseModel):
    """Where batch results are written."""

    descriptions_dir: Path = Field(default=Path("descriptions"))
    resumes_dir: Path = Field(default=Path("optimized_resumes"))
    summary_path: Path = Field(default=Path("run_summary.json"))


class MonitoringConfig(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to console.",
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "jobquarry"
    version: str = "0.1.0"
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    keywords: KeywordSettings = Field(default_factory=KeywordSettings)
    driver: DriverSettings = Field(default_factory=DriverSettings)
    rewriter: RewriterSettings = Field(default_factory=RewriterSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="JOBQUARRY_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "config.yaml",
        current_dir / "config.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path

    example_path = current_dir / "config.example.yaml"
    if example_path.exists():
        return example_path

    return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from ``path``, a discovered config file, or defaults."""
    config_path = path or find_config_file()
    if config_path is None:
        return Config()
    return Config.from_yaml(config_path)
