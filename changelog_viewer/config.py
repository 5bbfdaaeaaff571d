"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: Retrieval of the changelog source
- FilterConfig: Filter and expansion behavior
- OutputConfig: Output format and presentation settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import yaml


@dataclass
class FetchConfig:
    """Configuration for retrieving the changelog document.

    Attributes:
        timeout_seconds: HTTP request timeout
        retries: Retry attempts after a failed request (0 means fail immediately)
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 20.0
    retries: int = 0
    trust_env: bool = True
    user_agent: str = "changelog-viewer/0.1"


@dataclass
class FilterConfig:
    """Configuration for filtering.

    Attributes:
        check_dates: Reject documents whose entry dates are not ISO 8601
        expand_unfiltered: Show every entry expanded in static output when no filter is active
    """

    check_dates: bool = True
    expand_unfiltered: bool = False


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        format: "text", "html", "markdown" or "json"
        commit_length: Characters of a commit hash shown in badges
        title_max_chars: Truncation length for change titles in breadcrumbs
        base_url: Base URL used when building shareable links
    """

    format: str = "text"
    commit_length: int = 7
    title_max_chars: int = 50
    base_url: str = ""


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "WARNING"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "changelog-viewer.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    filter: FilterConfig = field(default_factory=FilterConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig; unknown keys are ignored."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update({k: v for k, v in value.items() if k in data[key]})
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        fetch=FetchConfig(**data["fetch"]),
        filter=FilterConfig(**data["filter"]),
        output=OutputConfig(**data["output"]),
        logging=LoggingConfig(**data["logging"]),
    )
