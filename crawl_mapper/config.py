"""
Loading and validation of the CrawlMapper batch configuration.
Pydantic describes the schema and checks the values.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class BatchConfig(BaseModel):
    """Budgets and caps for one crawl-and-search run.

    The defaults fit a serverless invocation limited to roughly half a minute:
    five pages fetched at a time, at most 25 seconds overall, and no new batch
    once fewer than 5 seconds remain.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    batch_size: int = Field(5, ge=1, description="URLs fetched concurrently per batch.")
    per_url_timeout: float = Field(10.0, gt=0, description="Timeout for one page fetch (seconds).")
    inter_batch_delay: float = Field(1.0, ge=0, description="Pause between batches (seconds).")
    total_budget: float = Field(25.0, gt=0, description="Wall-clock ceiling for the crawl (seconds).")
    safety_margin: float = Field(
        5.0, ge=0, description="Minimum remaining budget required to start a batch (seconds)."
    )
    max_urls_to_process: int = Field(500, ge=1, description="Hard cap on sitemap URLs considered.")
    max_batches: int = Field(100, ge=1, description="Hard cap on batches, independent of time.")
    max_bytes: int = Field(5 * 1024 * 1024, ge=1, description="Response body ceiling per page.")
    sitemap_timeout: float = Field(15.0, gt=0, description="Timeout for the sitemap request.")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")

    @model_validator(mode="after")
    def _check_margin(self) -> BatchConfig:
        if self.safety_margin >= self.total_budget:
            raise ValueError(
                f"safety_margin ({self.safety_margin}) must be smaller than "
                f"total_budget ({self.total_budget})"
            )
        return self

    def with_overrides(self, **overrides: Any) -> BatchConfig:
        """Return a validated copy with the non-None *overrides* applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return BatchConfig(**{**self.model_dump(), **changes})


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> BatchConfig:
    """
    Read YAML or JSON and return a validated BatchConfig.

    With *path* None, ``configs/default.yaml`` is used when it exists and the
    built-in defaults otherwise. An explicit path that does not exist raises
    FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return BatchConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return BatchConfig(**data)


__all__ = ["BatchConfig", "DEFAULT_USER_AGENT", "load_config"]
