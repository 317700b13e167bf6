# === FILE: page_crawler/config.py ===
"""
Loading and validation of the PageCrawler configuration.
Pydantic describes the schema; YAML and JSON files are accepted, and the
MongoDB connection string may also come from the environment (``.env`` included).
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union
from urllib.parse import urlparse

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

DEFAULT_SEED = "https://www.cc.gatech.edu/"
MONGODB_URI_ENV = "MONGODB_URI"


class CrawlerConfig(BaseModel):
    """Settings for one crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_urls: List[str] = Field(default_factory=lambda: [DEFAULT_SEED], min_length=1,
                                 description="Start pages of the crawl.")
    max_pages: int = Field(5000, ge=1, description="Cap on distinct visited pages.")
    concurrency: int = Field(1, ge=1, description="Fetches in flight at once; 1 is single-flight.")
    parse_workers: int = Field(4, ge=1, description="Threads parsing fetched pages.")
    stats_interval: float = Field(60.0, gt=0, description="Seconds between throughput samples.")
    snippet_cap: int = Field(500, ge=0, description="Max characters of body text kept per page.")
    fetch_timeout: Optional[float] = Field(30.0, gt=0, description="Per-request timeout, None disables it.")
    user_agent: str = Field("PageCrawler/1.0", min_length=1, description="User-Agent header.")
    mongodb_uri: Optional[str] = Field(None, description="MongoDB connection string; None disables the sink.")
    mongodb_database: str = Field("webCrawlerArchive", min_length=1)
    mongodb_collection: str = Field("webpages", min_length=1)
    sink_required: bool = Field(False, description="Abort when the sink cannot connect.")
    exact_dedup: bool = Field(False, description="Dedup by full URL instead of its fingerprint.")

    @field_validator("seed_urls", mode="before")
    def _wrap_single_seed(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("seed_urls")
    def _check_seed_scheme(cls, v: List[str]) -> List[str]:
        seeds = [s.strip() for s in v]
        for seed in seeds:
            parsed = urlparse(seed)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(f"seed must be an absolute http(s) URL: {seed!r}")
        return seeds

    @field_validator("mongodb_uri", mode="before")
    def _blank_uri_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


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


def _read_file(path_obj: Path) -> dict[str, Any]:
    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: Union[str, Path, None] = None) -> CrawlerConfig:
    """
    Read YAML or JSON and return a validated CrawlerConfig.

    Without *path*, ``configs/default.yaml`` is used when present, otherwise
    the built-in defaults. An explicit path that does not exist raises
    FileNotFoundError. ``MONGODB_URI`` from the environment (or ``.env``)
    fills ``mongodb_uri`` when the file does not set it.
    """
    if path is None:
        data = _read_file(_DEFAULT_CFG) if _DEFAULT_CFG.is_file() else {}
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
        data = _read_file(path_obj)

    load_dotenv(find_dotenv(usecwd=True))
    env_uri = os.getenv(MONGODB_URI_ENV)
    if env_uri and not data.get("mongodb_uri"):
        data["mongodb_uri"] = env_uri

    try:
        return CrawlerConfig(**data)
    except ValidationError:
        raise


__all__ = ["CrawlerConfig", "load_config", "DEFAULT_SEED", "MONGODB_URI_ENV"]
