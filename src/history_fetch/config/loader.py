"""Load YAML configuration for the client and batch query files."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ..providers.yahoo import DEFAULT_BASE_URL

CONFIG_DIR = Path("configs")
CLIENT_CONFIG_PATH = CONFIG_DIR / "client.yml"

ENV_PREFIX = "HISTORY_FETCH_"


class ClientConfig(BaseModel):
    concurrency_cap: int = Field(20, ge=1, description="Maximum simultaneous requests")
    memoize: bool = Field(False, description="Serve repeated requests from a response cache")
    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = Field(None, description="Per-request timeout in seconds; None waits forever")


class QueryEntry(BaseModel):
    symbol: str = Field(..., min_length=1)
    start: date
    end: date


class BatchFile(BaseModel):
    queries: list[QueryEntry] = Field(default_factory=list)


def load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _env_overrides() -> Dict[str, Any]:
    load_dotenv()
    overrides: Dict[str, Any] = {}
    for field in ("concurrency", "memoize", "base_url", "timeout"):
        value = os.getenv(ENV_PREFIX + field.upper())
        if value is None or value == "":
            continue
        key = "concurrency_cap" if field == "concurrency" else field
        overrides[key] = value
    return overrides


def load_client_config(path: Path | None = None) -> ClientConfig:
    """Read the ``client`` section of a YAML file, then apply environment overrides.

    A missing default file yields the defaults; an explicit missing path raises.
    """
    file_path = Path(path) if path else CLIENT_CONFIG_PATH
    data: Dict[str, Any] = {}
    if path or file_path.exists():
        data = dict(load_yaml(file_path).get("client") or {})
    data.update(_env_overrides())
    return ClientConfig(**data)


def load_batch_file(path: Path) -> BatchFile:
    return BatchFile(**load_yaml(Path(path)))
