# === FILE: kb_scout/config.py ===
"""
Loading and validation of the KBScout configuration.
Pydantic describes the schema; YAML and JSON files are accepted.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Literal, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from kb_scout.logger import DEFAULT_BACKUPS, DEFAULT_FORMAT, DEFAULT_MAX_BYTES

__all__ = ("SeedSection", "KnowledgeConfig", "DEFAULT_SECTIONS", "load_config")


class SeedSection(BaseModel):
    """A configured crawl root."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)

    @field_validator("url")
    def _absolute_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"seed url must be absolute http(s): {v!r}")
        return v


DEFAULT_DOMAIN = "https://knowledge.eptura.com"

DEFAULT_SECTIONS: List[SeedSection] = [
    SeedSection(name="Condeco", url=f"{DEFAULT_DOMAIN}/condeco"),
    SeedSection(name="Proxyclick", url=f"{DEFAULT_DOMAIN}/proxyclick"),
    SeedSection(name="Serraview", url=f"{DEFAULT_DOMAIN}/serraview"),
    SeedSection(name="iOFFICE", url=f"{DEFAULT_DOMAIN}/ioffice"),
    SeedSection(name="ManagerPlus", url=f"{DEFAULT_DOMAIN}/managerplus"),
    SeedSection(name="SpaceIQ", url=f"{DEFAULT_DOMAIN}/spaceiq"),
    SeedSection(name="Archibus", url=f"{DEFAULT_DOMAIN}/archibus"),
]


class KnowledgeConfig(BaseModel):
    """Configuration for the crawler, the search index and the service around them."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    sections: List[SeedSection] = Field(
        default_factory=lambda: list(DEFAULT_SECTIONS), description="Crawl roots, visited in order."
    )
    domain_prefix: str = Field(
        DEFAULT_DOMAIN, min_length=1, description="Only links starting with this prefix are followed."
    )
    max_depth: int = Field(1, ge=0, description="Seed pages are depth 0.")
    request_timeout: float = Field(10.0, gt=0, description="Timeout for one request (seconds).")
    crawl_delay: float = Field(2.0, ge=0, description="Pause after every fetch attempt (seconds).")
    crawl_interval: float = Field(24 * 60 * 60, gt=0, description="Seconds between scheduled passes.")
    crawl_on_startup: bool = Field(False, description="Run a pass as soon as the scheduler starts.")
    user_agent: str = Field("KBScoutBot/1.0", min_length=1)

    content_limit: int = Field(1000, ge=1, description="Max characters of body text kept per page.")
    excerpt_length: int = Field(200, ge=0)
    context_limit: int = Field(3, ge=0, description="Matches injected into the chat context.")
    search_limit: int = Field(5, ge=0, description="Default number of direct search results.")
    history_limit: int = Field(10, ge=0, description="Conversation turns forwarded to the model.")

    context_header: str = "Based on Eptura knowledge:"
    system_prompt: str = "You are an AI assistant for Eptura Asset Management."
    openai_model: str = "gpt-3.5-turbo"
    max_tokens: int = Field(1000, ge=1)
    temperature: float = Field(0.7, ge=0, le=2)

    host: str = "0.0.0.0"
    port: int = Field(3001, ge=0, le=65535)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Optional[Path] = Field(None, description="Rotating log file; stdout only when unset.")
    log_format: str = Field(DEFAULT_FORMAT, min_length=1)
    log_max_bytes: int = Field(DEFAULT_MAX_BYTES, gt=0, description="Size at which the log file rolls over.")
    log_backups: int = Field(DEFAULT_BACKUPS, ge=0, description="Rotated log files kept.")

    @field_validator("domain_prefix", mode="before")
    def _strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @field_validator("log_level", mode="before")
    def _upper_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    def select_sections(self, names: Optional[List[str]]) -> List[SeedSection]:
        """Return configured sections, restricted to *names* (case-insensitive) when given."""
        if not names:
            return list(self.sections)
        wanted = {n.lower() for n in names}
        chosen = [s for s in self.sections if s.name.lower() in wanted]
        unknown = wanted - {s.name.lower() for s in chosen}
        if unknown:
            raise ValueError(f"Unknown section(s): {', '.join(sorted(unknown))}")
        return chosen


_DEFAULT_CFG = Path("configs/default.yaml")

# environment variable -> config field
_ENV_OVERRIDES = {"PORT": "port", "OPENAI_MODEL": "openai_model"}


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


def _apply_env(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    merged = dict(data)
    for var, field in _ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            merged[field] = value
    return merged


def load_config(
    path: Union[str, Path, None] = None, environ: Optional[Mapping[str, str]] = None
) -> KnowledgeConfig:
    """
    Read YAML or JSON and return a validated KnowledgeConfig.

    Without *path* the default file is used when present, otherwise built-in
    defaults. A missing explicit file raises FileNotFoundError.
    """
    env = os.environ if environ is None else environ

    if path is None:
        if not _DEFAULT_CFG.is_file():
            return KnowledgeConfig(**_apply_env({}, env))
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

    return KnowledgeConfig(**_apply_env(data, env))
