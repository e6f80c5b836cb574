# services/pipeline/config_loader.py
"""
Loads the target catalogue from ``configs/targets.yaml`` and validates it
with Pydantic models.  The file can contain a top‑level ``targets`` key or
just the mapping of target names → config dictionaries.

Public API:
* ``get_target_config(name)`` – returns a validated ``TargetConfig`` or
  raises ``TargetNotFoundError``.
* ``list_available_targets()`` – convenience helper for the CLI.
"""

from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import urlsplit

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from core.config import get_settings
from core.exceptions import ConfigurationError
from models.limits import ExtractionLimits


# ----------------------------------------------------------------------
# Pydantic schemas – runtime validation with readable error messages
# ----------------------------------------------------------------------
class TargetConfig(BaseModel):
    """Everything needed to scrape one page's related-content section."""

    source_url: str
    heading: str = Field(..., min_length=1, description="Section heading phrase")
    origin: Optional[str] = Field(
        default=None,
        description="Base for root-relative hrefs; defaults to source_url's scheme://host",
    )
    output_file: Optional[str] = None
    limits: ExtractionLimits = Field(default_factory=ExtractionLimits)

    @field_validator("source_url")
    @classmethod
    def _validate_source_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"source_url must be absolute http(s): {v}")
        return v

    @property
    def base_origin(self) -> str:
        if self.origin:
            return self.origin.rstrip("/")
        parts = urlsplit(self.source_url)
        return f"{parts.scheme}://{parts.netloc}"


class AllTargets(BaseModel):
    """Top‑level container – maps target name → its config."""

    targets: Dict[str, TargetConfig]


# ----------------------------------------------------------------------
# Internal helpers & caching
# ----------------------------------------------------------------------
# Simple in‑process cache, keyed by file, so each YAML is read once
_cache: Dict[Path, AllTargets] = {}


def _load_yaml(path: Path) -> dict:
    """Read the YAML file and return the inner ``targets`` mapping."""
    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
        return raw.get("targets", raw)


def _load_all(path: Optional[Path] = None) -> AllTargets:
    path = Path(path or get_settings().TARGETS_FILE)
    if path not in _cache:
        try:
            raw = _load_yaml(path)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(
                f"Cannot read targets file {path}: {exc}", {"path": str(path)}
            ) from exc
        try:
            _cache[path] = AllTargets(targets=raw)   # validation happens here
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid targets file {path}", {"errors": exc.errors()}
            ) from exc
    return _cache[path]


# ----------------------------------------------------------------------
# Custom exception for a missing target
# ----------------------------------------------------------------------
class TargetNotFoundError(KeyError):
    """Raised when a requested target does not exist in targets.yaml."""

    def __init__(self, target_name: str):
        super().__init__(f"Target '{target_name}' not found.")
        self.target_name = target_name


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------
def get_target_config(target_name: str, path: Optional[Path] = None) -> TargetConfig:
    """
    Return a **validated** ``TargetConfig`` for the requested target.

    Raises
    ------
    TargetNotFoundError
        If the target name is not present in the YAML.
    ConfigurationError
        If the YAML is unreadable or does not conform to the schema.
    """
    all_cfg = _load_all(path)
    try:
        return all_cfg.targets[target_name]
    except KeyError as exc:
        raise TargetNotFoundError(target_name) from exc


def list_available_targets(path: Optional[Path] = None) -> List[str]:
    """Returns all target identifiers, in file order."""
    return list(_load_all(path).targets.keys())
