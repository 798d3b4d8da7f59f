"""
Pydantic models for validating site build configuration files.
"""

from __future__ import annotations

import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import ConfigError

DEFAULT_CONFIG_FILENAME = "pagewright.toml"
DEFAULT_TEMPLATE_SUFFIXES = [".html", ".j2", ".jinja"]


class ErrorPolicy(str, Enum):
    """What the walker does when a document fails."""

    ABORT_ON_ERROR = "abort"
    SKIP_AND_CONTINUE = "skip"


class SiteConfig(BaseModel):
    """
    Top-level configuration for a site build.

    Attributes:
        in_dir: Root of the source document tree.
        out_dir: Root of the rendered output tree.
        templates: Template files or directories, registered in order.
        template_suffixes: File suffixes treated as templates inside directories.
        template_depth: How deep to search template directories (None = unlimited).
        delimiter: Marker line separating front matter from the body.
        exclude: Glob patterns (input-relative) that are neither rendered nor mirrored.
        type_from_extension: Derive a missing ``type`` from the file extension
            instead of assuming ``html``.
        strict_undefined: Treat undefined template variables as render failures.
        content_policy: Policy for content errors (bad type, missing template, ...).
        io_policy: Policy for filesystem errors.
    """
    in_dir: Path = Path("src")
    out_dir: Path = Path("docs")
    templates: List[Path] = Field(default_factory=lambda: [Path("templates")])
    template_suffixes: List[str] = Field(default_factory=lambda: list(DEFAULT_TEMPLATE_SUFFIXES))
    template_depth: Optional[int] = Field(default=None, ge=0)
    delimiter: str = "***"
    exclude: List[str] = Field(default_factory=list)
    type_from_extension: bool = True
    strict_undefined: bool = False
    content_policy: ErrorPolicy = ErrorPolicy.SKIP_AND_CONTINUE
    io_policy: ErrorPolicy = ErrorPolicy.ABORT_ON_ERROR

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

    @field_validator("template_suffixes")
    @classmethod
    def _normalize_suffixes(cls, value: List[str]) -> List[str]:
        normalized = []
        for suffix in value:
            suffix = suffix.strip().lower()
            if not suffix:
                continue
            normalized.append(suffix if suffix.startswith(".") else f".{suffix}")
        if not normalized:
            raise ValueError("template_suffixes must name at least one suffix")
        return normalized

    @field_validator("delimiter")
    @classmethod
    def _check_delimiter(cls, value: str) -> str:
        if not value or "\n" in value or "\r" in value:
            raise ValueError("delimiter must be a non-empty single-line marker")
        return value

    def resolved(self, base: Path) -> "SiteConfig":
        """Return a copy with relative paths anchored at base."""
        def anchor(path: Path) -> Path:
            path = path.expanduser()
            return path if path.is_absolute() else base / path

        return self.model_copy(
            update={
                "in_dir": anchor(self.in_dir),
                "out_dir": anchor(self.out_dir),
                "templates": [anchor(path) for path in self.templates],
            }
        )


def load_config(path: Path | str) -> SiteConfig:
    """
    Load and validate a TOML config file into a SiteConfig instance.

    Relative paths inside the file are resolved against the file's directory.

    Args:
        path: Path to the TOML configuration file.

    Returns:
        A validated SiteConfig object.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with config_path.open("rb") as handle:
            raw_data: Dict[str, Any] = tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in configuration file: {exc}") from exc

    if isinstance(raw_data.get("templates"), str):
        raw_data["templates"] = [raw_data["templates"]]

    try:
        config = SiteConfig.model_validate(raw_data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
    return config.resolved(config_path.parent)
