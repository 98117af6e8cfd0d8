"""Application configuration: settings schema and .mdpdfrc loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from mdpdf.core.utils.validation import (
    DEFAULT_FORMAT,
    DEFAULT_MARGIN,
    normalize_paper_format,
    parse_margin,
)


CONFIG_FILES = (".mdpdfrc.yaml", ".mdpdfrc.yml", ".mdpdfrc")
ENV_PREFIX = "MDPDF_"
PATH_FIELDS = ("css", "template", "header", "footer", "assets_dir")


class Settings(BaseModel):
    margin:             str = Field(default=DEFAULT_MARGIN, description="CSS margin shorthand, 1-4 values")
    format:             str = Field(default=DEFAULT_FORMAT, description="Paper size (A4, Letter, ...)")
    toc:                Optional[bool] = Field(default=None, description="Prepend a table of contents")
    toc_depth:          Optional[int] = Field(default=None, ge=1, le=6, description="Deepest heading level in the TOC")
    math:               bool = Field(default=True, description="Inject the MathJax runtime when math is present")
    mermaid:            bool = Field(default=True, description="Inject the Mermaid runtime when diagrams are present")
    css:                Optional[str] = Field(default=None, description="Extra stylesheet appended to the theme")
    template:           Optional[str] = Field(default=None, description="HTML template with {{tokens}}")
    header:             Optional[str] = Field(default=None, description="File holding the PDF header template")
    footer:             Optional[str] = Field(default=None, description="File holding the PDF footer template")
    title:              Optional[str] = None
    concurrency:        int = Field(default=2, ge=1, description="Documents converted at once")
    executable_path:    Optional[str] = Field(default=None, description="Chromium executable to launch")
    preserve_timestamp: bool = Field(default=False, description="Copy source mtime onto outputs")
    assets_mode:        str = Field(default="cdn", pattern="^(cdn|local)$", description="cdn or local")
    assets_dir:         Optional[str] = Field(default=None, description="Directory holding local runtime assets")

    @field_validator("margin")
    @classmethod
    def _check_margin(cls, value: str) -> str:
        parse_margin(value)
        return value

    @field_validator("format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        return normalize_paper_format(value)


def find_config_file(cwd: Path = None) -> Optional[Path]:
    """First existing config candidate in cwd, or None."""
    root = cwd or Path.cwd()
    for name in CONFIG_FILES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a YAML config mapping; relative path fields resolve against the file's directory."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {path.name}: expected a mapping, got {type(data).__name__}")

    data = {str(k).replace("-", "_"): v for k, v in data.items()}
    for name in PATH_FIELDS:
        value = data.get(name)
        if isinstance(value, str) and value and not Path(value).expanduser().is_absolute():
            data[name] = str(path.parent / value)
    return data


def load_config(overrides: dict[str, Any] = None, cwd: Path = None) -> tuple[Settings, Optional[Path]]:
    """Load Settings from .mdpdfrc, then MDPDF_<FIELD> env vars, then non-None CLI overrides.

    Returns the settings and the config file that was read, if any.
    """
    data: dict[str, Any] = {}
    config_path = find_config_file(cwd)
    if config_path is not None:
        data = read_config_file(config_path)

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data), config_path
