"""Render options and result models shared by the renderer, materializer and batch runner"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from mdpdf.core.utils.validation import (
    DEFAULT_FORMAT,
    DEFAULT_MARGIN,
    normalize_paper_format,
    parse_margin,
)


class RuntimeAssets(BaseModel):
    """Script sources for the in-browser math and diagram runtimes."""
    mathjax_src: str
    mermaid_src: str


class RenderOptions(BaseModel):
    """Per-document rendering options; None means 'not set' (fall back to frontmatter or default)."""
    margin:          str = Field(default=DEFAULT_MARGIN, description="CSS margin shorthand, 1-4 values")
    format:          str = Field(default=DEFAULT_FORMAT, description="Paper size")
    toc:             Optional[bool] = None
    toc_depth:       Optional[int] = Field(default=None, ge=1, le=6, description="Deepest heading level in the TOC")
    math:            bool = True
    mermaid:         bool = True
    custom_css:      Optional[Path] = None
    template:        Optional[Path] = None
    header_template: Optional[str] = None
    footer_template: Optional[str] = None
    base_path:       Optional[Path] = None
    title:           Optional[str] = None
    link_extension:  str = ".pdf"
    assets:          Optional[RuntimeAssets] = None

    @field_validator("margin")
    @classmethod
    def _check_margin(cls, value: str) -> str:
        parse_margin(value)
        return value

    @field_validator("format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        return normalize_paper_format(value)


@dataclass(frozen=True)
class TocHeading:
    level: int
    text:  str      # rendered inline HTML
    id:    str


@dataclass
class ConversionResult:
    """Outcome of converting one input file; error is None on success."""
    source: Path
    output: Path
    error:  Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
