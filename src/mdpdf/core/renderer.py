"""Render orchestration: markdown source -> assembled HTML document

Each call to Renderer.render_html owns all of its state (guard maps, slugger,
parser instance, token stream), so one Renderer can serve many documents and
many concurrent tasks.
"""

import logging
import secrets
from datetime import date
from pathlib import Path
from typing import Any, Optional

from mdpdf.core.diagrams import has_mermaid_syntax
from mdpdf.core.frontmatter import parse_frontmatter
from mdpdf.core.markdown import (
    apply_walk_hooks,
    create_markdown,
    relocate_footnotes,
    restore_token_math,
)
from mdpdf.core.math import has_math_syntax, protect_math
from mdpdf.core.models import RenderOptions
from mdpdf.core.styles import default_stylesheet
from mdpdf.core.template import render_template
from mdpdf.core.toc import build_toc
from mdpdf.core.utils.slug import Slugger
from mdpdf.core.utils.validation import DEFAULT_TOC_DEPTH, normalize_toc_depth


log = logging.getLogger(__name__)

DEFAULT_TITLE = "Markdown Document"


def _toc_marker() -> str:
    return f"MDPDFTOC{secrets.token_hex(6)}Q"


def _read_custom_css(path: Optional[Path]) -> str:
    if path is None:
        return ""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise RuntimeError(f'Failed to read custom CSS at "{path}": {e}') from e


class Renderer:
    """Turns markdown text into a standalone HTML document."""

    def __init__(self, options: Optional[RenderOptions] = None) -> None:
        self.options = options or RenderOptions()

    def merged_options(self, overrides: Optional[dict[str, Any]] = None) -> RenderOptions:
        """Instance options updated with the non-None overrides, re-validated."""
        if not overrides:
            return self.options
        data = self.options.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return RenderOptions(**data)

    def _toc_depth(self, opts: RenderOptions, frontmatter: dict[str, Any]) -> int:
        if opts.toc_depth is not None:
            return opts.toc_depth
        if "tocDepth" not in frontmatter:
            return DEFAULT_TOC_DEPTH
        try:
            return normalize_toc_depth(frontmatter["tocDepth"])
        except ValueError as e:
            log.warning(f"Ignoring frontmatter tocDepth: {e}")
            return DEFAULT_TOC_DEPTH

    @staticmethod
    def _title(opts: RenderOptions, frontmatter: dict[str, Any]) -> str:
        if isinstance(opts.title, str):
            return opts.title
        title = frontmatter.get("title")
        if isinstance(title, str):
            return title
        # YAML reads bare dates and numbers as scalars, not strings
        if isinstance(title, (int, float, date)) and not isinstance(title, bool):
            return str(title)
        return DEFAULT_TITLE

    def render_body(self, markdown: str, opts: RenderOptions, frontmatter: dict[str, Any]) -> str:
        """Render a frontmatter-free body to HTML, including TOC and restored math."""
        protection = protect_math(markdown)
        md = create_markdown()
        marker = _toc_marker()
        env: dict[str, Any] = {"toc_marker": marker}

        tokens = md.parse(protection.text, env)
        restore_token_math(tokens, protection)
        apply_walk_hooks(tokens, Slugger(), opts.link_extension)
        relocate_footnotes(tokens)

        has_placeholder = any(t.type == "toc_placeholder" for t in tokens)
        fm_toc = frontmatter.get("toc") if isinstance(frontmatter.get("toc"), bool) else None
        toc_enabled = opts.toc if opts.toc is not None else bool(fm_toc)
        toc_html = ""
        if toc_enabled or has_placeholder:
            toc_html = build_toc(tokens, self._toc_depth(opts, frontmatter), md, env)

        html = md.renderer.render(tokens, md.options, env)
        if has_placeholder:
            html = html.replace(marker, toc_html)
        elif toc_enabled and toc_html:
            html = toc_html + "\n" + html
        return protection.restore_html(html)

    def render_html(self, markdown: str, overrides: Optional[dict[str, Any]] = None) -> str:
        """Render markdown (optionally with frontmatter) into a complete HTML document."""
        opts = self.merged_options(overrides)
        parsed = parse_frontmatter(markdown)
        for warning in parsed.warnings:
            log.warning(warning)

        content = parsed.content
        body = self.render_body(content, opts, parsed.data)
        css = default_stylesheet() + "\n" + _read_custom_css(opts.custom_css)

        return render_template(
            title=self._title(opts, parsed.data),
            css=css,
            content=body,
            template_path=opts.template,
            base_path=opts.base_path,
            include_mathjax=opts.math and has_math_syntax(content),
            include_mermaid=opts.mermaid and has_mermaid_syntax(content),
            assets=opts.assets,
        )
