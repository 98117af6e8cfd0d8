"""Table-of-contents generation from heading tokens"""

import re

from markdown_it import MarkdownIt
from markdown_it.token import Token

from mdpdf.core.markdown import heading_level
from mdpdf.core.models import TocHeading
from mdpdf.core.utils.html import escape_html


NESTED_ANCHOR_RE = re.compile(r'<a\s+[^>]*>([\s\S]*?)</a>', re.IGNORECASE)


def strip_nested_anchors(value: str) -> str:
    return NESTED_ANCHOR_RE.sub(r'\1', value)


def collect_headings(tokens: list[Token], max_depth: int, md: MarkdownIt, env: dict) -> list[TocHeading]:
    """Headings at or above max_depth in document order, text rendered as inline HTML."""
    headings = []
    for idx, token in enumerate(tokens):
        level = heading_level(token)
        if level is None or level > max_depth or idx + 1 >= len(tokens):
            continue
        inline = tokens[idx + 1]
        text = md.renderer.renderInline(inline.children or [], md.options, env)
        headings.append(TocHeading(level=level, text=text, id=str(token.attrGet("id") or "")))
    return headings


def build_toc(tokens: list[Token], max_depth: int, md: MarkdownIt, env: dict) -> str:
    """Render the TOC block, or '' when no heading qualifies."""
    depth = max(1, min(6, max_depth))
    headings = collect_headings(tokens, depth, md, env)
    if not headings:
        return ""
    items = "\n".join(
        f'<li class="toc-level-{h.level}"><a href="#{escape_html(h.id)}">{strip_nested_anchors(h.text)}</a></li>'
        for h in headings
    )
    return f'<div class="toc"><h2>Table of Contents</h2><ul>{items}</ul></div>'
