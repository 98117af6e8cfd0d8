"""Unit tests for core/extensions.py"""

import pytest

from mdpdf.core.extensions import DEFAULT_TOC_MARKER, default_callout_title


def test_callout_renders_type_title_and_body(md):
    """A callout header produces the wrapper, title and content divs."""
    html = md.render("> [!note] Heads up\n> Body text\n")
    assert '<div class="callout callout-note" data-callout="note" data-collapsed="false">' in html
    assert '<div class="callout-title">Heads up</div>' in html
    assert '<div class="callout-content">' in html
    assert "<p>Body text</p>" in html
    assert "<blockquote>" not in html


def test_callout_collapsed_marker(md):
    """'-' after the type marks the callout collapsed."""
    html = md.render("> [!tip]- Folded\n> hidden\n")
    assert 'data-callout="tip" data-collapsed="true"' in html


def test_callout_expanded_marker(md):
    """'+' is explicitly expanded."""
    html = md.render("> [!tip]+ Open\n> shown\n")
    assert 'data-collapsed="false"' in html


@pytest.mark.parametrize("name,kind,title", [
    ("summary", "abstract", "Summary"),
    ("TLDR", "abstract", "Tldr"),
    ("hint", "tip", "Hint"),
    ("error", "danger", "Error"),
    ("warning", "warning", "Warning"),
    ("my-custom", "my-custom", "My Custom"),
])
def test_callout_aliases_and_default_titles(md, name, kind, title):
    """Aliases map to canonical types; the default title comes from the written name."""
    html = md.render(f"> [!{name}]\n> body\n")
    assert f'class="callout callout-{kind}"' in html
    assert f'<div class="callout-title">{title}</div>' in html


@pytest.mark.parametrize("header", ["[!not valid]", "[! not valid", "[!note"])
def test_malformed_callout_falls_back_to_blockquote(md, header):
    """A header that is not [!type] renders as an ordinary blockquote."""
    html = md.render(f"> {header}\n> text\n")
    assert "<blockquote>" in html
    assert "callout" not in html


def test_nested_callouts(md):
    """Callout bodies are parsed as block content, so callouts nest."""
    html = md.render("> [!note] Outer\n> > [!tip] Inner\n> > text\n")
    assert "callout-note" in html
    assert "callout-tip" in html
    assert '<div class="callout-title">Inner</div>' in html


def test_callout_body_holds_code_blocks(md):
    """Fenced code inside a callout is still highlighted code."""
    html = md.render("> [!example]\n> ```python\n> x = 1\n> ```\n")
    assert '<code class="language-python">' in html


@pytest.mark.parametrize("line", ["<!-- PAGE_BREAK -->", "<!--PAGE_BREAK-->", "<!--   PAGE_BREAK   -->"])
def test_page_break(md, line):
    """Page break comments become page-break divs."""
    html = md.render(f"before\n\n{line}\n\nafter\n")
    assert '<div class="page-break"></div>' in html
    assert "PAGE_BREAK" not in html


def test_other_comments_stay_html(md):
    """Ordinary HTML comments are not page breaks."""
    html = md.render("<!-- just a note -->\n")
    assert "page-break" not in html


def test_toc_placeholder_uses_env_marker(md):
    """[TOC] renders the per-render marker from env."""
    assert md.render("[TOC]\n", {"toc_marker": "XMARKX"}) == "XMARKX\n"


def test_toc_placeholder_default_marker(md):
    """Without a marker in env the default marker is emitted, case-insensitively."""
    assert DEFAULT_TOC_MARKER in md.render("[toc]\n")


def test_toc_placeholder_must_be_alone(md):
    """[TOC] inside a sentence is plain text."""
    html = md.render("see [TOC] here\n", {"toc_marker": "XMARKX"})
    assert "XMARKX" not in html


def test_mermaid_fence_becomes_diagram(md):
    """mermaid fences render as escaped source in a .mermaid div."""
    html = md.render("```mermaid\ngraph TD; A-->B\n```\n")
    assert '<div class="mermaid">graph TD; A--&gt;B' in html
    assert "<pre" not in html


def test_other_fences_are_not_diagrams(md):
    """Only the exact 'mermaid' info string is a diagram."""
    html = md.render("```mermaidish\nx\n```\n")
    assert 'class="mermaid"' not in html


def test_default_callout_title():
    """Hyphens and underscores split words; each word is capitalized."""
    assert default_callout_title("my-custom_type") == "My Custom Type"
