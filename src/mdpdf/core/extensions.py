"""Custom block syntax: callouts, page breaks, TOC placeholders and diagram fences

Each extension is a small strategy object. Block extensions expose
``start`` (cheap test on the current line), ``tokenize`` (markdown-it block
rule body) and ``render`` (HTML for the token type they emit), and are
installed into the block ruler in list order.
"""

import re

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock
from markdown_it.rules_core import StateCore

from mdpdf.core.diagrams import DIAGRAM_LANGUAGE
from mdpdf.core.utils.html import escape_html


DEFAULT_TOC_MARKER = "[[TOC_PLACEHOLDER]]"

CALLOUT_HEADER_RE = re.compile(r'^\[!([A-Za-z0-9_-]+)\]([+-])?(?:[ \t]+(.*?))?[ \t]*$')
PAGE_BREAK_RE = re.compile(r'^<!--\s*PAGE_BREAK\s*-->[ \t]*$')
TOC_RE = re.compile(r'^\[TOC\][ \t]*$', re.IGNORECASE)

CALLOUT_ALIASES: dict[str, str] = {
    "summary":   "abstract",
    "tldr":      "abstract",
    "hint":      "tip",
    "check":     "success",
    "done":      "success",
    "help":      "question",
    "faq":       "question",
    "attention": "warning",
    "fail":      "failure",
    "missing":   "failure",
    "error":     "danger",
    "cite":      "quote",
}


def _line_text(state: StateBlock, line: int) -> str:
    """Source of a line with its block indentation removed."""
    return state.src[state.bMarks[line] + state.tShift[line]:state.eMarks[line]]


def _is_code_indented(state: StateBlock, line: int) -> bool:
    return state.sCount[line] - state.blkIndent >= 4


def default_callout_title(name: str) -> str:
    """'my-custom_type' -> 'My Custom Type'."""
    return " ".join(seg.capitalize() for seg in re.split(r'[-_]+', name) if seg)


class BlockExtension:
    """Base class for single-rule block syntax extensions."""
    name: str = ""
    token_type: str = ""
    before: str = "paragraph"
    alt: tuple[str, ...] = ("paragraph", "reference", "blockquote", "list")

    def start(self, line: str) -> bool:
        raise NotImplementedError

    def tokenize(self, state: StateBlock, start_line: int, end_line: int, silent: bool) -> bool:
        raise NotImplementedError

    def render(self, tokens, idx, options, env) -> str:
        raise NotImplementedError

    def install(self, md: MarkdownIt) -> None:
        def rule(state: StateBlock, start_line: int, end_line: int, silent: bool) -> bool:
            if _is_code_indented(state, start_line):
                return False
            if not self.start(_line_text(state, start_line)):
                return False
            return self.tokenize(state, start_line, end_line, silent)

        md.block.ruler.before(self.before, self.name, rule, {"alt": list(self.alt)})
        md.renderer.rules[self.token_type] = self.render


class CalloutExtension(BlockExtension):
    """GitHub/Obsidian admonitions: '> [!note]+ Optional title'.

    A header that does not match falls through to the ordinary blockquote rule.
    """
    name = "callout"
    token_type = "callout_open"
    before = "blockquote"

    def start(self, line: str) -> bool:
        return line.startswith('>') and '[!' in line

    def tokenize(self, state: StateBlock, start_line: int, end_line: int, silent: bool) -> bool:
        lines: list[str] = []
        next_line = start_line
        while next_line < end_line and not _is_code_indented(state, next_line):
            text = _line_text(state, next_line)
            if not text.startswith('>'):
                break
            text = text[1:]
            if text[:1] in (' ', '\t'):
                text = text[1:]
            lines.append(text)
            next_line += 1

        m = CALLOUT_HEADER_RE.match(lines[0].strip()) if lines else None
        if not m:
            return False
        if silent:
            return True

        name = m.group(1).lower()
        callout_type = CALLOUT_ALIASES.get(name, name)
        title = (m.group(3) or "").strip() or default_callout_title(name)

        token = state.push("callout_open", "div", 1)
        token.markup = ">"
        token.map = [start_line, next_line]
        token.meta = {"type": callout_type, "title": title, "collapsed": m.group(2) == "-"}

        token = state.push("callout_title_open", "div", 1)
        token.attrSet("class", "callout-title")
        token = state.push("inline", "", 0)
        token.content = title
        token.map = [start_line, start_line + 1]
        token.children = []
        state.push("callout_title_close", "div", -1)

        token = state.push("callout_content_open", "div", 1)
        token.attrSet("class", "callout-content")
        body = "\n".join(lines[1:])
        if body.strip():
            state.md.block.parse(body, state.md, state.env, state.tokens)
        state.push("callout_content_close", "div", -1)

        state.push("callout_close", "div", -1)
        state.line = next_line
        return True

    def render(self, tokens, idx, options, env) -> str:
        meta = tokens[idx].meta
        kind = escape_html(meta["type"])
        collapsed = "true" if meta["collapsed"] else "false"
        return f'<div class="callout callout-{kind}" data-callout="{kind}" data-collapsed="{collapsed}">\n'


class PageBreakExtension(BlockExtension):
    """'<!-- PAGE_BREAK -->' on its own line."""
    name = "page_break"
    token_type = "page_break"
    before = "html_block"
    alt = ("paragraph", "reference", "blockquote")

    def start(self, line: str) -> bool:
        return line.startswith('<!--')

    def tokenize(self, state: StateBlock, start_line: int, end_line: int, silent: bool) -> bool:
        text = _line_text(state, start_line)
        if not PAGE_BREAK_RE.match(text):
            return False
        if silent:
            return True
        token = state.push("page_break", "div", 0)
        token.markup = text
        token.map = [start_line, start_line + 1]
        state.line = start_line + 1
        return True

    def render(self, tokens, idx, options, env) -> str:
        return '<div class="page-break"></div>\n'


class TocPlaceholderExtension(BlockExtension):
    """'[TOC]' on its own line; rendered as a marker the renderer swaps for the TOC."""
    name = "toc_placeholder"
    token_type = "toc_placeholder"
    before = "reference"

    def start(self, line: str) -> bool:
        return line[:5].upper() == '[TOC]'

    def tokenize(self, state: StateBlock, start_line: int, end_line: int, silent: bool) -> bool:
        text = _line_text(state, start_line)
        if not TOC_RE.match(text):
            return False
        if silent:
            return True
        token = state.push("toc_placeholder", "", 0)
        token.markup = text
        token.map = [start_line, start_line + 1]
        state.line = start_line + 1
        return True

    def render(self, tokens, idx, options, env) -> str:
        return env.get("toc_marker", DEFAULT_TOC_MARKER) + "\n"


class DiagramExtension:
    """Fences tagged exactly 'mermaid' become 'diagram' tokens holding raw source."""
    name = "diagram"
    token_type = "diagram"

    def retype(self, state: StateCore) -> None:
        for token in state.tokens:
            if token.type == "fence" and token.info.strip() == DIAGRAM_LANGUAGE:
                token.type = self.token_type

    def render(self, tokens, idx, options, env) -> str:
        return f'<div class="mermaid">{escape_html(tokens[idx].content)}</div>\n'

    def install(self, md: MarkdownIt) -> None:
        md.core.ruler.after("block", self.name, self.retype)
        md.renderer.rules[self.token_type] = self.render


EXTENSIONS = (
    CalloutExtension(),
    PageBreakExtension(),
    TocPlaceholderExtension(),
    DiagramExtension(),
)
