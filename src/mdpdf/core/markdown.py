"""markdown-it processor: parser factory, code highlighting and token tree hooks"""

import re

from markdown_it import MarkdownIt
from markdown_it.common.normalize_url import validateLink
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from mdpdf.core.extensions import EXTENSIONS
from mdpdf.core.math import MathProtection
from mdpdf.core.utils.html import escape_html, sanitize_href
from mdpdf.core.utils.slug import Slugger


PARSER_PRESET = "gfm-like"

EXTERNAL_LINK_RE = re.compile(r'^(?:[a-z][a-z\d+\-.]*:)?//', re.IGNORECASE)
MARKDOWN_EXT_RE = re.compile(r'\.(?:md|markdown)$', re.IGNORECASE)
HTML_TAG_RE = re.compile(r'<[^>]+>')
MARKDOWN_LINK_RE = re.compile(r'\[([^\]]+)\]\([^)]+\)')
CODE_TOKEN_TYPES = ("fence", "code_block", "code_inline", "diagram")

_FORMATTER = HtmlFormatter(nowrap=True)


def _allow_all_links(url: str) -> bool:
    # Link hrefs are sanitized by apply_walk_hooks; image sources are checked there too.
    return True


def heading_level(token: Token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag[:1] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def render_fence(tokens: list[Token], idx: int, options, env) -> str:
    """Pygments-highlighted code block; unknown or missing languages render as plain text."""
    token = tokens[idx]
    info = token.info.strip()
    lang = info.split()[0] if info else ""
    try:
        lexer = get_lexer_by_name(lang) if lang else None
    except ClassNotFound:
        lexer = None

    if lexer is None:
        return f'<pre class="highlight"><code class="language-plaintext">{escape_html(token.content)}</code></pre>\n'
    code = highlight(token.content, lexer, _FORMATTER)
    return f'<pre class="highlight"><code class="language-{escape_html(lang)}">{code}</code></pre>\n'


def create_markdown() -> MarkdownIt:
    """Build a fresh parser; one instance per render so no state leaks between documents."""
    md = MarkdownIt(PARSER_PRESET, options_update={"linkify": False, "breaks": True, "html": True})
    md.use(footnote_plugin)
    md.validateLink = _allow_all_links
    md.renderer.rules["fence"] = render_fence
    for extension in EXTENSIONS:
        extension.install(md)
    return md


def heading_plain_text(text: str) -> str:
    """Heading source without HTML tags or markdown link syntax."""
    return MARKDOWN_LINK_RE.sub(r'\1', HTML_TAG_RE.sub('', text).strip())


def split_url_suffix(href: str) -> tuple[str, str]:
    """Split 'path?query#frag' into ('path', '?query#frag')."""
    cuts = [i for i in (href.find('#'), href.find('?')) if i != -1]
    if not cuts:
        return href, ''
    cut = min(cuts)
    return href[:cut], href[cut:]


def rewrite_markdown_href(href: str, extension: str) -> str:
    """Swap a .md/.markdown path extension for the output extension, keeping ?query/#fragment."""
    path, suffix = split_url_suffix(href)
    if not MARKDOWN_EXT_RE.search(path):
        return href
    return MARKDOWN_EXT_RE.sub(lambda _: extension, path) + suffix


def rewrite_link(token: Token, extension: str) -> None:
    href = str(token.attrGet("href") or "").strip()
    if not href:
        return
    if not EXTERNAL_LINK_RE.match(href):
        href = rewrite_markdown_href(href, extension)
    token.attrSet("href", sanitize_href(href))


def restore_token_math(tokens: list[Token], protection: MathProtection) -> None:
    """Put original text back into heading sources, code and link/image targets.

    Heading children keep their guards so the body is restored once, after
    rendering; only the raw ``content`` used for slugs is restored here. Code
    nested in blockquotes or list items can still hold guards, so it is restored
    before rendering and escaped like any other code.
    """
    for idx, token in enumerate(tokens):
        if token.type in CODE_TOKEN_TYPES:
            token.content = protection.restore_code(token.content)
        if token.type == "heading_open" and idx + 1 < len(tokens):
            inline = tokens[idx + 1]
            inline.content = protection.restore_plain(inline.content)
        if token.type == "inline" and token.children:
            for child in token.children:
                if child.type in CODE_TOKEN_TYPES:
                    child.content = protection.restore_code(child.content)
                for attr in ("href", "src"):
                    value = child.attrGet(attr)
                    if isinstance(value, str):
                        child.attrSet(attr, protection.restore_plain(value))


def apply_walk_hooks(tokens: list[Token], slugger: Slugger, link_extension: str) -> None:
    """Assign heading ids and rewrite/sanitize link targets, in document order."""
    for idx, token in enumerate(tokens):
        if token.type == "heading_open" and not token.attrGet("id") and idx + 1 < len(tokens):
            token.attrSet("id", slugger.slug(heading_plain_text(tokens[idx + 1].content)))
        if token.type != "inline" or not token.children:
            continue
        for child in token.children:
            if child.type == "link_open":
                rewrite_link(child, link_extension)
            elif child.type == "image" and not validateLink(str(child.attrGet("src") or "")):
                child.attrSet("src", "")


def relocate_footnotes(tokens: list[Token]) -> list[Token]:
    """Move the footnote definitions block to the very end of the token list."""
    start = next((i for i, t in enumerate(tokens) if t.type == "footnote_block_open"), None)
    if start is None:
        return tokens
    end = next(
        (i for i in range(start, len(tokens)) if tokens[i].type == "footnote_block_close"),
        len(tokens) - 1,
    )
    block = tokens[start:end + 1]
    del tokens[start:end + 1]
    tokens.extend(block)
    return tokens
