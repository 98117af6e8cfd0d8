"""HTML escaping and link-target allow-listing"""

import re


HTML_ESCAPE_MAP = {
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#39;',
}

_ESCAPE_RE = re.compile(r'[&<>"\']')
_RELATIVE_RE = re.compile(r'^(/(?!/)|\./|\.\./)')
_SAFE_SCHEME_RE = re.compile(r'^(https?:|mailto:|tel:)', re.IGNORECASE)
_ANY_SCHEME_RE = re.compile(r'^[a-z][a-z\d+\-.]*:', re.IGNORECASE)


def escape_html(value: str) -> str:
    """Escape the five HTML-significant characters."""
    return _ESCAPE_RE.sub(lambda m: HTML_ESCAPE_MAP[m.group(0)], value)


def sanitize_href(href: str) -> str:
    """Return href if it is a fragment, relative path or allow-listed scheme, else '#'.

    Unknown schemes (javascript:, data:, vbscript:, ...) and protocol-relative
    URLs are rejected. Strings without any scheme are treated as relative paths.
    """
    trimmed = href.strip()
    if not trimmed:
        return '#'
    if trimmed.startswith('#'):
        return trimmed
    if trimmed.startswith('//'):
        return '#'
    if _RELATIVE_RE.match(trimmed):
        return trimmed
    if _SAFE_SCHEME_RE.match(trimmed):
        return trimmed
    if not _ANY_SCHEME_RE.match(trimmed):
        return trimmed
    return '#'
