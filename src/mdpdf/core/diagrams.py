"""Mermaid diagram detection"""

import re


DIAGRAM_LANGUAGE = "mermaid"

MERMAID_FENCE_RE = re.compile(r'^ {0,3}(?:`{3,}|~{3,})[ \t]*mermaid[ \t]*$', re.MULTILINE)


def has_mermaid_syntax(content: str) -> bool:
    """True if content opens a fence whose info string is exactly 'mermaid'."""
    return bool(MERMAID_FENCE_RE.search(content))
