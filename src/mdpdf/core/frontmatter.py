"""Leading YAML frontmatter extraction"""

import re
from dataclasses import dataclass, field
from typing import Any

import yaml


FRONTMATTER_RE = re.compile(r'^---\s*\r?\n(.*?)\r?\n---(?:\s*\r?\n|$)', re.DOTALL)


@dataclass(frozen=True)
class FrontmatterResult:
    data: dict[str, Any]
    content: str
    warnings: list[str] = field(default_factory=list)


def parse_frontmatter(markdown: str) -> FrontmatterResult:
    """Split a leading '---' YAML block from the document body.

    Never loses content: when the YAML is malformed the original text is
    returned untouched as the body together with a warning. A block that parses
    to something other than a mapping is stripped and yields empty data.
    """
    m = FRONTMATTER_RE.match(markdown)
    if not m:
        return FrontmatterResult(data={}, content=markdown)

    source = m.group(1)
    body = markdown[m.end():]
    if not source.strip():
        return FrontmatterResult(data={}, content=body)

    try:
        parsed = yaml.safe_load(source)
    except yaml.YAMLError as e:
        return FrontmatterResult(
            data={}, content=markdown, warnings=[f"Frontmatter parsing failed: {e}"],
        )
    if not isinstance(parsed, dict):
        return FrontmatterResult(data={}, content=body)
    return FrontmatterResult(data=parsed, content=body)
