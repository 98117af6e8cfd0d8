"""HTML document assembly: template loading and token substitution"""

import logging
import re
from pathlib import Path
from typing import Optional

from mdpdf.core.assets import cdn_assets
from mdpdf.core.math import MATH_IGNORE_CLASS
from mdpdf.core.models import RuntimeAssets
from mdpdf.core.utils.html import escape_html


log = logging.getLogger(__name__)

DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    {{base}}
    <title>{{title}}</title>
    <style>{{css}}</style>
    {{mathjax}}
    {{mermaid}}
  </head>
  <body class="markdown-body">
    {{content}}
  </body>
</html>
"""

MATHJAX_SNIPPET = """
<script>
  window.MathJax = {
    options: {
      ignoreHtmlClass: '%(ignore_class)s'
    },
    tex: {
      inlineMath: [['$', '$'], ['\\\\(', '\\\\)']],
      displayMath: [['$$', '$$'], ['\\\\[', '\\\\]']]
    }
  };
</script>
<script id="MathJax-script" defer src="%(src)s"></script>"""

MERMAID_SNIPPET = """
<script id="Mermaid-script" src="%(src)s"></script>
<script>
  if (window.mermaid && typeof window.mermaid.initialize === 'function') {
    window.mermaid.initialize({ startOnLoad: false, securityLevel: 'strict' });
  }
</script>"""

TEMPLATE_TOKEN_RE = re.compile(r'\{\{(title|base|css|content|mathjax|mermaid)\}\}')


def load_template(template_path: Optional[Path]) -> str:
    """Read a user template; an unreadable file logs a warning and yields the default."""
    if template_path is None:
        return DEFAULT_TEMPLATE
    try:
        return Path(template_path).read_text(encoding="utf-8")
    except OSError as e:
        log.warning(f"Template {template_path} could not be read ({e}); using the default template.")
        return DEFAULT_TEMPLATE


def base_tag(base_path: Optional[Path]) -> str:
    if base_path is None:
        return ""
    href = Path(base_path).resolve().as_uri().rstrip("/") + "/"
    return f'<base href="{escape_html(href)}">'


def mathjax_snippet(src: str) -> str:
    return MATHJAX_SNIPPET % {"ignore_class": MATH_IGNORE_CLASS, "src": escape_html(src)}


def mermaid_snippet(src: str) -> str:
    return MERMAID_SNIPPET % {"src": escape_html(src)}


def substitute_tokens(template: str, values: dict[str, str]) -> str:
    """Replace {{token}} occurrences in one pass; substituted text is never rescanned."""
    return TEMPLATE_TOKEN_RE.sub(lambda m: values[m.group(1)], template)


def render_template(
    *,
    title: str,
    css: str,
    content: str,
    template_path: Optional[Path] = None,
    base_path: Optional[Path] = None,
    include_mathjax: bool = False,
    include_mermaid: bool = False,
    assets: Optional[RuntimeAssets] = None,
    ) -> str:
    """Assemble the final HTML document."""
    assets = assets or cdn_assets()
    values = {
        "title":   escape_html(title),
        "base":    base_tag(base_path),
        "css":     css,
        "content": content,
        "mathjax": mathjax_snippet(assets.mathjax_src) if include_mathjax else "",
        "mermaid": mermaid_snippet(assets.mermaid_src) if include_mermaid else "",
    }
    return substitute_tokens(load_template(template_path), values)
