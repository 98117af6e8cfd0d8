"""Built-in stylesheet: document theme plus the Pygments highlight theme"""

from pygments.formatters import HtmlFormatter


HIGHLIGHT_STYLE = "default"

DEFAULT_CSS = """
:root { color-scheme: light; }
body.markdown-body {
  font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif;
  font-size: 11pt;
  line-height: 1.55;
  color: #1f2328;
  margin: 0;
}
h1, h2, h3, h4, h5, h6 { line-height: 1.25; margin: 1.4em 0 0.6em; break-after: avoid; }
h1 { font-size: 2em; border-bottom: 1px solid #d0d7de; padding-bottom: 0.3em; }
h2 { font-size: 1.5em; border-bottom: 1px solid #d0d7de; padding-bottom: 0.3em; }
p, ul, ol, table, pre, blockquote { margin: 0 0 1em; }
a { color: #0969da; text-decoration: none; }
img { max-width: 100%; }
code { font-family: ui-monospace, SFMono-Regular, Menlo, Consolas, monospace; font-size: 0.9em; }
:not(pre) > code { background: #eff1f3; border-radius: 4px; padding: 0.15em 0.35em; }
pre.highlight { background: #f6f8fa; border-radius: 6px; padding: 0.9em 1em; overflow-x: auto; break-inside: avoid; }
pre.highlight code { background: none; padding: 0; white-space: pre-wrap; }
table { border-collapse: collapse; }
th, td { border: 1px solid #d0d7de; padding: 0.35em 0.75em; }
tr:nth-child(2n) td { background: #f6f8fa; }
blockquote { border-left: 0.25em solid #d0d7de; color: #59636e; padding: 0 1em; }

.toc { margin: 0 0 2em; }
.toc h2 { border: none; }
.toc ul { list-style: none; padding-left: 0; }
.toc-level-2 { padding-left: 1em; }
.toc-level-3 { padding-left: 2em; }
.toc-level-4 { padding-left: 3em; }
.toc-level-5 { padding-left: 4em; }
.toc-level-6 { padding-left: 5em; }

.page-break { break-after: page; page-break-after: always; height: 0; }

.mermaid { text-align: center; margin: 1em 0; break-inside: avoid; }

.mdpdf-math-ignore { font: inherit; }

.callout { border-left: 4px solid #0969da; background: #f0f6ff; border-radius: 4px; padding: 0.6em 1em; margin: 0 0 1em; break-inside: avoid; }
.callout-title { font-weight: 600; margin-bottom: 0.3em; }
.callout-content > :last-child { margin-bottom: 0; }
.callout-tip, .callout-success { border-color: #1a7f37; background: #effaf2; }
.callout-question, .callout-abstract, .callout-todo { border-color: #0598bc; background: #ecf8fb; }
.callout-warning, .callout-caution { border-color: #9a6700; background: #fff8e5; }
.callout-failure, .callout-danger, .callout-bug { border-color: #cf222e; background: #fff0f0; }
.callout-example { border-color: #8250df; background: #f6f0ff; }
.callout-quote { border-color: #59636e; background: #f6f8fa; }
.callout[data-collapsed="true"] .callout-content { display: none; }

@media print {
  .callout[data-collapsed="true"] .callout-content { display: block; }
}
"""


def highlight_css(style: str = HIGHLIGHT_STYLE) -> str:
    """Pygments token colours scoped to the highlighted code blocks."""
    return HtmlFormatter(style=style).get_style_defs(".highlight")


def default_stylesheet() -> str:
    return DEFAULT_CSS.strip() + "\n" + highlight_css()
