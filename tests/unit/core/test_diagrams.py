"""Unit tests for core/diagrams.py"""

import pytest

from mdpdf.core.diagrams import has_mermaid_syntax


@pytest.mark.parametrize("text,expected", [
    ("```mermaid\ngraph TD;\n```", True),
    ("~~~mermaid\ngraph TD;\n~~~", True),
    ("   ```  mermaid\nx\n```", True),
    ("```mermaid-js\nx\n```", False),
    ("```python\nmermaid\n```", False),
    ("mermaid", False),
])
def test_has_mermaid_syntax(text, expected):
    """Only fences whose info string is exactly 'mermaid' count."""
    assert has_mermaid_syntax(text) is expected
