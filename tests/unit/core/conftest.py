"""Shared fixtures for core unit tests"""

import pytest

from mdpdf.core.markdown import create_markdown
from mdpdf.core.renderer import Renderer


SAMPLE_MD = """\
---
title: Sample
---

# Introduction

Inline $a^2 + b^2 = c^2$ and a price of \\$5.

## Details

> [!note] Remember
> Callouts hold **markdown**.

```python
print("hello")
```

<!-- PAGE_BREAK -->

See [the guide](./guide.md#setup).
"""


@pytest.fixture(name="md")
def md_fixture():
    return create_markdown()


@pytest.fixture(name="renderer")
def renderer_fixture():
    return Renderer()


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD
