"""Unit tests for core/pdf.py"""

import asyncio
import tempfile
from pathlib import Path

import pytest

from mdpdf.core import pdf
from mdpdf.core.models import RenderOptions
from mdpdf.core.pdf import EMPTY_HEADER_FOOTER, PdfRenderer


class FakePage:
    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.pdf_kwargs = None
        self.loaded = None

    async def emulate_media(self, media):
        pass

    async def goto(self, url, **kwargs):
        if self.fail_on == "goto":
            raise RuntimeError("navigation failed")
        self.loaded = url

    async def evaluate(self, script):
        pass

    async def pdf(self, **kwargs):
        if self.fail_on == "pdf":
            raise RuntimeError("print failed")
        self.pdf_kwargs = kwargs
        with open(kwargs["path"], "wb") as f:
            f.write(b"%PDF-1.4\n")


class FakeContext:
    def __init__(self, page):
        self.page = page
        self.closed = False

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, page):
        self.contexts = []
        self.page = page

    async def new_context(self):
        context = FakeContext(self.page)
        self.contexts.append(context)
        return context


@pytest.fixture(name="temp_dirs")
def temp_dirs_fixture(monkeypatch):
    """Record every temporary directory render_pdf creates."""
    created = []
    real_mkdtemp = tempfile.mkdtemp

    def recording_mkdtemp(*args, **kwargs):
        path = real_mkdtemp(*args, **kwargs)
        created.append(path)
        return path

    monkeypatch.setattr(pdf.tempfile, "mkdtemp", recording_mkdtemp)
    return created


def renderer_with(page):
    renderer = PdfRenderer()
    renderer._browser = FakeBrowser(page)
    return renderer


@pytest.mark.parametrize("fail_on", ["goto", "pdf"])
def test_failed_render_releases_context_and_temp_dir(tmp_path, temp_dirs, fail_on):
    """A failure while loading or printing still closes the context and removes the temp HTML."""
    renderer = renderer_with(FakePage(fail_on=fail_on))
    with pytest.raises(RuntimeError):
        asyncio.run(renderer.render_pdf("<p>x</p>", tmp_path / "out.pdf", RenderOptions()))

    assert [context.closed for context in renderer._browser.contexts] == [True]
    assert len(temp_dirs) == 1
    assert "mdpdf-" in temp_dirs[0]
    assert not Path(temp_dirs[0]).exists()
    assert not (tmp_path / "out.pdf").exists()


def test_render_writes_pdf_and_cleans_up(tmp_path, temp_dirs):
    """A successful render prints with backgrounds and empty header/footer, then cleans up."""
    page = FakePage()
    renderer = renderer_with(page)
    output = tmp_path / "nested" / "out.pdf"
    asyncio.run(renderer.render_pdf("<p>x</p>", output, RenderOptions(format="letter")))

    assert output.exists()
    assert page.loaded.startswith("file://")
    assert page.loaded.endswith("/document.html")
    assert page.pdf_kwargs["format"] == "Letter"
    assert page.pdf_kwargs["print_background"] is True
    assert page.pdf_kwargs["display_header_footer"] is False
    assert page.pdf_kwargs["header_template"] == EMPTY_HEADER_FOOTER
    assert page.pdf_kwargs["footer_template"] == EMPTY_HEADER_FOOTER
    assert renderer._browser.contexts[0].closed
    assert not Path(temp_dirs[0]).exists()


def test_header_template_enables_header_footer(tmp_path, temp_dirs):
    """Any header or footer template turns header/footer display on."""
    page = FakePage()
    renderer = renderer_with(page)
    options = RenderOptions(header_template="<div>head</div>")
    asyncio.run(renderer.render_pdf("<p>x</p>", tmp_path / "out.pdf", options))

    assert page.pdf_kwargs["display_header_footer"] is True
    assert page.pdf_kwargs["header_template"] == "<div>head</div>"
    assert page.pdf_kwargs["footer_template"] == EMPTY_HEADER_FOOTER
