"""Integration tests for the html command (markdown -> standalone HTML)"""

import pytest
from typer.testing import CliRunner

from mdpdf.cli.cli import app


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MDPDF_TITLE", raising=False)
    return tmp_path


def test_html_cmd_writes_adjacent_file(tmp_path):
    """html renders next to the source, rewriting links to .html."""
    (tmp_path / "doc.md").write_text("# Hello\n\n[next](./next.md)\n")

    result = CliRunner().invoke(app, ["html", "doc.md"])

    assert result.exit_code == 0, result.output
    assert "Converting doc.md -> doc.html..." in result.output
    assert "Done: doc.html" in result.output
    assert "Successfully converted 1 file(s)." in result.output
    html = (tmp_path / "doc.html").read_text()
    assert '<h1 id="hello">Hello</h1>' in html
    assert 'href="./next.html"' in html


def test_html_cmd_directory_output(tmp_path):
    """A directory input with -o writes every document into that directory."""
    src = tmp_path / "notes"
    src.mkdir()
    (src / "a.md").write_text("# A\n")
    (src / "b.md").write_text("# B\n")

    result = CliRunner().invoke(app, ["html", "notes", "-o", "site", "--toc", "--title", "Notes"])

    assert result.exit_code == 0, result.output
    assert "Successfully converted 2 file(s)." in result.output
    html = (tmp_path / "site" / "a.html").read_text()
    assert "<title>Notes</title>" in html
    assert '<div class="toc">' in html


def test_html_cmd_uses_config_file(tmp_path):
    """A .mdpdfrc.yaml in the working directory is announced and applied."""
    (tmp_path / ".mdpdfrc.yaml").write_text("title: From Config\n")
    (tmp_path / "doc.md").write_text("text\n")

    result = CliRunner().invoke(app, ["html", "doc.md"])

    assert result.exit_code == 0, result.output
    assert "Using config: .mdpdfrc.yaml" in result.output
    assert "<title>From Config</title>" in (tmp_path / "doc.html").read_text()


def test_html_cmd_no_inputs(tmp_path):
    """Inputs that match nothing are an error."""
    result = CliRunner().invoke(app, ["html", "missing/*.md"])
    assert result.exit_code == 1
    assert "No input markdown files found." in result.output


def test_html_cmd_single_file_output_with_directory_input(tmp_path):
    """A single .html output cannot take a directory input."""
    (tmp_path / "notes").mkdir()
    (tmp_path / "notes" / "a.md").write_text("# A\n")
    result = CliRunner().invoke(app, ["html", "notes", "-o", "out.html"])
    assert result.exit_code == 1
    assert "single .html file" in result.output


def test_html_cmd_missing_css_fails_document(tmp_path):
    """A missing stylesheet fails the document and the run."""
    (tmp_path / "doc.md").write_text("# A\n")
    result = CliRunner().invoke(app, ["html", "doc.md", "--css", "nope.css"])
    assert result.exit_code == 1
    assert "Failed (doc.md)" in result.output
    assert "Failed to convert 1 file(s)." in result.output


def test_convert_cmd_missing_header_file(tmp_path):
    """A missing header template file is an error before any conversion."""
    (tmp_path / "doc.md").write_text("# A\n")
    result = CliRunner().invoke(app, ["convert", "doc.md", "--header", "nope.html"])
    assert result.exit_code == 1
    assert "Failed to read template file" in result.output


def test_convert_cmd_invalid_margin(tmp_path):
    """Invalid page geometry is rejected as a configuration error."""
    (tmp_path / "doc.md").write_text("# A\n")
    result = CliRunner().invoke(app, ["convert", "doc.md", "--margin", "wide"])
    assert result.exit_code == 1
    assert "Error:" in result.output
