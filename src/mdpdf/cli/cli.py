"""CLI entrypoint: Typer app definition and command registration"""

import logging

import typer

from mdpdf.cli.commands import convert_cmd, html_cmd


app = typer.Typer(name="mdpdf", no_args_is_help=True, help="Markdown to PDF/HTML through a headless browser")


@app.callback()
def main():
    """Route library warnings to stderr."""
    logging.basicConfig(level=logging.WARNING, format="Warning: %(message)s")


app.command(name="convert")(convert_cmd)
app.command(name="html")(html_cmd)
