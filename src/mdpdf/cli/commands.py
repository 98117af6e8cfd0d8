"""CLI command implementations"""

import asyncio
import logging
import signal
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdpdf.config import Settings, load_config
from mdpdf.core.assets import resolve_runtime_assets
from mdpdf.core.batch import convert_batch, discover_files, plan_outputs, resolve_output_strategy
from mdpdf.core.models import ConversionResult, RenderOptions


log = logging.getLogger(__name__)


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        settings, config_path = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    if config_path is not None:
        typer.echo(f"Using config: {_display(config_path)}")
    return settings


def _display(path: Path) -> str:
    """Path relative to the working directory when possible."""
    try:
        return str(Path(path).resolve().relative_to(Path.cwd().resolve()))
    except ValueError:
        return str(path)


def _read_template_file(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise FileNotFoundError(f'Failed to read template file "{path}": {e}') from e


def _render_options(settings: Settings) -> RenderOptions:
    """Translate loaded settings into per-document render options."""
    return RenderOptions(
        margin=settings.margin,
        format=settings.format,
        toc=settings.toc,
        toc_depth=settings.toc_depth,
        math=settings.math,
        mermaid=settings.mermaid,
        custom_css=Path(settings.css).resolve() if settings.css else None,
        template=Path(settings.template).resolve() if settings.template else None,
        header_template=_read_template_file(settings.header),
        footer_template=_read_template_file(settings.footer),
        title=settings.title,
        assets=resolve_runtime_assets(
            settings.assets_mode, Path(settings.assets_dir) if settings.assets_dir else None,
        ),
    )


def _echo_start(source: Path, output: Path) -> None:
    typer.echo(f"Converting {_display(source)} -> {_display(output)}...")


def _echo_result(result: ConversionResult) -> None:
    if result.ok:
        typer.secho(f"Done: {result.output.name}", fg=typer.colors.GREEN)
    else:
        typer.secho(f"Failed ({_display(result.source)}): {result.error}", fg=typer.colors.RED, err=True)


def _run(coro):
    """Run the batch on a fresh loop; SIGINT or SIGTERM cancels it cleanly."""
    async def main():
        task = asyncio.current_task()
        try:
            asyncio.get_running_loop().add_signal_handler(signal.SIGTERM, task.cancel)
        except (NotImplementedError, RuntimeError):
            log.debug("SIGTERM handler unavailable on this event loop")
        return await coro

    try:
        return asyncio.run(main())
    except (KeyboardInterrupt, asyncio.CancelledError):
        typer.secho("\nGracefully shutting down...", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(130)


def _convert(inputs: list[str], output: Optional[str], overrides: dict, html_only: bool) -> None:
    """Shared body of the convert and html commands."""
    settings = _settings(overrides=overrides)
    suffix = ".html" if html_only else ".pdf"
    try:
        strategy = resolve_output_strategy(output, inputs, suffix)
        files = discover_files(inputs)
        if not files:
            raise ValueError("No input markdown files found.")
        plan = plan_outputs(files, strategy, suffix)
        options = _render_options(settings)
    except (ValueError, OSError) as e:
        _fail(str(e))

    results = _run(convert_batch(
        plan, options,
        concurrency=settings.concurrency,
        html_only=html_only,
        preserve_timestamp=settings.preserve_timestamp,
        executable_path=settings.executable_path,
        on_start=_echo_start,
        on_finish=_echo_result,
    ))

    ok = sum(1 for r in results if r.ok)
    failed = len(results) - ok
    if ok:
        typer.secho(f"Successfully converted {ok} file(s).", fg=typer.colors.GREEN)
    if failed:
        typer.secho(f"Failed to convert {failed} file(s).", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


InputsArg = Annotated[list[str], typer.Argument(help="Markdown files, directories or glob patterns")]
OutputOpt = Annotated[Optional[str], typer.Option("--output", "-o", help="Output file or directory")]
CssOpt = Annotated[Optional[str], typer.Option("--css", help="Stylesheet appended to the default theme")]
TemplateOpt = Annotated[Optional[str], typer.Option("--template", help="HTML template file")]
MarginOpt = Annotated[Optional[str], typer.Option("--margin", "-m", help="Page margin, e.g. '15mm 10mm'")]
FormatOpt = Annotated[Optional[str], typer.Option("--format", "-f", help="Paper format (A4, Letter, ...)")]
TocOpt = Annotated[Optional[bool], typer.Option("--toc/--no-toc", help="Prepend a table of contents")]
TocDepthOpt = Annotated[Optional[int], typer.Option("--toc-depth", help="Deepest heading level in the TOC (1-6)")]
MathOpt = Annotated[Optional[bool], typer.Option("--math/--no-math", help="Inject MathJax when math is found")]
MermaidOpt = Annotated[Optional[bool], typer.Option("--mermaid/--no-mermaid", help="Inject Mermaid when diagrams are found")]
TitleOpt = Annotated[Optional[str], typer.Option("--title", help="Document title")]
ConcurrencyOpt = Annotated[Optional[int], typer.Option("--concurrency", "-j", help="Documents converted at once")]
TimestampOpt = Annotated[Optional[bool], typer.Option("--preserve-timestamp", help="Copy source mtime onto outputs")]
AssetsModeOpt = Annotated[Optional[str], typer.Option("--assets-mode", help="Load runtimes from 'cdn' or 'local'")]
AssetsDirOpt = Annotated[Optional[str], typer.Option("--assets-dir", help="Directory holding local runtimes")]


def convert_cmd(
    inputs: InputsArg,
    output: OutputOpt = None,
    css: CssOpt = None,
    template: TemplateOpt = None,
    margin: MarginOpt = None,
    paper: FormatOpt = None,
    header: Annotated[Optional[str], typer.Option("--header", help="File holding the PDF header template")] = None,
    footer: Annotated[Optional[str], typer.Option("--footer", help="File holding the PDF footer template")] = None,
    toc: TocOpt = None,
    toc_depth: TocDepthOpt = None,
    math: MathOpt = None,
    mermaid: MermaidOpt = None,
    title: TitleOpt = None,
    concurrency: ConcurrencyOpt = None,
    executable_path: Annotated[Optional[str], typer.Option("--executable-path", help="Chromium executable")] = None,
    preserve_timestamp: TimestampOpt = None,
    assets_mode: AssetsModeOpt = None,
    assets_dir: AssetsDirOpt = None,
    ):
    """Convert markdown files to PDF."""
    _convert(inputs, output, {
        "css": css, "template": template, "margin": margin, "format": paper,
        "header": header, "footer": footer, "toc": toc, "toc_depth": toc_depth,
        "math": math, "mermaid": mermaid, "title": title, "concurrency": concurrency,
        "executable_path": executable_path, "preserve_timestamp": preserve_timestamp,
        "assets_mode": assets_mode, "assets_dir": assets_dir,
    }, html_only=False)


def html_cmd(
    inputs: InputsArg,
    output: OutputOpt = None,
    css: CssOpt = None,
    template: TemplateOpt = None,
    toc: TocOpt = None,
    toc_depth: TocDepthOpt = None,
    math: MathOpt = None,
    mermaid: MermaidOpt = None,
    title: TitleOpt = None,
    concurrency: ConcurrencyOpt = None,
    preserve_timestamp: TimestampOpt = None,
    assets_mode: AssetsModeOpt = None,
    assets_dir: AssetsDirOpt = None,
    ):
    """Render markdown files to standalone HTML without launching a browser."""
    _convert(inputs, output, {
        "css": css, "template": template, "toc": toc, "toc_depth": toc_depth,
        "math": math, "mermaid": mermaid, "title": title, "concurrency": concurrency,
        "preserve_timestamp": preserve_timestamp,
        "assets_mode": assets_mode, "assets_dir": assets_dir,
    }, html_only=True)
