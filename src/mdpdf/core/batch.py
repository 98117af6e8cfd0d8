"""Input discovery, output path planning and bounded-concurrency batch conversion"""

import asyncio
import glob
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from mdpdf.core.models import ConversionResult, RenderOptions
from mdpdf.core.pdf import PdfRenderer
from mdpdf.core.renderer import Renderer


log = logging.getLogger(__name__)

MD_EXTENSIONS = {'.md', '.markdown'}
DEFAULT_CONCURRENCY = 2
MAX_CONCURRENCY = 16

GLOB_MAGIC_RE = re.compile(r'[*?[]')


@dataclass(frozen=True)
class OutputStrategy:
    mode:   str                     # adjacent | directory | single-file
    target: Optional[Path] = None


def _is_markdown(path: Path) -> bool:
    return path.suffix.lower() in MD_EXTENSIONS


def discover_files(inputs: list[str]) -> list[Path]:
    """Return sorted, de-duplicated markdown files for files, directories or glob patterns."""
    found: set[Path] = set()
    for raw in inputs:
        path = Path(raw)
        if path.is_file():
            candidates = [path]
        elif path.is_dir():
            candidates = [p for p in path.rglob('*') if p.is_file()]
        else:
            candidates = [Path(p) for p in glob.glob(raw, recursive=True) if os.path.isfile(p)]
        found.update(p.resolve() for p in candidates if _is_markdown(p))
    return sorted(found)


def may_expand(inputs: list[str]) -> bool:
    """True if inputs can name more than one file (several inputs, a directory or a glob)."""
    if len(inputs) > 1:
        return True
    return any(Path(raw).is_dir() or (not Path(raw).exists() and GLOB_MAGIC_RE.search(raw)) for raw in inputs)


def resolve_output_strategy(output: Optional[str], inputs: list[str], suffix: str) -> OutputStrategy:
    """Adjacent when output is unset, single-file when it ends in suffix, otherwise a directory."""
    if not output:
        return OutputStrategy(mode="adjacent")
    target = Path(output).resolve()
    if target.suffix.lower() != suffix:
        return OutputStrategy(mode="directory", target=target)
    if may_expand(inputs):
        raise ValueError(
            f"Output path cannot be a single {suffix} file when inputs can expand to multiple markdown files."
        )
    return OutputStrategy(mode="single-file", target=target)


def output_path_for(source: Path, strategy: OutputStrategy, suffix: str) -> Path:
    if strategy.mode == "adjacent":
        return source.with_suffix(suffix)
    if strategy.mode == "single-file":
        return strategy.target
    return strategy.target / f"{source.stem}{suffix}"


def plan_outputs(files: list[Path], strategy: OutputStrategy, suffix: str) -> dict[Path, Path]:
    """Map each source to its output path; two sources sharing an output is a ValueError."""
    owners: dict[str, Path] = {}
    plan: dict[Path, Path] = {}
    for source in files:
        output = output_path_for(source, strategy, suffix)
        key = str(output).lower()
        owner = owners.get(key)
        if owner is not None and owner != source:
            raise ValueError(f"Output path collision: {owner} and {source} both resolve to {output}.")
        owners[key] = source
        plan[source] = output
    return plan


def clamp_concurrency(value: Optional[int]) -> int:
    if value is None:
        return DEFAULT_CONCURRENCY
    if value > MAX_CONCURRENCY:
        log.warning(f"Concurrency {value} exceeds the maximum of {MAX_CONCURRENCY}; using {MAX_CONCURRENCY}.")
        return MAX_CONCURRENCY
    return max(1, value)


def copy_timestamp(source: Path, output: Path) -> None:
    st = source.stat()
    os.utime(output, (st.st_atime, st.st_mtime))


async def convert_batch(
    plan: dict[Path, Path],
    options: RenderOptions,
    *,
    concurrency: Optional[int] = None,
    html_only: bool = False,
    preserve_timestamp: bool = False,
    executable_path: Optional[str] = None,
    on_start: Optional[Callable[[Path, Path], None]] = None,
    on_finish: Optional[Callable[[ConversionResult], None]] = None,
    ) -> list[ConversionResult]:
    """Convert every planned source, at most `concurrency` at a time.

    Failures are captured per document; results come back in plan order.
    Cancellation propagates so in-flight documents release their resources.
    """
    suffix = ".html" if html_only else ".pdf"
    renderer = Renderer(options.model_copy(update={"link_extension": suffix}))
    semaphore = asyncio.Semaphore(clamp_concurrency(concurrency))

    async def run(source: Path, output: Path, pdf: Optional[PdfRenderer]) -> ConversionResult:
        async with semaphore:
            if on_start:
                on_start(source, output)
            try:
                markdown = source.read_text(encoding="utf-8")
                overrides = {"base_path": options.base_path or source.parent}
                html = await asyncio.to_thread(renderer.render_html, markdown, overrides)
                if pdf is None:
                    output.parent.mkdir(parents=True, exist_ok=True)
                    output.write_text(html, encoding="utf-8")
                else:
                    await pdf.render_pdf(html, output, renderer.options)
                if preserve_timestamp:
                    copy_timestamp(source, output)
                result = ConversionResult(source=source, output=output)
            except Exception as e:
                result = ConversionResult(source=source, output=output, error=str(e) or type(e).__name__)
            if on_finish:
                on_finish(result)
            return result

    if html_only:
        return list(await asyncio.gather(*(run(s, o, None) for s, o in plan.items())))

    pdf = PdfRenderer(executable_path=executable_path)
    try:
        await pdf.start()
    except RuntimeError as e:
        results = [ConversionResult(source=s, output=o, error=str(e)) for s, o in plan.items()]
        if on_finish:
            for result in results:
                on_finish(result)
        return results
    try:
        return list(await asyncio.gather(*(run(s, o, pdf) for s, o in plan.items())))
    finally:
        await pdf.close()
