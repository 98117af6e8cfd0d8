"""PDF materialization through a headless Chromium driven by Playwright"""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from playwright.async_api import Browser, Error as PlaywrightError, async_playwright

from mdpdf.core.models import RenderOptions
from mdpdf.core.utils.validation import normalize_paper_format, parse_margin


log = logging.getLogger(__name__)

NAVIGATION_TIMEOUT_MS = 60_000
EMPTY_HEADER_FOOTER = "<span></span>"
LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

# Waits for images (5s cap each), then for the math and diagram runtimes to
# initialize (10s cap each) and finish typesetting.
SETTLE_SCRIPT = """
async () => {
  const images = Array.from(document.images);
  await Promise.all(images.map((img) => {
    if (img.complete) return Promise.resolve();
    return new Promise((resolve) => {
      img.addEventListener('load', () => resolve(), { once: true });
      img.addEventListener('error', () => resolve(), { once: true });
      setTimeout(resolve, 5000);
    });
  }));

  const waitFor = (ready, name) => new Promise((resolve, reject) => {
    const startedAt = Date.now();
    const tick = () => {
      if (ready()) { resolve(); return; }
      if (Date.now() - startedAt > 10000) {
        reject(new Error(name + ' did not initialize within 10s'));
        return;
      }
      setTimeout(tick, 100);
    };
    tick();
  });

  if (document.getElementById('MathJax-script')) {
    await waitFor(() => window.MathJax && window.MathJax.typesetPromise, 'MathJax');
    await window.MathJax.typesetPromise();
  }
  if (document.getElementById('Mermaid-script') && document.querySelector('.mermaid')) {
    await waitFor(() => window.mermaid && window.mermaid.run, 'Mermaid');
    await window.mermaid.run({ querySelector: '.mermaid', suppressErrors: false });
  }
}
"""


class PdfRenderer:
    """Async context manager owning one Chromium instance shared by many documents.

    Every document gets its own browser context and temporary directory, both
    released when the document finishes, fails or is cancelled.
    """

    def __init__(self, executable_path: Optional[str] = None) -> None:
        self.executable_path = executable_path
        self._playwright = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> "PdfRenderer":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        if self._browser is not None:
            return
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=True,
                executable_path=self.executable_path,
                args=LAUNCH_ARGS,
            )
        except PlaywrightError as e:
            await self._playwright.stop()
            self._playwright = None
            raise RuntimeError(
                f"Failed to launch browser: {e}\n"
                "Run 'playwright install chromium' or pass --executable-path."
            ) from e

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def render_pdf(self, html: str, output_path: Path, options: RenderOptions) -> None:
        """Load html in a fresh context, wait for it to settle and print it to output_path."""
        await self.start()
        margin = parse_margin(options.margin)
        paper_format = normalize_paper_format(options.format)

        tmp_dir = Path(tempfile.mkdtemp(prefix="mdpdf-"))
        try:
            html_path = tmp_dir / "document.html"
            html_path.write_text(html, encoding="utf-8")

            context = await self._browser.new_context()
            try:
                page = await context.new_page()
                await page.emulate_media(media="print")
                await page.goto(html_path.as_uri(), wait_until="networkidle", timeout=NAVIGATION_TIMEOUT_MS)
                await page.evaluate(SETTLE_SCRIPT)

                output_path.parent.mkdir(parents=True, exist_ok=True)
                await page.pdf(
                    path=str(output_path),
                    format=paper_format,
                    print_background=True,
                    margin=margin,
                    display_header_footer=bool(options.header_template or options.footer_template),
                    header_template=options.header_template or EMPTY_HEADER_FOOTER,
                    footer_template=options.footer_template or EMPTY_HEADER_FOOTER,
                )
                log.debug(f"Wrote {output_path}")
            finally:
                await context.close()
        finally:
            shutil.rmtree(tmp_dir, ignore_errors=True)
