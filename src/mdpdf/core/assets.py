"""Runtime asset resolution: where the math and diagram scripts are loaded from"""

import logging
from pathlib import Path
from typing import Optional

from mdpdf.core.models import RuntimeAssets


log = logging.getLogger(__name__)

CDN_MATHJAX_SRC = "https://cdn.jsdelivr.net/npm/mathjax@4/tex-chtml.js"
CDN_MERMAID_SRC = "https://cdn.jsdelivr.net/npm/mermaid@11/dist/mermaid.min.js"

ASSET_MODES = ("cdn", "local")
MATHJAX_RELPATH = Path("mathjax") / "tex-chtml.js"
MERMAID_RELPATH = Path("mermaid") / "mermaid.min.js"


def cdn_assets() -> RuntimeAssets:
    return RuntimeAssets(mathjax_src=CDN_MATHJAX_SRC, mermaid_src=CDN_MERMAID_SRC)


def resolve_runtime_assets(mode: str = "cdn", assets_dir: Optional[Path] = None) -> RuntimeAssets:
    """Return script sources for the given mode.

    'local' uses file:// URLs into assets_dir when both runtimes are present
    there; otherwise it logs a warning and falls back to the CDN.
    """
    if mode not in ASSET_MODES:
        raise ValueError(f'Invalid assets mode "{mode}". Expected one of: {", ".join(ASSET_MODES)}.')
    if mode == "cdn":
        return cdn_assets()

    if assets_dir is None:
        log.warning("Local assets requested but no assets directory is configured; using CDN.")
        return cdn_assets()

    root = Path(assets_dir).expanduser().resolve()
    mathjax, mermaid = root / MATHJAX_RELPATH, root / MERMAID_RELPATH
    if not (mathjax.is_file() and mermaid.is_file()):
        log.warning(f"Local runtime assets not found in {root}; using CDN.")
        return cdn_assets()
    return RuntimeAssets(mathjax_src=mathjax.as_uri(), mermaid_src=mermaid.as_uri())
