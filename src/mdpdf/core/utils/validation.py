"""Page geometry and TOC depth validation"""

import re


DEFAULT_MARGIN = "15mm 10mm"
DEFAULT_FORMAT = "A4"
DEFAULT_TOC_DEPTH = 6

PAPER_FORMATS = (
    "Letter", "Legal", "Tabloid", "Ledger",
    "A0", "A1", "A2", "A3", "A4", "A5", "A6",
)

_MARGIN_TOKEN_RE = re.compile(r'^\d*\.?\d+(px|in|cm|mm|pc|pt)?$', re.IGNORECASE)
_FORMAT_LOOKUP = {name.lower(): name for name in PAPER_FORMATS}


def parse_margin(raw: str | None) -> dict[str, str]:
    """Expand a 1-4 value CSS margin shorthand into top/right/bottom/left."""
    margin = (raw or "").strip() or DEFAULT_MARGIN
    parts = margin.split()
    if not 1 <= len(parts) <= 4:
        raise ValueError(
            f'Invalid margin value "{raw}". Use 1 to 4 CSS length values, e.g. "20mm" or "10mm 12mm".'
        )
    for part in parts:
        if not _MARGIN_TOKEN_RE.match(part):
            raise ValueError(
                f'Invalid margin token "{part}". Expected numeric value with optional unit (mm, cm, in, px, pt, pc).'
            )

    if len(parts) == 1:
        top = right = bottom = left = parts[0]
    elif len(parts) == 2:
        top, right = parts
        bottom, left = top, right
    elif len(parts) == 3:
        top, right, bottom = parts
        left = right
    else:
        top, right, bottom, left = parts
    return {"top": top, "right": right, "bottom": bottom, "left": left}


def normalize_paper_format(value: str | None) -> str:
    """Return the canonical paper format name; case-insensitive lookup."""
    name = (value or "").strip() or DEFAULT_FORMAT
    normalized = _FORMAT_LOOKUP.get(name.lower())
    if normalized is None:
        raise ValueError(
            f'Invalid paper format "{name}". Allowed formats: {", ".join(PAPER_FORMATS)}.'
        )
    return normalized


def normalize_toc_depth(value) -> int:
    """Validate a TOC depth: None means the default, otherwise an int from 1 to 6."""
    if value is None:
        return DEFAULT_TOC_DEPTH
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f'Invalid TOC depth "{value}". Expected an integer from 1 to 6.')
    if not 1 <= value <= 6:
        raise ValueError(f'Invalid TOC depth "{value}". Expected a value between 1 and 6.')
    return value
