"""Unit tests for core/utils/validation.py"""

import pytest

from mdpdf.core.utils.validation import normalize_paper_format, normalize_toc_depth, parse_margin


@pytest.mark.parametrize("raw,expected", [
    ("10mm", ("10mm", "10mm", "10mm", "10mm")),
    ("10mm 5mm", ("10mm", "5mm", "10mm", "5mm")),
    ("1in 2in 3in", ("1in", "2in", "3in", "2in")),
    ("1 2 3 4", ("1", "2", "3", "4")),
    (".5cm", (".5cm", ".5cm", ".5cm", ".5cm")),
    (None, ("15mm", "10mm", "15mm", "10mm")),
])
def test_parse_margin(raw, expected):
    """CSS shorthand expands to top/right/bottom/left."""
    margin = parse_margin(raw)
    assert (margin["top"], margin["right"], margin["bottom"], margin["left"]) == expected


@pytest.mark.parametrize("raw", ["1mm 2mm 3mm 4mm 5mm", "ten", "10em", "-5mm"])
def test_parse_margin_rejects_invalid(raw):
    """Bad units, counts or numbers raise ValueError."""
    with pytest.raises(ValueError):
        parse_margin(raw)


@pytest.mark.parametrize("raw,expected", [("a4", "A4"), ("LETTER", "Letter"), (None, "A4"), ("Tabloid", "Tabloid")])
def test_normalize_paper_format(raw, expected):
    """Formats are matched case-insensitively."""
    assert normalize_paper_format(raw) == expected


def test_normalize_paper_format_rejects_unknown():
    """Unknown formats raise ValueError listing the allowed ones."""
    with pytest.raises(ValueError, match="Allowed formats"):
        normalize_paper_format("B5")


def test_normalize_toc_depth():
    """None means the default; 1-6 pass through."""
    assert normalize_toc_depth(None) == 6
    assert normalize_toc_depth(3) == 3


@pytest.mark.parametrize("raw", [0, 7, "3", 2.5, True])
def test_normalize_toc_depth_rejects_invalid(raw):
    """Out-of-range or non-integer depths raise ValueError."""
    with pytest.raises(ValueError):
        normalize_toc_depth(raw)
