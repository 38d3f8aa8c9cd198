# ================================================================
# PROJECT: NOISEMAP - LOCAL NOISE VISUALIZER
#
# FILE: UTILS/REPORT.PY - PDF WITH SOURCE, SETTINGS AND NOISE MAPS
# DESCRIPTION: USES FPDF TO LAY OUT SUMMARIES AND THE BEFORE/AFTER COMPARISON
# ================================================================
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from fpdf import FPDF
from PIL import Image

PAGE_WIDTH = 190
HALF_WIDTH = 92
MAX_PAIR_HEIGHT = 120


# ============================================================
# CLASS COMPARISONPAGE: BEFORE/AFTER MAPS AND THEIR METRICS
# ============================================================
@dataclass
class ComparisonPage:
    """Side-by-side page contents; metrics map a name to (before, after)."""

    before_map: Path
    after_map: Path
    cleaned_image: Path
    metrics: Dict[str, Tuple[str, str]] = field(default_factory=dict)
    notes: str = ""


# ============================================================
# FUNCTION _LATIN1: KEEPS TEXT WITHIN THE CORE FONT CHARSET
# ============================================================
def _latin1(text: str) -> str:
    return text.encode("latin-1", errors="replace").decode("latin-1")


# ============================================================
# FUNCTION _SECTION: BOLD HEADING FOLLOWED BY KEY/VALUE ROWS
# ============================================================
def _section(pdf: FPDF, title: str, rows: Dict[str, str]) -> None:
    if not rows:
        return
    pdf.set_font("Helvetica", "B", 13)
    pdf.cell(0, 9, _latin1(title), new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", size=11)
    for key, value in rows.items():
        pdf.cell(60, 7, _latin1(key))
        pdf.cell(0, 7, _latin1(value), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(3)


# ============================================================
# FUNCTION _COMPARISON: TWO MAPS SIDE BY SIDE PLUS A METRIC TABLE
# ============================================================
def _comparison(pdf: FPDF, page: ComparisonPage) -> None:
    pdf.add_page()
    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 10, "Noise before and after whitening", new_x="LMARGIN", new_y="NEXT")

    pdf.set_font("Helvetica", "B", 11)
    pdf.cell(HALF_WIDTH, 7, "Before")
    pdf.cell(HALF_WIDTH, 7, "After", new_x="LMARGIN", new_y="NEXT")
    top = pdf.get_y()
    left = pdf.l_margin
    with Image.open(page.before_map) as img:
        aspect = img.height / float(img.width)
    width = min(HALF_WIDTH, MAX_PAIR_HEIGHT / aspect)
    pdf.image(str(page.before_map), x=left, y=top, w=width)
    pdf.image(str(page.after_map), x=left + HALF_WIDTH + 6, y=top, w=width)
    pdf.set_y(top + width * aspect + 6)

    pdf.set_font("Helvetica", "B", 11)
    pdf.cell(70, 8, "Metric", border=1)
    pdf.cell(60, 8, "Before", border=1)
    pdf.cell(60, 8, "After", border=1, new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", size=11)
    for name, (before_value, after_value) in page.metrics.items():
        pdf.cell(70, 7, _latin1(name), border=1)
        pdf.cell(60, 7, _latin1(before_value), border=1)
        pdf.cell(60, 7, _latin1(after_value), border=1, new_x="LMARGIN", new_y="NEXT")

    if page.notes:
        pdf.ln(4)
        pdf.multi_cell(0, 7, _latin1(page.notes))

    pdf.add_page()
    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 10, "Whitened image", new_x="LMARGIN", new_y="NEXT")
    pdf.image(str(page.cleaned_image), w=PAGE_WIDTH)


# ============================================================
# FUNCTION BUILD_REPORT: ASSEMBLES THE PDF
# ============================================================
def build_report(
    destination: Path,
    source: Dict[str, str],
    settings: Dict[str, str],
    maps: List[Tuple[str, Path, str]],
    comparison: Optional[ComparisonPage] = None,
) -> Path:
    destination.parent.mkdir(parents=True, exist_ok=True)
    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)

    pdf.add_page()
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 12, "Local Noise Analysis Report", new_x="LMARGIN", new_y="NEXT")
    _section(pdf, "Source", source)
    _section(pdf, "Settings", settings)

    for title, path, caption in maps:
        pdf.add_page()
        pdf.set_font("Helvetica", "B", 14)
        pdf.cell(0, 10, _latin1(title), new_x="LMARGIN", new_y="NEXT")
        if caption:
            pdf.set_font("Helvetica", size=11)
            pdf.multi_cell(0, 7, _latin1(caption))
            pdf.ln(2)
        pdf.image(str(path), w=PAGE_WIDTH)

    if comparison is not None:
        _comparison(pdf, comparison)

    pdf.output(str(destination))
    return destination
