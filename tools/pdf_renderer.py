"""
ProposalGen PDF Renderer
Draws the one-page project summary (field list + fee table) with reportlab

Layout:
- A4 page (595 x 842pt), Helvetica 12pt
- Label at x=50, value at x=220, first line at y=800, 30pt line spacing
- Optional "Proposed Fees" table: Staff / Hours / Rate / Line Total,
  22pt rows, shaded header, total under the Line Total column
"""

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional, Tuple

from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from core.exceptions import RenderError
from core.models import FeeSummary, ProjectSummary, format_currency, format_hours

logger = logging.getLogger(__name__)


PAGE_SIZE = (595, 842)
FONT_NAME = "Helvetica"
FONT_SIZE = 12
HEADING_SIZE = 14
TABLE_FONT_SIZE = 11

LABEL_X = 50
VALUE_X = 220
TOP_Y = 800
LINE_SPACING = 30
WRAP_LEADING = 15
BOTTOM_MARGIN = 50

ROW_HEIGHT = 22
TABLE_X = 50

HEADER_FILL = (0.9, 0.9, 0.9)
HEADER_BORDER = (0.75, 0.75, 0.75)
ROW_BORDER = (0.85, 0.85, 0.85)
TOTAL_FILL = (0.95, 0.95, 0.95)


@dataclass(frozen=True)
class Column:
    label: str
    width: int


FEE_COLUMNS: Tuple[Column, ...] = (
    Column("Staff", 180),
    Column("Hours", 80),
    Column("Rate", 80),
    Column("Line Total", 100),
)


class PdfRenderer:
    """
    Renders a ProjectSummary to PDF bytes.

    Pages are added whenever the cursor would cross the bottom margin; the fee
    table header is repeated on continuation pages.
    """

    def __init__(self, page_size: Tuple[int, int] = PAGE_SIZE):
        self.page_size = page_size

    def render(self, summary: ProjectSummary) -> bytes:
        buffer = BytesIO()
        try:
            pdf = canvas.Canvas(buffer, pagesize=self.page_size)
            pdf.setTitle(f"Project Summary - {summary.project_name}")
            pdf.setFont(FONT_NAME, FONT_SIZE)

            y = TOP_Y
            for label, value in summary.fields():
                y = self._draw_field(pdf, y, label, value or "")

            if summary.fee.lines:
                y -= 20
                y = self._ensure_space(pdf, y, HEADING_SIZE + 20 + 2 * ROW_HEIGHT)
                pdf.setFont(FONT_NAME, HEADING_SIZE)
                pdf.drawString(LABEL_X, y, "Proposed Fees")
                y -= 20
                self._draw_fee_table(pdf, y, summary.fee)

            pdf.showPage()
            pdf.save()
        except Exception as e:
            logger.error(f"PDF render failed for '{summary.project_name}': {e}")
            raise RenderError(f"PDF render failed: {e}") from e

        return buffer.getvalue()

    # ============== Fields ==============

    def _draw_field(self, pdf: canvas.Canvas, y: float, label: str, value: str) -> float:
        max_width = self.page_size[0] - VALUE_X - LABEL_X
        wrapped = simpleSplit(value, FONT_NAME, FONT_SIZE, max_width) or [""]
        y = self._ensure_space(pdf, y, (len(wrapped) - 1) * WRAP_LEADING)

        pdf.setFont(FONT_NAME, FONT_SIZE)
        pdf.setFillColorRGB(0, 0, 0)
        pdf.drawString(LABEL_X, y, f"{label}:")
        for i, text in enumerate(wrapped):
            pdf.drawString(VALUE_X, y - i * WRAP_LEADING, text)

        return y - (len(wrapped) - 1) * WRAP_LEADING - LINE_SPACING

    def _ensure_space(self, pdf: canvas.Canvas, y: float, needed: float) -> float:
        if y - needed >= BOTTOM_MARGIN:
            return y
        pdf.showPage()
        pdf.setFont(FONT_NAME, FONT_SIZE)
        return TOP_Y

    # ============== Fee Table ==============

    def _draw_cell(
        self,
        pdf: canvas.Canvas,
        x: float,
        y: float,
        width: float,
        text: str,
        border: Tuple[float, float, float],
        fill: Optional[Tuple[float, float, float]] = None,
    ) -> None:
        pdf.setLineWidth(1)
        pdf.setStrokeColorRGB(*border)
        if fill:
            pdf.setFillColorRGB(*fill)
        pdf.rect(x, y - ROW_HEIGHT + 4, width, ROW_HEIGHT, stroke=1, fill=1 if fill else 0)

        pdf.setFillColorRGB(0, 0, 0)
        pdf.setFont(FONT_NAME, TABLE_FONT_SIZE)
        pdf.drawString(x + 6, y - 15, text)

    def _draw_header(self, pdf: canvas.Canvas, y: float) -> float:
        x = TABLE_X
        for column in FEE_COLUMNS:
            self._draw_cell(pdf, x, y, column.width, column.label, HEADER_BORDER, HEADER_FILL)
            x += column.width
        return y - ROW_HEIGHT

    def _draw_fee_table(self, pdf: canvas.Canvas, y: float, fee: FeeSummary) -> float:
        y = self._draw_header(pdf, y)

        for line in fee.lines:
            if y - ROW_HEIGHT < BOTTOM_MARGIN:
                pdf.showPage()
                y = self._draw_header(pdf, TOP_Y)

            values: List[str] = [
                line.staff_name,
                format_hours(line.hours),
                format_currency(line.rate),
                format_currency(line.line_total),
            ]
            x = TABLE_X
            for column, text in zip(FEE_COLUMNS, values):
                self._draw_cell(pdf, x, y, column.width, text, ROW_BORDER)
                x += column.width
            y -= ROW_HEIGHT

        if y - ROW_HEIGHT < BOTTOM_MARGIN:
            pdf.showPage()
            y = TOP_Y

        total_x = TABLE_X + sum(column.width for column in FEE_COLUMNS[:-1])
        self._draw_cell(
            pdf, total_x, y, FEE_COLUMNS[-1].width, format_currency(fee.total),
            HEADER_BORDER, TOTAL_FILL,
        )
        pdf.setFont(FONT_NAME, TABLE_FONT_SIZE)
        pdf.drawString(TABLE_X + 6, y - 15, "Total")

        return y - ROW_HEIGHT


def create_pdf_renderer() -> PdfRenderer:
    """Factory function to create the PDF renderer"""
    return PdfRenderer()
