# backend/utils/pdf.py
# PDF exports of the reports page (annual and monthly summaries).

import io
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from core.reports import PeriodRow
from schemas.settings import StoreSettingsOut

logger = logging.getLogger(__name__)

# Optional TTF fonts with full Unicode coverage; Helvetica otherwise
FONT_DIR = Path("assets/fonts")
FONT_REGULAR_PATH = FONT_DIR / "DejaVuSans.ttf"
FONT_BOLD_PATH = FONT_DIR / "DejaVuSans-Bold.ttf"

FONT_REGULAR_NAME = "Helvetica"
FONT_BOLD_NAME = "Helvetica-Bold"

PRIMARY_RGB = (226 / 255, 94 / 255, 62 / 255)

_fonts_inited = False
def _init_fonts():
    """Registers DejaVu fonts when present, otherwise keeps the built-in Helvetica."""
    global _fonts_inited, FONT_REGULAR_NAME, FONT_BOLD_NAME
    if _fonts_inited:
        return
    _fonts_inited = True

    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    if not FONT_REGULAR_PATH.exists():
        return
    pdfmetrics.registerFont(TTFont("DejaVuSans", str(FONT_REGULAR_PATH)))
    FONT_REGULAR_NAME = "DejaVuSans"
    if FONT_BOLD_PATH.exists():
        pdfmetrics.registerFont(TTFont("DejaVuSans-Bold", str(FONT_BOLD_PATH)))
        FONT_BOLD_NAME = "DejaVuSans-Bold"
    else:
        FONT_BOLD_NAME = FONT_REGULAR_NAME


def format_currency(amount: float, label: str = "Rs") -> str:
    return f"{label} {amount:.2f}"


def _render_table_report(
    title: str,
    headers: Sequence[str],
    body: List[Sequence[str]],
    total_row: Sequence[str],
    settings: Optional[StoreSettingsOut],
    subtitle: Optional[str] = None,
) -> bytes:
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.units import mm
    from reportlab.pdfgen import canvas

    _init_fonts()

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    # Column x positions: first column left-aligned, the rest right-aligned
    left = 14 * mm
    right = width - 14 * mm
    col_step = (right - 80 * mm) / max(len(headers) - 1, 1)
    col_x = [left] + [80 * mm + col_step * (i + 1) for i in range(len(headers) - 1)]

    def draw_row(y, cells, font, size=9):
        c.setFont(font, size)
        for i, cell in enumerate(cells):
            text = str(cell)
            if i == 0:
                c.drawString(col_x[i] + 2 * mm, y, text)
            else:
                c.drawRightString(col_x[i] - 2 * mm, y, text)

    def draw_header_bar(y):
        c.setFillColorRGB(*PRIMARY_RGB)
        c.rect(left, y - 2 * mm, right - left, 8 * mm, fill=1, stroke=0)
        c.setFillColorRGB(1, 1, 1)
        draw_row(y, headers, FONT_BOLD_NAME)
        c.setFillColorRGB(0, 0, 0)

    # --- 1. NAGŁÓWEK ---
    y = height - 20 * mm
    c.setFont(FONT_BOLD_NAME, 18)
    c.drawString(left, y, (settings.restaurant_name if settings else None) or "Restaurant Report")
    y -= 10 * mm
    c.setFont(FONT_BOLD_NAME, 14)
    c.drawString(left, y, title)
    if subtitle:
        y -= 8 * mm
        c.setFont(FONT_REGULAR_NAME, 10)
        c.drawString(left, y, subtitle)
    y -= 8 * mm
    c.setFont(FONT_REGULAR_NAME, 10)
    c.drawString(left, y, f"Generated on: {datetime.now().strftime('%d/%m/%Y %H:%M')}")
    y -= 4 * mm
    c.setLineWidth(0.5)
    c.line(left, y, right, y)
    y -= 10 * mm

    # --- 2. TABELA ---
    draw_header_bar(y)
    y -= 8 * mm
    for row in body:
        draw_row(y, row, FONT_REGULAR_NAME)
        c.setLineWidth(0.1)
        c.line(left, y - 2 * mm, right, y - 2 * mm)
        y -= 6 * mm
        if y < 30 * mm:
            c.showPage()
            y = height - 20 * mm
            draw_header_bar(y)
            y -= 8 * mm

    # --- 3. PODSUMOWANIE ---
    c.setFillColorRGB(0.94, 0.94, 0.94)
    c.rect(left, y - 2 * mm, right - left, 8 * mm, fill=1, stroke=0)
    c.setFillColorRGB(0, 0, 0)
    draw_row(y, total_row, FONT_BOLD_NAME)

    c.showPage()
    c.save()
    return buffer.getvalue()


def annual_summary_pdf(rows: List[PeriodRow], year: int, settings: Optional[StoreSettingsOut],
                       currency: str = "Rs") -> bytes:
    body = [
        [r.label, r.orders, format_currency(r.revenue, currency),
         format_currency(r.avg_ticket, currency) if r.orders else "-"]
        for r in rows
    ]
    total_orders = sum(r.orders for r in rows)
    total_revenue = sum(r.revenue for r in rows)
    total_row = ["TOTAL", total_orders, format_currency(total_revenue, currency),
                 format_currency(total_revenue / total_orders, currency) if total_orders else "-"]
    return _render_table_report(
        f"Annual Income Summary - {year}",
        ["Month", "Total Orders", "Total Revenue", "Avg Ticket"],
        body, total_row, settings,
    )


def monthly_summary_pdf(rows: List[PeriodRow], year: int, month: int, settings: Optional[StoreSettingsOut],
                        currency: str = "Rs") -> bytes:
    month_name = datetime(year, month, 1).strftime("%B %Y")
    body = [[r.label, r.orders, format_currency(r.revenue, currency)] for r in rows]
    total_row = ["TOTAL", sum(r.orders for r in rows), format_currency(sum(r.revenue for r in rows), currency)]
    return _render_table_report(
        f"Monthly Summary - {month_name}",
        ["Date", "Daily Orders", "Daily Revenue"],
        body, total_row, settings,
    )
