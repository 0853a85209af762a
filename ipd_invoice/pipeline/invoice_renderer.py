"""Render an invoice body into one tall bitmap.

The layout is written in logical units (an A4 page is 595 wide) and drawn at
``scale`` pixels per unit, so a scale of 3 gives a 1785 px wide bitmap. The
canvas is transparent so the letterhead shows through once the bitmap is
placed on a page. Layout runs twice over the same blocks: first to measure
the height, then to draw.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from ..models.billing_record import BillingRecord
from ..models.source_bitmap import SourceBitmap
from .invoice_summary import ChargeGroup, InvoiceSummary, format_rupees, summarize

logger = logging.getLogger(__name__)

DEFAULT_WIDTH_PX = 595
DEFAULT_SCALE = 3

PADDING = 16
BODY_SIZE = 10
TABLE_SIZE = 8
TITLE_SIZE = 13
LINE_SPACING = 1.45

TEXT_COLOR = (31, 41, 55, 255)
MUTED_COLOR = (75, 85, 99, 255)
BORDER_COLOR = (229, 231, 235, 255)
TOTALS_FILL = (243, 244, 246, 255)
TABLE_HEADER_FILL = (220, 252, 231, 255)

Color = Tuple[int, int, int, int]


def _format_datetime(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y, %I:%M %p")


def _format_amount(value: float) -> str:
    if float(value).is_integer():
        return f"{value:,.0f}"
    return f"{value:,.2f}"


class _FontSet:
    """Fonts at logical sizes, scaled to pixels."""

    def __init__(self, scale: int, font_path: Optional[str] = None):
        self.scale = scale
        self.font_path = font_path
        self._cache = {}

    def get(self, size: int) -> ImageFont.ImageFont:
        font = self._cache.get(size)
        if font is None:
            px = size * self.scale
            if self.font_path:
                font = ImageFont.truetype(self.font_path, px)
            else:
                font = ImageFont.load_default(size=px)
            self._cache[size] = font
        return font


class _InvoiceLayout:
    """Cursor-based layout that either measures (no draw) or draws."""

    def __init__(
        self,
        width: int,
        scale: int,
        fonts: _FontSet,
        draw: Optional[ImageDraw.ImageDraw] = None,
    ):
        self.width = width
        self.scale = scale
        self.fonts = fonts
        self.draw = draw
        self.y = float(PADDING)

    @property
    def left(self) -> float:
        return float(PADDING)

    @property
    def right(self) -> float:
        return float(self.width - PADDING)

    def _px(self, value: float) -> int:
        return int(round(value * self.scale))

    def _line_height(self, size: int) -> float:
        return size * LINE_SPACING

    def text(
        self,
        x: float,
        y: float,
        value: str,
        size: int = BODY_SIZE,
        align: str = "left",
        color: Color = TEXT_COLOR,
    ) -> None:
        if self.draw is None:
            return
        font = self.fonts.get(size)
        px_x = self._px(x)
        if align != "left":
            length = self.draw.textlength(value, font=font)
            px_x = int(px_x - length) if align == "right" else int(px_x - length / 2)
        self.draw.text((px_x, self._px(y)), value, font=font, fill=color)

    def rect(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        fill: Optional[Color] = None,
        outline: Optional[Color] = None,
    ) -> None:
        if self.draw is None:
            return
        self.draw.rectangle(
            (self._px(x0), self._px(y0), self._px(x1), self._px(y1)),
            fill=fill,
            outline=outline,
            width=max(1, self.scale // 2),
        )

    def rule(self, x0: float, x1: float, y: float) -> None:
        if self.draw is None:
            return
        self.draw.line(
            (self._px(x0), self._px(y), self._px(x1), self._px(y)),
            fill=BORDER_COLOR,
            width=max(1, self.scale // 2),
        )

    def gap(self, amount: float) -> None:
        self.y += amount

    def title(self, value: str) -> None:
        self.text(self.width / 2, self.y, value, size=TITLE_SIZE, align="center")
        self.y += self._line_height(TITLE_SIZE) + 4

    def patient_card(
        self,
        left_rows: Sequence[Tuple[str, str]],
        right_rows: Sequence[Tuple[str, str]],
        totals_rows: Sequence[Tuple[str, str]],
        grand_total: Tuple[str, str],
    ) -> None:
        line = self._line_height(BODY_SIZE)
        inner = 8
        card_top = self.y
        y = card_top + inner
        middle = self.width / 2
        for i, (label, value) in enumerate(left_rows):
            self.text(self.left + inner, y + i * line, f"{label}: {value}")
        for i, (label, value) in enumerate(right_rows):
            self.text(middle, y + i * line, f"{label}: {value}")
        y += max(len(left_rows), len(right_rows)) * line + inner

        box_top = y
        box_height = (len(totals_rows) + 1) * line + 2 * inner + 4
        self.rect(self.left + inner, box_top, self.right - inner, box_top + box_height, fill=TOTALS_FILL)
        y = box_top + inner
        for label, value in totals_rows:
            self.text(self.left + 2 * inner, y, label)
            self.text(self.right - 2 * inner, y, value, align="right")
            y += line
        self.rule(self.left + 2 * inner, self.right - 2 * inner, y + 1)
        y += 4
        self.text(self.left + 2 * inner, y, grand_total[0])
        self.text(self.right - 2 * inner, y, grand_total[1], align="right")
        y = box_top + box_height + inner

        self.rect(self.left, card_top, self.right, y, outline=BORDER_COLOR)
        self.y = y + 8

    def table(
        self,
        heading: str,
        columns: Sequence[Tuple[str, str]],
        rows: Sequence[Sequence[str]],
    ) -> None:
        """Draw a heading and a table; columns are (title, align) pairs."""
        self.text(self.left, self.y, heading)
        self.y += self._line_height(BODY_SIZE)

        line = self._line_height(TABLE_SIZE) + 2
        span = self.right - self.left
        # First column takes the remaining width after the numeric columns
        numeric = span * 0.18
        edges: List[float] = [self.left, self.right - numeric * (len(columns) - 1)]
        for _ in range(len(columns) - 2):
            edges.append(edges[-1] + numeric)
        edges.append(self.right)

        def cell_x(index: int, align: str) -> float:
            if align == "right":
                return edges[index + 1] - 4
            if align == "center":
                return (edges[index] + edges[index + 1]) / 2
            return edges[index] + 4

        self.rect(self.left, self.y, self.right, self.y + line, fill=TABLE_HEADER_FILL)
        for i, (title, align) in enumerate(columns):
            self.text(cell_x(i, align), self.y + 1, title, size=TABLE_SIZE, align=align)
        self.y += line

        for row in rows:
            for i, (_, align) in enumerate(columns):
                self.text(cell_x(i, align), self.y + 1, row[i], size=TABLE_SIZE, align=align, color=MUTED_COLOR)
            self.y += line
            self.rule(self.left, self.right, self.y)
        if not rows:
            self.text(self.left + 4, self.y + 1, "No charges recorded", size=TABLE_SIZE, color=MUTED_COLOR)
            self.y += line
        self.y += 12


def _group_rows(groups: Sequence[ChargeGroup]) -> List[List[str]]:
    return [
        [g.label, str(g.quantity), _format_amount(g.unit_amount), _format_amount(g.total_amount)]
        for g in groups
    ]


def _lay_out(
    layout: _InvoiceLayout,
    record: BillingRecord,
    summary: InvoiceSummary,
    bill_date: datetime,
) -> None:
    layout.title(f"{summary.status_label} Invoice")

    left_rows = [
        ("Patient Name", record.name),
        ("Mobile No.", record.mobile_number or "-"),
        ("IPD ID", record.ipd_id),
    ]
    if record.room_type:
        bed = f" / {record.bed}" if record.bed else ""
        left_rows.append(("Room", f"{record.room_type}{bed}"))
    right_rows = [
        ("Deposit Amount", format_rupees(summary.deposit)),
        ("Bill Date", _format_datetime(bill_date)),
        ("Registration Date", _format_datetime(record.created_at or bill_date)),
    ]
    if record.discharge_date is not None:
        right_rows.append(("Discharge Date", _format_datetime(record.discharge_date)))

    totals_rows = [
        ("Hospital Services:", format_rupees(summary.hospital_service_total)),
        ("Consultant Charges:", format_rupees(summary.consultant_charge_total)),
    ]
    if summary.discount > 0:
        totals_rows.append(("Discount:", f"- {format_rupees(summary.discount)}"))
    if summary.due_amount > 0:
        totals_rows.append(("Due Amount:", format_rupees(summary.due_amount)))
    layout.patient_card(
        left_rows, right_rows, totals_rows, ("Total Bill:", format_rupees(summary.total_bill))
    )

    layout.table(
        "Hospital Service Charges",
        [("Service", "left"), ("Qnty", "center"), ("Amount (Rs)", "right"), ("Total (Rs)", "right")],
        _group_rows(summary.hospital_services),
    )
    layout.table(
        "Consultant Charges",
        [("Doctor Name", "left"), ("Visited", "center"), ("Amount (Rs)", "right"), ("Total (Rs)", "right")],
        _group_rows(summary.consultant_charges),
    )
    if record.payments:
        layout.table(
            "Payments",
            [("Date", "left"), ("Type", "center"), ("Amount (Rs)", "right")],
            [
                [_format_datetime(p.date), p.payment_type, _format_amount(p.amount)]
                for p in record.payments
            ],
        )


def render_invoice(
    record: BillingRecord,
    summary: Optional[InvoiceSummary] = None,
    *,
    width_px: int = DEFAULT_WIDTH_PX,
    scale: int = DEFAULT_SCALE,
    font_path: Optional[str] = None,
    bill_date: Optional[datetime] = None,
) -> SourceBitmap:
    """Render the invoice body for a billing record.

    Args:
        record: Billing record to render
        summary: Precomputed summary (computed from record if None)
        width_px: Logical layout width
        scale: Pixels per logical unit
        font_path: Optional TrueType font; Pillow's default font otherwise
        bill_date: Date printed as bill date (defaults to now)

    Returns:
        SourceBitmap with a transparent RGBA image of width ``width_px * scale``
    """
    if width_px <= 2 * PADDING:
        raise ValueError(f"width_px must be > {2 * PADDING}, got {width_px}")
    if scale < 1:
        raise ValueError(f"scale must be >= 1, got {scale}")

    summary = summary or summarize(record)
    bill_date = bill_date or datetime.now()
    fonts = _FontSet(scale, font_path)

    measure = _InvoiceLayout(width_px, scale, fonts)
    _lay_out(measure, record, summary, bill_date)
    height_units = measure.y + PADDING

    size = (width_px * scale, int(round(height_units * scale)))
    image = Image.new("RGBA", size, (0, 0, 0, 0))
    layout = _InvoiceLayout(width_px, scale, fonts, draw=ImageDraw.Draw(image))
    _lay_out(layout, record, summary, bill_date)

    logger.debug(f"Rendered invoice {record.ipd_id} at {size[0]}x{size[1]}px")
    return SourceBitmap.from_image(image)
