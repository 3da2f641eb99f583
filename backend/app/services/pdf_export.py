"""PDF export: capture a rendered document view, encode it, deliver it.

The pipeline moves ``idle -> capturing -> encoding -> delivering -> idle``;
any failure passes through ``failed`` before returning to ``idle`` and is
raised as the stage-specific ``ExportError``. An artifact is returned only
when every stage succeeded.
"""

import asyncio
import io
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from backend.app.core.errors import (
    ExportBusyError,
    ExportCancelledError,
    ExportCaptureError,
    ExportDeliveryError,
    ExportEncodeError,
    ExportError,
    ExportNotReadyError,
)
from backend.app.core.time import utc_now
from backend.app.schemas.layout import DocumentLayout, TextBlock
from backend.app.services.blob_store import BlobStore
from backend.app.services.renderer import DocumentView

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"

BRAND_BLUE = colors.HexColor("#1E3A8A")
MUTED_TEXT = colors.HexColor("#6B7280")
ROW_SHADE = colors.HexColor("#F9FAFB")
TOTAL_SHADE = colors.HexColor("#F3F4F6")
TONE_COLORS = {
    "neutral": "#374151",
    "info": "#1E40AF",
    "success": "#166534",
    "danger": "#991B1B",
    "warning": "#854D0E",
    "muted": "#6B7280",
}


class ExportState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    ENCODING = "encoding"
    DELIVERING = "delivering"
    FAILED = "failed"


@dataclass(frozen=True)
class PageGeometry:
    page_size: tuple[float, float] = A4
    margin_mm: float = 20.0

    @property
    def margin(self) -> float:
        return self.margin_mm * mm

    @property
    def content_width(self) -> float:
        return self.page_size[0] - 2 * self.margin


@dataclass(frozen=True)
class ExportArtifact:
    content: bytes
    filename: str
    media_type: str = PDF_MEDIA_TYPE
    url: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


def safe_filename(name: str) -> str:
    return re.sub(r'[\\/*?:"<>|\s]+', "_", (name or "").strip()) or "document"


def _styles() -> dict:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("DocTitle", parent=base["Title"], fontSize=20, textColor=BRAND_BLUE, alignment=TA_RIGHT),
        "number": ParagraphStyle("DocNumber", parent=base["Normal"], textColor=MUTED_TEXT, alignment=TA_RIGHT),
        "meta": ParagraphStyle("DocMeta", parent=base["Normal"], fontSize=9, alignment=TA_RIGHT),
        "heading": ParagraphStyle("BlockHeading", parent=base["Heading4"], textColor=BRAND_BLUE, spaceAfter=2),
        "strong": ParagraphStyle("Strong", parent=base["Normal"], fontName="Helvetica-Bold"),
        "small": ParagraphStyle("Small", parent=base["Normal"], fontSize=9, textColor=MUTED_TEXT, leading=11),
        "cell": ParagraphStyle("Cell", parent=base["Normal"], fontSize=9, leading=11),
        "footer": ParagraphStyle("Footer", parent=base["Normal"], fontSize=9, textColor=MUTED_TEXT, alignment=TA_CENTER),
    }


def _para(text: str, style: ParagraphStyle) -> Paragraph:
    return Paragraph(escape(text or ""), style)


def _block(block: Optional[TextBlock], styles: dict, *, heading_style: str = "heading", first_line_strong: bool = False) -> list:
    if block is None:
        return []
    flowables = []
    if block.heading:
        flowables.append(_para(block.heading, styles[heading_style]))
    for index, line in enumerate(block.lines):
        style = styles["strong"] if first_line_strong and index == 0 else styles["small"]
        flowables.append(_para(line, style))
    return flowables


def _header(layout: DocumentLayout, styles: dict, geometry: PageGeometry) -> Table:
    left = _block(layout.issuer, styles, heading_style="strong")
    tone = TONE_COLORS.get(layout.status.tone, TONE_COLORS["neutral"])
    right = [
        _para(layout.title, styles["title"]),
        _para(layout.number, styles["number"]),
        Spacer(1, 4 * mm),
    ]
    right.extend(_para(f"{row.label}: {row.value}", styles["meta"]) for row in layout.meta)
    right.append(
        Paragraph(f'Status: <font color="{tone}"><b>{escape(layout.status.text)}</b></font>', styles["meta"])
    )
    half = geometry.content_width / 2
    table = Table([[left, right]], colWidths=[half, half])
    table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP"), ("LEFTPADDING", (0, 0), (0, 0), 0)]))
    return table


def _items_table(layout: DocumentLayout, styles: dict, geometry: PageGeometry) -> Table:
    width = geometry.content_width
    description_width = width * 0.40
    other_width = (width - description_width) / (len(layout.items.columns) - 1)
    col_widths = [description_width] + [other_width] * (len(layout.items.columns) - 1)

    data = [list(layout.items.columns)]
    for row in layout.items.rows:
        data.append([_para(row[0], styles["cell"])] + list(row[1:]))
    body_end = len(data) - 1
    for total in layout.totals:
        data.append([total.label, "", "", "", total.value])

    commands = [
        ("BACKGROUND", (0, 0), (-1, 0), BRAND_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("LINEABOVE", (0, body_end + 1), (-1, body_end + 1), 0.75, MUTED_TEXT),
    ]
    for index, alignment in enumerate(layout.items.alignments):
        commands.append(("ALIGN", (index, 0), (index, -1), alignment.upper()))
    for row_index in range(1, body_end + 1):
        if row_index % 2 == 1:
            commands.append(("BACKGROUND", (0, row_index), (-1, row_index), ROW_SHADE))
    for offset, total in enumerate(layout.totals):
        row_index = body_end + 1 + offset
        commands.append(("SPAN", (0, row_index), (3, row_index)))
        commands.append(("ALIGN", (0, row_index), (-1, row_index), "RIGHT"))
        if total.emphasis:
            commands.append(("FONTNAME", (0, row_index), (-1, row_index), "Helvetica-Bold"))
            commands.append(("BACKGROUND", (0, row_index), (-1, row_index), TOTAL_SHADE))

    table = Table(data, colWidths=col_widths, repeatRows=1)
    table.setStyle(TableStyle(commands))
    return table


def build_flowables(layout: DocumentLayout, geometry: PageGeometry) -> list:
    """Lay out ``layout`` as reportlab flowables for one document."""
    styles = _styles()
    story = [_header(layout, styles, geometry), Spacer(1, 8 * mm)]
    story.extend(_block(layout.recipient, styles))
    story.append(Spacer(1, 6 * mm))
    story.append(_items_table(layout, styles, geometry))
    for block in (layout.notes, layout.terms, layout.payment_details):
        if block is not None:
            story.append(Spacer(1, 5 * mm))
            story.extend(_block(block, styles))
    if layout.footer:
        story.append(Spacer(1, 10 * mm))
        story.append(_para(layout.footer, styles["footer"]))
    return story


class PdfExportPipeline:
    """One export at a time for one document view."""

    def __init__(
        self,
        *,
        geometry: Optional[PageGeometry] = None,
        blob_store: Optional[BlobStore] = None,
        clock: Callable = utc_now,
    ):
        self.geometry = geometry or PageGeometry()
        self.blob_store = blob_store
        self.clock = clock
        self.state = ExportState.IDLE
        self.transitions: list[ExportState] = [ExportState.IDLE]
        self.last_error: Optional[ExportError] = None
        self._cancelled = False

    @property
    def busy(self) -> bool:
        return self.state != ExportState.IDLE

    def cancel(self) -> None:
        if self.busy:
            logger.info("Cancelling export in state %s", self.state.value)
            self._cancelled = True

    def _enter(self, state: ExportState) -> None:
        self.state = state
        self.transitions.append(state)

    def _checkpoint(self) -> None:
        if self._cancelled:
            raise ExportCancelledError("Export was cancelled before completion")

    def capture(self, view: Optional[DocumentView]) -> list:
        if view is None or not view.is_ready:
            raise ExportNotReadyError("Document view has not finished rendering")
        if not view.layout.items.rows:
            raise ExportNotReadyError("Document view has nothing to capture")
        try:
            return build_flowables(view.layout, self.geometry)
        except (AttributeError, TypeError, ValueError) as exc:
            raise ExportCaptureError(f"Could not capture document layout: {exc}") from exc

    def encode(self, flowables: list, *, title: str = "", author: str = "") -> bytes:
        if not flowables:
            raise ExportEncodeError("Nothing to encode")
        buffer = io.BytesIO()
        margin = self.geometry.margin
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self.geometry.page_size,
            leftMargin=margin,
            rightMargin=margin,
            topMargin=margin,
            bottomMargin=margin,
            title=title,
            author=author,
        )
        try:
            doc.build(flowables)
        except Exception as exc:
            raise ExportEncodeError(f"PDF encoding failed: {exc}") from exc
        data = buffer.getvalue()
        if not data.startswith(b"%PDF-") or b"%%EOF" not in data[-1024:]:
            raise ExportEncodeError("Encoder produced an incomplete PDF")
        return data

    def deliver(self, view: DocumentView, data: bytes, *, upload: bool = False) -> ExportArtifact:
        filename = safe_filename(view.filename())
        url = None
        if upload:
            if self.blob_store is None:
                raise ExportDeliveryError("No blob store is configured for uploads")
            stamp = self.clock().strftime("%Y%m%d%H%M%S")
            stored_name = safe_filename(f"{view.kind}-{view.aggregate.document_number}-{stamp}.pdf")
            try:
                url = self.blob_store.put(stored_name, data, PDF_MEDIA_TYPE)
            except Exception as exc:
                raise ExportDeliveryError(f"Upload failed: {exc}") from exc
        return ExportArtifact(content=data, filename=filename, url=url)

    async def export(self, view: Optional[DocumentView], *, upload: bool = False) -> ExportArtifact:
        if self.busy:
            raise ExportBusyError("An export is already in progress for this document")
        self._cancelled = False
        try:
            self._enter(ExportState.CAPTURING)
            flowables = self.capture(view)
            self._checkpoint()

            self._enter(ExportState.ENCODING)
            title = f"{view.layout.title.title()} {view.layout.number}"
            data = await asyncio.to_thread(self.encode, flowables, title=title, author=view.company.name)
            self._checkpoint()

            self._enter(ExportState.DELIVERING)
            artifact = self.deliver(view, data, upload=upload)
            self._checkpoint()
        except ExportError as exc:
            self.last_error = exc
            self._enter(ExportState.FAILED)
            logger.warning("PDF export failed at %s (%s): %s", exc.stage, exc.reason, exc)
            raise
        finally:
            self._enter(ExportState.IDLE)
            self._cancelled = False

        self.last_error = None
        logger.info("Exported %s (%d bytes)", artifact.filename, artifact.size)
        return artifact


class ExportRegistry:
    """Keeps at most one pipeline per open document view, keyed by (kind, id)."""

    def __init__(self, factory: Callable[[], PdfExportPipeline]):
        self._factory = factory
        self._pipelines: dict[tuple[str, str], PdfExportPipeline] = {}

    def pipeline_for(self, key: tuple[str, str]) -> PdfExportPipeline:
        pipeline = self._pipelines.get(key)
        if pipeline is None:
            pipeline = self._factory()
            self._pipelines[key] = pipeline
        return pipeline

    def cancel(self, key: tuple[str, str]) -> bool:
        pipeline = self._pipelines.get(key)
        if pipeline is None or not pipeline.busy:
            return False
        pipeline.cancel()
        return True

    def release(self, key: tuple[str, str]) -> None:
        pipeline = self._pipelines.get(key)
        if pipeline is not None and not pipeline.busy:
            del self._pipelines[key]

    async def export(self, view: DocumentView, *, upload: bool = False) -> ExportArtifact:
        pipeline = self.pipeline_for(view.key)
        try:
            return await pipeline.export(view, upload=upload)
        finally:
            self.release(view.key)
