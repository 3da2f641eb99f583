"""Presentational layout tree produced by the document renderer."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class LayoutNode(BaseModel):
    model_config = ConfigDict(frozen=True)


class TextBlock(LayoutNode):
    heading: Optional[str] = None
    lines: tuple[str, ...] = ()


class MetaRow(LayoutNode):
    label: str
    value: str


class StatusBadge(LayoutNode):
    code: str
    label: str
    text: str
    tone: str


class ItemTable(LayoutNode):
    columns: tuple[str, ...]
    alignments: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


class TotalRow(LayoutNode):
    label: str
    value: str
    emphasis: bool = False


class DocumentLayout(LayoutNode):
    kind: str
    title: str
    number: str
    issuer: TextBlock
    meta: tuple[MetaRow, ...]
    status: StatusBadge
    recipient: TextBlock
    items: ItemTable
    totals: tuple[TotalRow, ...]
    notes: Optional[TextBlock] = None
    terms: Optional[TextBlock] = None
    payment_details: Optional[TextBlock] = None
    footer: str = ""
