"""Invoice and quote schemas: form drafts, line items and document aggregates."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, computed_field

from backend.app.schemas.client import ClientRead
from backend.app.services import calculator

DocumentKind = Literal["invoice", "quote"]

INVOICE_STATUSES = ("draft", "sent", "paid", "overdue", "cancelled")
QUOTE_STATUSES = ("draft", "sent", "accepted", "rejected", "expired")
RECURRENCES = ("none", "weekly", "monthly", "quarterly", "yearly")

InvoiceStatus = Literal["draft", "sent", "paid", "overdue", "cancelled"]
QuoteStatus = Literal["draft", "sent", "accepted", "rejected", "expired"]
Recurrence = Literal["none", "weekly", "monthly", "quarterly", "yearly"]


class LineItemDraft(BaseModel):
    """One item row as submitted; constraints are checked by the builder."""

    id: Optional[str] = None
    description: str = ""
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal = Decimal("0")


class DocumentDraft(BaseModel):
    document_number: Optional[str] = None
    client_id: str
    issue_date: date
    items: list[LineItemDraft] = []
    notes: Optional[str] = None
    terms: Optional[str] = None
    status: str = "draft"


class InvoiceDraft(DocumentDraft):
    due_date: date
    recurrence: str = "none"
    next_generation_date: Optional[date] = None


class QuoteDraft(DocumentDraft):
    expiry_date: date


class LineItem(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal

    @computed_field
    @property
    def line_subtotal(self) -> Decimal:
        return calculator.line_subtotal(self)

    @computed_field
    @property
    def tax_amount(self) -> Decimal:
        return calculator.line_tax(self)

    @computed_field
    @property
    def line_total(self) -> Decimal:
        return calculator.line_total(self)


class DocumentAggregate(BaseModel):
    id: str
    document_number: str
    client: ClientRead
    issue_date: date
    items: list[LineItem]
    notes: Optional[str] = None
    terms: Optional[str] = None
    subtotal: Decimal
    tax_total: Decimal
    total: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class InvoiceAggregate(DocumentAggregate):
    kind: Literal["invoice"] = "invoice"
    due_date: date
    status: InvoiceStatus = "draft"
    recurrence: Recurrence = "none"
    next_generation_date: Optional[date] = None

    @property
    def closing_date(self) -> date:
        return self.due_date


class QuoteAggregate(DocumentAggregate):
    kind: Literal["quote"] = "quote"
    expiry_date: date
    status: QuoteStatus = "draft"

    @property
    def closing_date(self) -> date:
        return self.expiry_date


@dataclass(frozen=True)
class DocumentKindSpec:
    kind: str
    title: str
    statuses: tuple
    closing_date_field: str
    closing_date_label: str
    recipient_heading: str
    prefix_setting: str
    terms_setting: str
    draft_schema: type
    aggregate_schema: type


DOCUMENT_KINDS = {
    "invoice": DocumentKindSpec(
        kind="invoice",
        title="INVOICE",
        statuses=INVOICE_STATUSES,
        closing_date_field="due_date",
        closing_date_label="Due Date",
        recipient_heading="Bill To",
        prefix_setting="invoice_prefix",
        terms_setting="invoice_terms",
        draft_schema=InvoiceDraft,
        aggregate_schema=InvoiceAggregate,
    ),
    "quote": DocumentKindSpec(
        kind="quote",
        title="QUOTE",
        statuses=QUOTE_STATUSES,
        closing_date_field="expiry_date",
        closing_date_label="Expiry Date",
        recipient_heading="Prepared For",
        prefix_setting="quote_prefix",
        terms_setting="quote_terms",
        draft_schema=QuoteDraft,
        aggregate_schema=QuoteAggregate,
    ),
}


def get_kind_spec(kind: str) -> DocumentKindSpec:
    try:
        return DOCUMENT_KINDS[kind]
    except KeyError:
        raise ValueError(f"Unknown document kind: {kind}") from None
