"""Printable layout for invoices and quotes.

``render_document`` is deterministic: the same aggregate and company settings
always give an equal ``DocumentLayout``. It carries no state between calls.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from backend.app.schemas.company_settings import CompanySettingsRead
from backend.app.schemas.document import DocumentAggregate, get_kind_spec
from backend.app.schemas.layout import (
    DocumentLayout,
    ItemTable,
    MetaRow,
    StatusBadge,
    TextBlock,
    TotalRow,
)
from backend.app.services.calculator import format_money

PLACEHOLDER = "-"
MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

ITEM_COLUMNS = ("Description", "Quantity", "Unit Price", "Tax", "Amount")
ITEM_ALIGNMENTS = ("left", "right", "right", "right", "right")

# status -> (label, tone)
STATUS_BADGES = {
    "invoice": {
        "draft": ("Draft", "neutral"),
        "sent": ("Sent", "info"),
        "paid": ("Paid", "success"),
        "overdue": ("Overdue", "danger"),
        "cancelled": ("Cancelled", "muted"),
    },
    "quote": {
        "draft": ("Draft", "neutral"),
        "sent": ("Sent", "info"),
        "accepted": ("Accepted", "success"),
        "rejected": ("Rejected", "danger"),
        "expired": ("Expired", "warning"),
    },
}

PAYMENT_REFERENCE_NOTE = "Please use the invoice number as reference when making payment."
INVOICE_FOOTER = "Thank you for your business!"
QUOTE_FOOTER = "This quote is valid until {expiry}."


def format_date(value) -> str:
    """``DD Mon YYYY``; anything that is not a readable date becomes ``-``."""
    if isinstance(value, datetime):
        value = value.date()
    elif isinstance(value, str):
        try:
            value = date.fromisoformat(value.strip()[:10])
        except ValueError:
            return PLACEHOLDER
    if not isinstance(value, date):
        return PLACEHOLDER
    # Locale-independent month names.
    return f"{value.day:02d} {MONTH_ABBREVIATIONS[value.month - 1]} {value.year:04d}"


def format_number(value) -> str:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return PLACEHOLDER
    if not number.is_finite():
        return PLACEHOLDER
    if number == number.to_integral_value():
        return f"{number.quantize(Decimal(1))}"
    return format(number.normalize(), "f")


def status_badge(kind: str, status: str) -> StatusBadge:
    label, tone = STATUS_BADGES.get(kind, {}).get(status, (status.capitalize(), "neutral"))
    return StatusBadge(code=status, label=label, text=label.upper(), tone=tone)


def _lines(*values: Optional[str]) -> tuple[str, ...]:
    lines = []
    for value in values:
        if not value:
            continue
        lines.extend(part.strip() for part in str(value).splitlines() if part.strip())
    return tuple(lines)


def _issuer_block(company: CompanySettingsRead) -> TextBlock:
    vat = f"VAT: {company.vat_number}" if company.vat_number else None
    return TextBlock(
        heading=company.name or None,
        lines=_lines(company.address, company.phone, company.email, company.website, vat),
    )


def _recipient_block(heading: str, aggregate: DocumentAggregate) -> TextBlock:
    client = aggregate.client
    attention = f"Attn: {client.contact_person}" if client.contact_person else None
    vat = f"VAT: {client.vat_number}" if client.vat_number else None
    return TextBlock(
        heading=heading,
        lines=_lines(client.name, attention, client.address, client.email, client.phone, vat),
    )


def _item_table(aggregate: DocumentAggregate, currency_prefix: str) -> ItemTable:
    rows = tuple(
        (
            item.description,
            format_number(item.quantity),
            format_money(item.unit_price, currency_prefix),
            f"{format_number(item.tax_rate)}%",
            format_money(item.line_subtotal, currency_prefix),
        )
        for item in aggregate.items
    )
    return ItemTable(columns=ITEM_COLUMNS, alignments=ITEM_ALIGNMENTS, rows=rows)


def _payment_details(company: CompanySettingsRead) -> TextBlock:
    bank = company.bank_details
    return TextBlock(
        heading="Payment Details",
        lines=(
            f"Bank: {bank.bank_name}",
            f"Account Number: {bank.account_number}",
            f"Branch Code: {bank.branch_code}",
            f"Account Type: {bank.account_type}",
            PAYMENT_REFERENCE_NOTE,
        ),
    )


def render_document(
    kind: str,
    aggregate: DocumentAggregate,
    company: CompanySettingsRead,
    *,
    currency_prefix: str = "R",
) -> DocumentLayout:
    spec = get_kind_spec(kind)
    closing_date = getattr(aggregate, spec.closing_date_field, None)

    totals = (
        TotalRow(label="Subtotal", value=format_money(aggregate.subtotal, currency_prefix)),
        TotalRow(label="VAT", value=format_money(aggregate.tax_total, currency_prefix)),
        TotalRow(label="Total", value=format_money(aggregate.total, currency_prefix), emphasis=True),
    )
    notes = TextBlock(heading="Notes", lines=_lines(aggregate.notes)) if aggregate.notes else None
    terms = TextBlock(heading="Terms & Conditions", lines=_lines(aggregate.terms)) if aggregate.terms else None

    if kind == "invoice":
        payment_details = _payment_details(company)
        footer = INVOICE_FOOTER
    else:
        payment_details = None
        footer = QUOTE_FOOTER.format(expiry=format_date(closing_date))

    return DocumentLayout(
        kind=kind,
        title=spec.title,
        number=f"#{aggregate.document_number}",
        issuer=_issuer_block(company),
        meta=(
            MetaRow(label="Issue Date", value=format_date(aggregate.issue_date)),
            MetaRow(label=spec.closing_date_label, value=format_date(closing_date)),
        ),
        status=status_badge(kind, aggregate.status),
        recipient=_recipient_block(spec.recipient_heading, aggregate),
        items=_item_table(aggregate, currency_prefix),
        totals=totals,
        notes=notes,
        terms=terms,
        payment_details=payment_details,
        footer=footer,
    )


class DocumentView:
    """An open document view; its layout is the render target for PDF export."""

    def __init__(self, kind: str, aggregate: DocumentAggregate, company: CompanySettingsRead, *, currency_prefix: str = "R"):
        self.kind = kind
        self.aggregate = aggregate
        self.company = company
        self.currency_prefix = currency_prefix
        self.layout: Optional[DocumentLayout] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.kind, self.aggregate.id)

    @property
    def is_ready(self) -> bool:
        return self.layout is not None

    def render(self) -> DocumentLayout:
        self.layout = render_document(self.kind, self.aggregate, self.company, currency_prefix=self.currency_prefix)
        return self.layout

    def filename(self) -> str:
        return f"{self.kind}-{self.aggregate.document_number}.pdf"
