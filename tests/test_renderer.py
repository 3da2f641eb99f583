from datetime import date, datetime

import pytest

from backend.app.schemas.client import ClientRead
from backend.app.schemas.company_settings import BankDetails, CompanySettingsRead
from backend.app.schemas.document import InvoiceDraft, QuoteDraft
from backend.app.services.document_builder import build_document
from backend.app.services.renderer import (
    DocumentView,
    format_date,
    format_number,
    render_document,
    status_badge,
)

TODAY = date(2024, 1, 5)

CLIENT = ClientRead(
    id="client-1",
    name="Acme Ltd",
    contact_person="Jane Mokoena",
    email="accounts@acme.example",
    address="1 Main Road\nCape Town",
)
COMPANY = CompanySettingsRead(
    name="White Paper Systems",
    email="hello@wps.example",
    address="12 Long Street\nCape Town",
    vat_number="4123456789",
    bank_details=BankDetails(bank_name="FNB", account_number="62000000000", branch_code="250655", account_type="Cheque"),
)


def make_invoice(**overrides):
    data = {
        "document_number": "INV-7",
        "client_id": "client-1",
        "issue_date": "2024-01-05",
        "due_date": "2024-02-04",
        "items": [
            {"description": "Consulting", "quantity": "2", "unit_price": "100", "tax_rate": "15"},
            {"description": "Travel", "quantity": "1.5", "unit_price": "20", "tax_rate": "0"},
        ],
        "status": "sent",
    }
    data.update(overrides)
    return build_document("invoice", InvoiceDraft(**data), client=CLIENT, company=COMPANY, today=TODAY)


def make_quote():
    draft = QuoteDraft(
        document_number="QT-3",
        client_id="client-1",
        issue_date="2024-01-05",
        expiry_date="2024-01-19",
        items=[{"description": "Audit", "quantity": "1", "unit_price": "500", "tax_rate": "15"}],
        status="accepted",
    )
    return build_document("quote", draft, client=CLIENT, company=COMPANY, today=TODAY)


@pytest.mark.parametrize(
    "value,expected",
    [
        (date(2024, 1, 5), "05 Jan 2024"),
        (datetime(2023, 12, 31, 23, 0), "31 Dec 2023"),
        ("2024-02-29", "29 Feb 2024"),
        ("not a date", "-"),
        ("", "-"),
        (None, "-"),
    ],
)
def test_format_date(value, expected):
    assert format_date(value) == expected


def test_format_number_drops_trailing_zeros():
    assert format_number("2.0000") == "2"
    assert format_number("1.5000") == "1.5"
    assert format_number("abc") == "-"


def test_invoice_layout_contents():
    layout = render_document("invoice", make_invoice(), COMPANY)

    assert layout.title == "INVOICE"
    assert layout.number == "#INV-7"
    assert [(m.label, m.value) for m in layout.meta] == [("Issue Date", "05 Jan 2024"), ("Due Date", "04 Feb 2024")]
    assert layout.issuer.heading == "White Paper Systems"
    assert "VAT: 4123456789" in layout.issuer.lines
    assert layout.recipient.heading == "Bill To"
    assert layout.recipient.lines[:3] == ("Acme Ltd", "Attn: Jane Mokoena", "1 Main Road")

    assert layout.items.columns == ("Description", "Quantity", "Unit Price", "Tax", "Amount")
    assert layout.items.rows == (
        ("Consulting", "2", "R 100.00", "15%", "R 200.00"),
        ("Travel", "1.5", "R 20.00", "0%", "R 30.00"),
    )
    assert [(t.label, t.value, t.emphasis) for t in layout.totals] == [
        ("Subtotal", "R 230.00", False),
        ("VAT", "R 30.00", False),
        ("Total", "R 260.00", True),
    ]
    assert layout.payment_details.heading == "Payment Details"
    assert "Bank: FNB" in layout.payment_details.lines
    assert layout.footer == "Thank you for your business!"


def test_optional_sections_are_omitted_when_empty():
    layout = render_document("invoice", make_invoice(), COMPANY)
    assert layout.notes is None
    assert layout.terms is None

    with_notes = render_document("invoice", make_invoice(notes="Deliver on site", terms="Net 30"), COMPANY)
    assert with_notes.notes.lines == ("Deliver on site",)
    assert with_notes.terms.heading == "Terms & Conditions"


def test_quote_layout_has_expiry_and_no_payment_details():
    layout = render_document("quote", make_quote(), COMPANY)
    assert layout.title == "QUOTE"
    assert layout.meta[1].label == "Expiry Date"
    assert layout.recipient.heading == "Prepared For"
    assert layout.payment_details is None
    assert layout.footer == "This quote is valid until 19 Jan 2024."
    assert layout.status.tone == "success"


def test_render_is_deterministic():
    invoice = make_invoice()
    assert render_document("invoice", invoice, COMPANY) == render_document("invoice", invoice, COMPANY)


def test_currency_prefix_is_configurable():
    layout = render_document("invoice", make_invoice(), COMPANY, currency_prefix="$")
    assert layout.totals[-1].value == "$ 260.00"


@pytest.mark.parametrize(
    "kind,status,label,tone",
    [
        ("invoice", "paid", "Paid", "success"),
        ("invoice", "overdue", "Overdue", "danger"),
        ("invoice", "cancelled", "Cancelled", "muted"),
        ("quote", "expired", "Expired", "warning"),
        ("quote", "draft", "Draft", "neutral"),
    ],
)
def test_status_badges(kind, status, label, tone):
    badge = status_badge(kind, status)
    assert badge.code == status
    assert badge.label == label
    assert badge.text == label.upper()
    assert badge.tone == tone


def test_document_view_tracks_render_state():
    view = DocumentView("invoice", make_invoice(), COMPANY)
    assert not view.is_ready
    layout = view.render()
    assert view.is_ready
    assert view.layout is layout
    assert view.key == ("invoice", view.aggregate.id)
    assert view.filename() == "invoice-INV-7.pdf"
