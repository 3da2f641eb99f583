import pytest
from datetime import date
from fastapi.testclient import TestClient

from backend.app.core.security import create_access_token
from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.main import app
from backend.app.schemas.client import ClientRead
from backend.app.schemas.company_settings import CompanySettingsRead
from backend.app.schemas.document import InvoiceDraft, QuoteDraft
from backend.app.services.dashboard import get_dashboard_summary, monthly_revenue
from backend.app.services.document_builder import build_document


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


CLIENT = ClientRead(id="client-1", name="Acme Ltd", email="accounts@acme.example", address="1 Main Road")
COMPANY = CompanySettingsRead()
TODAY = date(2024, 6, 15)


def invoice(number, issue_date, status, unit_price="100", recurrence="none"):
    draft = InvoiceDraft(
        document_number=number,
        client_id="client-1",
        issue_date=issue_date,
        due_date=issue_date,
        items=[{"description": "Work", "quantity": "1", "unit_price": unit_price, "tax_rate": "15"}],
        status=status,
        recurrence=recurrence,
    )
    return build_document("invoice", draft, client=CLIENT, company=COMPANY, today=TODAY)


def quote(number, status):
    draft = QuoteDraft(
        document_number=number,
        client_id="client-1",
        issue_date="2024-06-01",
        expiry_date="2024-06-30",
        items=[{"description": "Work", "quantity": "1", "unit_price": "10", "tax_rate": "0"}],
        status=status,
    )
    return build_document("quote", draft, client=CLIENT, company=COMPANY, today=TODAY)


def test_summary_figures():
    invoices = [
        invoice("INV-1", "2024-06-01", "paid"),
        invoice("INV-2", "2024-05-10", "paid", unit_price="200"),
        invoice("INV-3", "2024-06-05", "sent"),
        invoice("INV-4", "2024-04-01", "overdue", recurrence="monthly"),
        invoice("INV-5", "2024-06-10", "draft"),
    ]
    quotes = [quote("QT-1", "sent"), quote("QT-2", "accepted")]

    summary = get_dashboard_summary(invoices, quotes, client_count=1, today=TODAY)

    assert summary["as_of"] == "2024-06-15"
    assert summary["total_revenue"] == "345.00"
    assert summary["outstanding_amount"] == "230.00"
    assert summary["overdue_invoices"] == 1
    assert summary["pending_quotes"] == 1
    assert summary["client_count"] == 1
    assert summary["invoice_status_counts"] == {"draft": 1, "sent": 1, "paid": 2, "overdue": 1, "cancelled": 0}
    assert [i["document_number"] for i in summary["recent_invoices"]] == ["INV-5", "INV-3", "INV-1", "INV-2", "INV-4"]
    assert summary["upcoming_recurring"][0]["document_number"] == "INV-4"
    assert summary["upcoming_recurring"][0]["next_generation_date"] == "2024-05-01"


def test_monthly_revenue_covers_six_months():
    invoices = [
        invoice("INV-1", "2024-06-01", "paid"),
        invoice("INV-2", "2024-01-31", "paid"),
        invoice("INV-3", "2023-12-31", "paid"),
    ]

    rows = monthly_revenue(invoices, today=TODAY)

    assert [r["month"] for r in rows] == ["2024-01", "2024-02", "2024-03", "2024-04", "2024-05", "2024-06"]
    assert rows[0]["revenue"] == "115.00"
    assert rows[-1]["revenue"] == "115.00"
    assert rows[1]["revenue"] == "0.00"


def test_dashboard_endpoint_on_empty_database():
    client = TestClient(app)
    headers = {"Authorization": f"Bearer {create_access_token('staff-1')}"}

    resp = client.get("/dashboard/summary", headers=headers)

    assert resp.status_code == 200
    data = resp.json()
    assert data["total_revenue"] == "0.00"
    assert data["client_count"] == 0
    assert data["recent_invoices"] == []
    assert len(data["monthly_revenue"]) == 6
