import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from backend.app.core.security import create_access_token
from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def auth_headers() -> dict:
    return {"Authorization": f"Bearer {create_access_token('staff-1')}"}


def create_client(client: TestClient) -> str:
    resp = client.post(
        "/clients/",
        json={"name": "Beta Traders", "email": "info@beta.example", "address": "5 Side Street"},
        headers=auth_headers(),
    )
    assert resp.status_code == 201
    return resp.json()["id"]


def quote_payload(client_id: str, **overrides) -> dict:
    payload = {
        "client_id": client_id,
        "issue_date": "2024-04-01",
        "expiry_date": "2024-04-15",
        "items": [{"description": "Site survey", "quantity": "3", "unit_price": "250", "tax_rate": "15"}],
        "status": "sent",
    }
    payload.update(overrides)
    return payload


def test_create_quote_generates_number():
    client = TestClient(app)
    client_id = create_client(client)

    resp = client.post("/quotes/", json=quote_payload(client_id), headers=auth_headers())

    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["kind"] == "quote"
    assert data["document_number"].startswith("QT")
    assert data["expiry_date"] == "2024-04-15"
    assert Decimal(data["subtotal"]) == Decimal("750")
    assert Decimal(data["total"]) == Decimal("862.5")


def test_quote_rejects_invoice_status_and_early_expiry():
    client = TestClient(app)
    client_id = create_client(client)

    resp = client.post(
        "/quotes/",
        json=quote_payload(client_id, status="paid", expiry_date="2024-03-31"),
        headers=auth_headers(),
    )

    assert resp.status_code == 422
    fields = [e["field"] for e in resp.json()["detail"]["errors"]]
    assert fields == ["expiry_date", "status"]


def test_quote_view_and_pdf():
    client = TestClient(app)
    client_id = create_client(client)
    created = client.post(
        "/quotes/", json=quote_payload(client_id, document_number="QT-9"), headers=auth_headers()
    ).json()

    view = client.get(f"/quotes/{created['id']}/view", headers=auth_headers())
    assert view.status_code == 200
    layout = view.json()
    assert layout["title"] == "QUOTE"
    assert layout["recipient"]["heading"] == "Prepared For"
    assert layout["payment_details"] is None
    assert layout["footer"] == "This quote is valid until 15 Apr 2024."
    assert layout["status"]["text"] == "SENT"

    pdf = client.get(f"/quotes/{created['id']}/pdf", headers=auth_headers())
    assert pdf.status_code == 200
    assert pdf.headers["content-disposition"] == 'attachment; filename="quote-QT-9.pdf"'
    assert pdf.content.startswith(b"%PDF-")


def test_unknown_quote_returns_404():
    client = TestClient(app)
    resp = client.get("/quotes/missing", headers=auth_headers())
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Quote not found"


def test_quote_defaults_have_expiry_date():
    client = TestClient(app)
    data = client.get("/quotes/defaults", headers=auth_headers()).json()
    assert data["document_number"].startswith("QT")
    assert "expiry_date" in data
    assert "recurrence" not in data
