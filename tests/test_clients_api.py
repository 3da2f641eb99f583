import pytest
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


def create_client(client: TestClient, **overrides) -> dict:
    payload = {"name": "Acme Ltd", "email": "accounts@acme.example", "address": "1 Main Road"}
    payload.update(overrides)
    resp = client.post("/clients/", json=payload, headers=auth_headers())
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_and_get_client():
    client = TestClient(app)
    created = create_client(client, contact_person="Jane", vat_number="4999")

    assert created["id"]
    assert created["contact_person"] == "Jane"

    resp = client.get(f"/clients/{created['id']}", headers=auth_headers())
    assert resp.status_code == 200
    assert resp.json()["email"] == "accounts@acme.example"


def test_create_client_validates_email_and_required_fields():
    client = TestClient(app)
    bad_email = client.post(
        "/clients/", json={"name": "Acme", "email": "not-an-email", "address": "x"}, headers=auth_headers()
    )
    assert bad_email.status_code == 422

    missing_name = client.post(
        "/clients/", json={"name": "", "email": "a@acme.example", "address": "x"}, headers=auth_headers()
    )
    assert missing_name.status_code == 422


def test_list_clients_sorted_by_name():
    client = TestClient(app)
    create_client(client, name="Zulu Co")
    create_client(client, name="Alpha Co")

    resp = client.get("/clients/", headers=auth_headers())
    assert [c["name"] for c in resp.json()] == ["Alpha Co", "Zulu Co"]


def test_update_client_partial():
    client = TestClient(app)
    created = create_client(client)

    resp = client.put(f"/clients/{created['id']}", json={"phone": "021 555 0101"}, headers=auth_headers())

    assert resp.status_code == 200
    data = resp.json()
    assert data["phone"] == "021 555 0101"
    assert data["name"] == "Acme Ltd"


def test_unknown_client_returns_404():
    client = TestClient(app)
    assert client.get("/clients/missing", headers=auth_headers()).status_code == 404
    assert client.put("/clients/missing", json={}, headers=auth_headers()).status_code == 404
    assert client.delete("/clients/missing", headers=auth_headers()).status_code == 404


def test_delete_client():
    client = TestClient(app)
    created = create_client(client)

    assert client.delete(f"/clients/{created['id']}", headers=auth_headers()).status_code == 204
    assert client.get(f"/clients/{created['id']}", headers=auth_headers()).status_code == 404


def test_delete_client_with_invoices_conflicts():
    client = TestClient(app)
    created = create_client(client)
    invoice = client.post(
        "/invoices/",
        json={
            "document_number": "INV-1",
            "client_id": created["id"],
            "issue_date": "2024-01-05",
            "due_date": "2024-01-31",
            "items": [{"description": "Work", "quantity": "1", "unit_price": "10", "tax_rate": "15"}],
        },
        headers=auth_headers(),
    )
    assert invoice.status_code == 201

    resp = client.delete(f"/clients/{created['id']}", headers=auth_headers())

    assert resp.status_code == 409
    assert resp.json()["detail"]["entity"] == "client"
