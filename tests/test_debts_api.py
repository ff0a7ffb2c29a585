from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from app.core.security import get_current_user
from app.main import app as fastapi_app
from app.models.debt_transaction import DebtTransaction
from app.models.transaction import Transaction
from app.services import debt_ledger

from conftest import OTHER_OWNER_ID

DEBTS = "/api/debts"


def _create_debt(client, **overrides):
    payload = {"name": "Car Loan", "amount": 10_000_000, "interest_rate": 7.5}
    payload.update(overrides)
    response = client.post(DEBTS, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "OK"


def test_create_and_list_debts(client):
    created = _create_debt(client, due_date="2027-01-31", description="Toyota")

    assert created["remaining_amount"] == 10_000_000
    assert created["paid_amount"] == 0
    assert created["transactions_count"] == 0

    listed = client.get(DEBTS).json()
    assert [d["id"] for d in listed] == [created["id"]]


def test_create_debt_requires_positive_amount(client):
    response = client.post(DEBTS, json={"name": "Bad", "amount": 0})

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"].startswith("amount:")


def test_debt_transaction_lifecycle(client, session):
    debt = _create_debt(client)
    base = f"{DEBTS}/{debt['id']}/transactions"

    response = client.post(base, json={"amount": 2_000_000, "type": "payment", "description": "", "date": "2026-05-01"})
    assert response.status_code == 201, response.text
    payment = response.json()
    assert payment["type"] == "payment"
    assert payment["description"] is None

    increase = client.post(base, json={"amount": 500_000, "type": "increase"}).json()
    assert client.get(f"{DEBTS}/{debt['id']}").json()["remaining_amount"] == 8_500_000

    response = client.put(f"{base}/{payment['id']}", json={"amount": 3_000_000, "type": "payment"})
    assert response.status_code == 200, response.text
    assert response.json()["amount"] == 3_000_000
    assert response.json()["date"] == "2026-05-01"

    balance = client.get(f"{DEBTS}/{debt['id']}/balance").json()
    assert balance == {
        "debt_id": debt["id"],
        "amount": 10_000_000,
        "paid_amount": 3_000_000,
        "increased_amount": 500_000,
        "remaining_amount": 7_500_000,
    }

    response = client.delete(f"{base}/{increase['id']}")
    assert response.status_code == 200
    assert client.get(f"{DEBTS}/{debt['id']}").json()["remaining_amount"] == 7_000_000

    listed = client.get(base).json()
    assert [t["id"] for t in listed] == [payment["id"]]

    mirrors = session.exec(select(Transaction)).all()
    assert [(m.amount, m.description) for m in mirrors] == [(3_000_000, "Trả nợ: Car Loan")]


def test_zero_amount_is_a_client_error(client, session):
    debt = _create_debt(client)

    response = client.post(f"{DEBTS}/{debt['id']}/transactions", json={"amount": 0, "type": "payment"})

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert session.exec(select(Transaction)).all() == []


def test_unknown_type_and_bad_date_are_client_errors(client, session):
    debt = _create_debt(client)
    base = f"{DEBTS}/{debt['id']}/transactions"

    for payload in ({"amount": 10, "type": "refund"}, {"amount": 10, "type": "payment", "date": "not-a-date"}):
        response = client.post(base, json=payload)
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "detail" not in response.json()

    assert session.exec(select(Transaction)).all() == []


def test_foreign_debt_is_not_found(client, foreign_debt):
    response = client.post(f"{DEBTS}/{foreign_debt.id}/transactions", json={"amount": 10, "type": "payment"})

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Debt not found"}
    assert client.get(f"{DEBTS}/{foreign_debt.id}").status_code == 404
    assert client.delete(f"{DEBTS}/{foreign_debt.id}").status_code == 404


def test_unknown_debt_transaction_is_not_found(client):
    debt = _create_debt(client)
    base = f"{DEBTS}/{debt['id']}/transactions"

    assert client.put(f"{base}/12345", json={"amount": 10, "type": "payment"}).status_code == 404
    assert client.delete(f"{base}/12345").status_code == 404


def test_identity_dependency_scopes_every_request(client):
    debt = _create_debt(client)

    fastapi_app.dependency_overrides[get_current_user] = lambda: OTHER_OWNER_ID
    try:
        assert client.get(f"{DEBTS}/{debt['id']}").status_code == 404
        assert client.get(DEBTS).json() == []
    finally:
        del fastapi_app.dependency_overrides[get_current_user]


def test_update_debt_recomputes_remaining(client):
    debt = _create_debt(client)
    client.post(f"{DEBTS}/{debt['id']}/transactions", json={"amount": 1_000_000, "type": "payment"})

    response = client.put(f"{DEBTS}/{debt['id']}", json={"name": "Car Loan", "amount": 12_000_000})

    assert response.status_code == 200
    assert response.json()["remaining_amount"] == 11_000_000
    assert response.json()["interest_rate"] is None


def test_stats_summary(client):
    first = _create_debt(client, amount=10_000_000, interest_rate=6)
    _create_debt(client, name="Phone", amount=2_000_000, interest_rate=10)
    client.post(f"{DEBTS}/{first['id']}/transactions", json={"amount": 4_000_000, "type": "payment"})

    stats = client.get(f"{DEBTS}/stats/summary").json()

    assert stats["total_debts"] == 2
    assert stats["total_amount"] == 12_000_000
    assert stats["avg_interest_rate"] == 8
    assert stats["total_remaining"] == 8_000_000


def test_delete_debt(client, session):
    debt = _create_debt(client)
    client.post(f"{DEBTS}/{debt['id']}/transactions", json={"amount": 1_000_000, "type": "payment"})

    response = client.delete(f"{DEBTS}/{debt['id']}")

    assert response.status_code == 200
    assert client.get(f"{DEBTS}/{debt['id']}").status_code == 404
    [mirror] = session.exec(select(Transaction)).all()
    assert mirror.debt_transaction_id is None


def test_storage_failure_is_a_server_error_and_writes_nothing(client, session, monkeypatch):
    debt = _create_debt(client)

    def broken_mirror(*args, **kwargs):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(debt_ledger, "_apply_mirror", broken_mirror)

    response = client.post(f"{DEBTS}/{debt['id']}/transactions", json={"amount": 1_000_000, "type": "payment"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Database error, no changes were applied"}
    assert session.exec(select(DebtTransaction)).all() == []
    assert session.exec(select(Transaction)).all() == []
    assert client.get(f"{DEBTS}/{debt['id']}").json()["remaining_amount"] == 10_000_000


def test_renaming_a_debt_updates_its_mirror_descriptions(client, session):
    debt = _create_debt(client)
    client.post(f"{DEBTS}/{debt['id']}/transactions", json={"amount": 1_000_000, "type": "payment"})

    response = client.put(f"{DEBTS}/{debt['id']}", json={"name": "Toyota Loan", "amount": 10_000_000})

    assert response.status_code == 200
    assert response.json()["transactions_count"] == 1
    [mirror] = session.exec(select(Transaction)).all()
    assert mirror.description == "Trả nợ: Toyota Loan"
