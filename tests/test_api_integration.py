"""
API Integration Tests

Drives the HTTP surface end to end against in-memory storage and a scripted
credit card client.
"""

import pytest
from fastapi.testclient import TestClient

from account_service.api import create_app
from account_service.api.dependencies import AccountSystem, get_account_system
from account_service.async_storage import AsyncInMemoryStorage
from account_service.config import AccountServiceConfig
from account_service.errors import ServiceUnavailableError

from helpers import FakeCardClient


@pytest.fixture
def card_client():
    return FakeCardClient()


@pytest.fixture
def system(card_client):
    return AccountSystem(
        config=AccountServiceConfig(storage_backend="memory", log_format="text", _env_file=None),
        storage=AsyncInMemoryStorage(),
        card_client=card_client
    )


@pytest.fixture
def client(system):
    app = create_app()
    app.dependency_overrides[get_account_system] = lambda: system
    with TestClient(app) as test_client:
        yield test_client


def account_payload(**overrides):
    payload = {
        "customer_id": "cust-1",
        "national_id": "dni-1",
        "customer_type": "PERSONAL",
        "account_type": "AHORRO",
        "balance": "1000.00",
    }
    payload.update(overrides)
    return payload


class TestServiceEndpoints:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_api_info(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["endpoints"]["accounts"] == "/accounts"


class TestAccountEndpoints:
    """Test account CRUD over HTTP"""

    def test_create_and_get_account(self, client):
        response = client.post("/accounts", json=account_payload())

        assert response.status_code == 201
        created = response.json()
        assert created["balance"] == "1000.00"
        assert created["limit_transaction"] == 0
        assert created["client_type"] is None

        fetched = client.get(f"/accounts/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["customer_id"] == "cust-1"

        listed = client.get("/accounts").json()["accounts"]
        assert [a["id"] for a in listed] == [created["id"]]

    def test_get_missing_account(self, client):
        response = client.get("/accounts/nonexistent")

        assert response.status_code == 404
        assert "error" in response.json()

    def test_negative_balance_fails_validation(self, client):
        response = client.post("/accounts", json=account_payload(balance="-1"))

        assert response.status_code == 422

    def test_business_rule_violation(self, client):
        """Test a duplicate savings account is a 400"""
        client.post("/accounts", json=account_payload())

        response = client.post("/accounts", json=account_payload())

        assert response.status_code == 400
        assert response.json() == {"error": "Account creation does not meet business rules"}

    def test_vip_without_credit_card(self, client, card_client):
        card_client.has_card = False

        response = client.post("/accounts", json=account_payload(client_type="VIP"))

        assert response.status_code == 400
        assert response.json()["error"] == "Customer has no credit card"

    def test_card_service_unavailable(self, client, card_client):
        card_client.error = ServiceUnavailableError("Card service not available")

        response = client.post("/accounts", json=account_payload(client_type="PYME"))

        assert response.status_code == 503
        assert response.json()["error"] == "Card service not available"

    def test_update_and_delete(self, client):
        account_id = client.post("/accounts", json=account_payload()).json()["id"]

        response = client.put(f"/accounts/{account_id}", json={
            "customer_type": "PERSONAL",
            "account_type": "CORRIENTE",
            "balance": "750.00",
            "monthly_limit": 5
        })
        assert response.status_code == 200
        assert response.json()["account_type"] == "CORRIENTE"
        assert response.json()["monthly_limit"] == 5

        assert client.delete(f"/accounts/{account_id}").status_code == 204
        assert client.get(f"/accounts/{account_id}").status_code == 404
        assert client.delete(f"/accounts/{account_id}").status_code == 404


class TestTransactionEndpoints:
    """Test deposits and withdrawals over HTTP"""

    def test_deposit_and_withdraw(self, client):
        destination = client.post("/accounts", json=account_payload(customer_id="cust-a")).json()
        origin = client.post("/accounts", json=account_payload(customer_id="cust-b")).json()

        response = client.post(f"/accounts/{destination['id']}/deposit",
                               json={"customer_id": "cust-b", "amount": "200.00"})
        assert response.status_code == 200
        assert response.json()["balance"] == "1200.00"
        assert response.json()["last_deposit_date"] is not None

        assert client.get(f"/accounts/{origin['id']}").json()["balance"] == "800.00"

        response = client.post("/accounts/customers/cust-b/withdraw", json={"amount": "100.00"})
        assert response.status_code == 200
        assert response.json()["balance"] == "700.00"
        assert response.json()["limit_transaction"] == 2

        response = client.post(f"/accounts/{destination['id']}/withdraw", json={"amount": "1200.00"})
        assert response.status_code == 200
        assert response.json()["balance"] == "0.00"

    def test_insufficient_funds(self, client):
        destination = client.post("/accounts", json=account_payload(customer_id="cust-a")).json()
        client.post("/accounts", json=account_payload(customer_id="cust-b", balance="10.00"))

        response = client.post(f"/accounts/{destination['id']}/deposit",
                               json={"customer_id": "cust-b", "amount": "50.00"})

        assert response.status_code == 400
        assert response.json()["error"] == "insufficient balance"

    def test_deposit_from_another_customers_account(self, client):
        destination = client.post("/accounts", json=account_payload(customer_id="cust-a")).json()
        client.post("/accounts", json=account_payload(customer_id="cust-b"))
        foreign = client.post("/accounts", json=account_payload(customer_id="cust-v",
                                                                balance="100.00")).json()

        response = client.post(f"/accounts/{destination['id']}/deposit", json={
            "customer_id": "cust-b",
            "origin_account_id": foreign["id"],
            "amount": "50"
        })

        assert response.status_code == 400
        assert client.get(f"/accounts/{foreign['id']}").json()["balance"] == "100.00"

    def test_non_positive_amount(self, client):
        client.post("/accounts", json=account_payload())

        response = client.post("/accounts/customers/cust-1/withdraw", json={"amount": "0"})

        assert response.status_code == 400

    def test_withdraw_unknown_customer(self, client):
        response = client.post("/accounts/customers/ghost/withdraw", json={"amount": "10"})

        assert response.status_code == 404


class TestCommissionEndpoints:

    def test_commission_lifecycle(self, client):
        response = client.post("/commissions", json={"account_type": "AHORRO", "monto": "10.00"})
        assert response.status_code == 201
        rule_id = response.json()["id"]

        duplicate = client.post("/commissions", json={"account_type": "AHORRO", "monto": "1.00"})
        assert duplicate.status_code == 400

        updated = client.put("/commissions/AHORRO", json={"monto": "12.00"})
        assert updated.status_code == 200
        assert updated.json()["monto"] == "12.00"

        listed = client.get("/commissions").json()["commissions"]
        assert [(c["account_type"], c["monto"]) for c in listed] == [("AHORRO", "12.00")]

        assert client.delete(f"/commissions/{rule_id}").status_code == 204
        assert client.get("/commissions").json()["commissions"] == []

    def test_update_missing_commission(self, client):
        response = client.put("/commissions/CORRIENTE", json={"monto": "1.00"})

        assert response.status_code == 404


class TestReportEndpoints:

    def test_operations_report(self, client):
        destination = client.post("/accounts", json=account_payload(customer_id="cust-a")).json()
        client.post("/accounts", json=account_payload(customer_id="cust-b", national_id="dni-2"))
        client.post(f"/accounts/{destination['id']}/deposit",
                    json={"customer_id": "cust-b", "amount": "310.00"})

        response = client.post("/reports/operations", json={"national_id": "dni-2"})

        assert response.status_code == 200
        body = response.json()
        assert body["national_id"] == "dni-2"
        assert float(body["amount"]) > 0

    def test_operations_report_without_transactions(self, client):
        response = client.post("/reports/operations", json={"national_id": "dni-1"})

        assert response.status_code == 400

    def test_product_report_empty(self, client):
        response = client.post("/reports/products",
                               json={"start_date": "2024-01-01", "end_date": "2024-12-31"})

        assert response.status_code == 200
        assert response.json() == {"transactions": []}

    def test_product_report_inverted_range(self, client):
        response = client.post("/reports/products",
                               json={"start_date": "2024-12-31", "end_date": "2024-01-01"})

        assert response.status_code == 400
