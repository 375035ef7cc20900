import os

os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import pytest
from typing import Any, Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from hearty_hounds.app import app as fastapi_app
from hearty_hounds.dependencies import get_db, get_optional_db, get_payment_gateway, get_shipping_client
from hearty_hounds.utils.security import require_admin

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

# --- Fakes fournisseurs ---

class FakeGateway:
    """Double de StripeGateway: enregistre les appels, renvoie des dicts préparés."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.sessions: Dict[str, Dict[str, Any]] = {}
        self.intents: Dict[str, Dict[str, Any]] = {}
        self.error: Optional[Exception] = None

    def create_checkout_session(self, params: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("create_checkout_session", params))
        if self.error:
            raise self.error
        return {
            "id": "cs_test_123",
            "url": "https://checkout.stripe.test/pay/cs_test_123",
            "client_secret": None,
            "amount_total": sum(li["price_data"]["unit_amount"] * li["quantity"] for li in params["line_items"]),
            "currency": "usd",
            "payment_status": "unpaid",
            "metadata": params.get("metadata") or {},
        }

    def retrieve_checkout_session(self, session_id: str, expand=None) -> Dict[str, Any]:
        self.calls.append(("retrieve_checkout_session", session_id, expand))
        if self.error:
            raise self.error
        return self.sessions[session_id]

    def retrieve_payment_intent(self, payment_intent_id: str) -> Dict[str, Any]:
        self.calls.append(("retrieve_payment_intent", payment_intent_id))
        if self.error:
            raise self.error
        return self.intents.get(payment_intent_id)

class FakeShippo:
    def __init__(self, rates: Optional[List[Dict[str, Any]]] = None):
        self.calls: List[tuple] = []
        self.rates = rates if rates is not None else [
            make_rate("rate_b", "12.40", provider="UPS", service="Ground", days=3),
            make_rate("rate_a", "5.50", provider="USPS", service="Priority Mail", days=2),
        ]
        self.error: Optional[Exception] = None

    def create_shipment(self, shipment: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("create_shipment", shipment))
        if self.error:
            raise self.error
        return {"object_id": "shp_123", "rates": list(self.rates)}

    def validate_address(self, address: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("validate_address", address))
        if self.error:
            raise self.error
        return {**address, "object_id": "adr_1", "validation_results": {"is_valid": True, "messages": []}}

# --- Fabriques de données ---

def make_rate(object_id: str, amount: Optional[str], currency: Optional[str] = "usd", provider: str = "USPS", service: str = "Priority Mail", days: Optional[int] = 2) -> Dict[str, Any]:
    return {
        "object_id": object_id,
        "amount": amount,
        "currency": currency,
        "provider": provider,
        "servicelevel": {"name": service, "token": service.lower().replace(" ", "_"), "terms": ""},
        "estimated_days": days,
    }

def make_intent(pi_id: str = "pi_123", status: str = "succeeded", amount: int = 3097, **extra: Any) -> Dict[str, Any]:
    intent = {
        "id": pi_id,
        "status": status,
        "amount": amount,
        "currency": "usd",
        "receipt_email": "receipt@example.com",
        "application_fee_amount": 310,
        "transfer_data": {"destination": "acct_seller"},
        "latest_charge": "ch_123",
        "metadata": {"source": "hearty-hounds-frontend", "platformFee": "310"},
    }
    intent.update(extra)
    return intent

def make_session(session_id: str = "cs_test_123", payment_intent: Any = "pi_123", with_line_items: bool = True, **extra: Any) -> Dict[str, Any]:
    session: Dict[str, Any] = {
        "id": session_id,
        "status": "complete",
        "payment_status": "paid",
        "amount_total": 3097,
        "amount_subtotal": 3097,
        "currency": "usd",
        "customer": "cus_123",
        "customer_email": "checkout@example.com",
        "customer_details": {"email": "buyer@example.com", "name": "Rex Owner", "phone": "+15550001111"},
        "payment_intent": payment_intent,
        "payment_method_types": ["card"],
        "created": 1700000000,
        "expires_at": 1700086400,
        "metadata": {"source": "hearty-hounds-frontend", "timestamp": "2024-01-01T00:00:00+00:00"},
        "shipping_details": {
            "name": "Rex Owner",
            "address": {"line1": "1 Bark St", "line2": None, "city": "Austin", "state": "TX", "postal_code": "73301", "country": "US"},
        },
        "total_details": {"amount_shipping": 599},
    }
    if with_line_items:
        session["line_items"] = {"data": [
            {
                "id": "li_1",
                "description": "Chew Toy",
                "quantity": 2,
                "amount_subtotal": 1998,
                "amount_total": 1998,
                "currency": "usd",
                "price": {"id": "price_1", "unit_amount": 999, "currency": "usd",
                          "product": {"id": "prod_1", "metadata": {"productId": "toy-1"}}},
            },
            {
                "id": "li_2",
                "description": "Dog Bowl",
                "quantity": 1,
                "amount_subtotal": 500,
                "amount_total": 500,
                "currency": "usd",
                "price": {"id": "price_2", "unit_amount": 500, "currency": "usd", "product": "prod_2"},
            },
        ]}
    session.update(extra)
    return session

# --- Fixtures ---

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def fake_gateway() -> FakeGateway:
    return FakeGateway()

@pytest.fixture()
def fake_shippo() -> FakeShippo:
    return FakeShippo()

@pytest.fixture()
def fake_db() -> MagicMock:
    return MagicMock()

@pytest.fixture(autouse=True)
def _override_providers(app, fake_gateway, fake_shippo, fake_db):
    # Aucun appel réel à Stripe / Shippo / Supabase pendant les tests
    app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway
    app.dependency_overrides[get_shipping_client] = lambda: fake_shippo
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_optional_db] = lambda: fake_db
    try:
        yield
    finally:
        app.dependency_overrides.clear()

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture()
def admin_client(app, client):
    app.dependency_overrides[require_admin] = lambda: {"id": "admin-user-id", "role": "admin", "email": "admin@example.com"}
    yield client

# Fabriques exposées en fixtures (pas d'import de conftest depuis les tests)
@pytest.fixture(name="make_rate")
def _make_rate_fixture():
    return make_rate

@pytest.fixture(name="make_intent")
def _make_intent_fixture():
    return make_intent

@pytest.fixture(name="make_session")
def _make_session_fixture():
    return make_session
