from datetime import datetime, timezone

import pytest
from fastapi import HTTPException

from hearty_hounds import config
from hearty_hounds.payments import service
from hearty_hounds.payments.metadata import build_metadata
from hearty_hounds.payments.models import CheckoutSessionRequest

def _request(**overrides):
    body = {
        "items": [
            {"id": "toy-1", "name": "Chew Toy", "price": 9.99, "quantity": 2},
            {"id": "bowl-1", "name": "Dog Bowl", "price": 5.00, "quantity": 1},
        ],
        "customerEmail": "buyer@example.com",
        "successUrl": "https://shop.test/success?session_id={CHECKOUT_SESSION_ID}",
        "cancelUrl": "https://shop.test/cart",
        "metadata": {"cartId": "c-1"},
    }
    body.update(overrides)
    return CheckoutSessionRequest.model_validate(body)

def test_empty_cart_rejected_before_provider_call(fake_gateway):
    with pytest.raises(HTTPException) as exc:
        service.create_checkout_session(_request(items=[]), fake_gateway)
    assert exc.value.status_code == 400
    assert exc.value.detail["field"] == "items"
    assert fake_gateway.calls == []

@pytest.mark.parametrize("missing", ["successUrl", "cancelUrl"])
def test_missing_redirect_url_rejected(fake_gateway, missing):
    with pytest.raises(HTTPException) as exc:
        service.create_checkout_session(_request(**{missing: None}), fake_gateway)
    assert exc.value.status_code == 400
    assert exc.value.detail["field"] == missing
    assert fake_gateway.calls == []

def test_session_params_without_connected_account():
    params = service.build_session_params(_request())
    assert params["mode"] == "payment"
    assert params["payment_method_types"] == ["card"]
    assert params["customer_email"] == "buyer@example.com"
    assert params["billing_address_collection"] == "required"
    assert params["shipping_address_collection"] == {"allowed_countries": ["US", "CA"]}
    assert len(params["line_items"]) == 2
    pi_data = params["payment_intent_data"]
    assert "application_fee_amount" not in pi_data
    assert "transfer_data" not in pi_data
    assert params["metadata"]["subtotal"] == "2498"
    assert params["metadata"]["totalAmount"] == "2498"
    assert params["metadata"]["platformFee"] == "250"
    assert params["metadata"]["cartId"] == "c-1"

def test_shipping_rate_adds_line_and_totals():
    req = _request(selectedShippingRate={"id": "rate_a", "display_name": "USPS Priority Mail", "amount": 599, "carrier": "USPS", "service": "Priority Mail"})
    params = service.build_session_params(req)
    assert len(params["line_items"]) == 3
    assert params["line_items"][-1]["price_data"]["product_data"]["name"] == "Shipping - USPS Priority Mail"
    meta = params["metadata"]
    assert meta["shippingCost"] == "599"
    assert meta["totalAmount"] == "3097"
    assert meta["platformFee"] == "310"

def test_zero_amount_shipping_rate_adds_no_line():
    req = _request(selectedShippingRate={"display_name": "Free", "amount": 0})
    params = service.build_session_params(req)
    assert len(params["line_items"]) == 2

def test_connected_account_gets_fee_and_transfer():
    params = service.build_session_params(_request(connectedAccountId="acct_seller"))
    pi_data = params["payment_intent_data"]
    assert pi_data["application_fee_amount"] == 250
    assert pi_data["transfer_data"] == {"destination": "acct_seller"}
    assert pi_data["metadata"]["platformFee"] == "250"

def test_platform_account_skips_fee_and_zeroes_metadata():
    params = service.build_session_params(_request(connectedAccountId=config.PLATFORM_ACCOUNT_ID))
    pi_data = params["payment_intent_data"]
    assert "application_fee_amount" not in pi_data
    assert "transfer_data" not in pi_data
    assert params["metadata"]["platformFee"] == "0"
    assert pi_data["metadata"]["platformFee"] == "0"

def test_metadata_timestamp_only_on_session():
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    session_meta, intent_meta = build_metadata({"source": "caller"}, subtotal=1, shipping_cost=2, total_amount=3, platform_fee=0, now=now)
    assert session_meta["timestamp"] == "2024-05-01T12:00:00+00:00"
    assert "timestamp" not in intent_meta
    # les clés calculées gagnent sur celles de l'appelant
    assert session_meta["source"] == "hearty-hounds-frontend"
    assert intent_meta["totalAmount"] == "3"

def test_create_checkout_session_returns_summary(fake_gateway):
    out = service.create_checkout_session(_request(), fake_gateway)
    assert out["id"] == "cs_test_123"
    assert out["url"].startswith("https://checkout.stripe.test/")
    assert out["amount_total"] == 2498
    assert set(out) == {"id", "url", "client_secret", "amount_total", "currency", "payment_status", "metadata"}
    assert len(fake_gateway.calls) == 1

@pytest.mark.parametrize("session_id", [None, "", "pi_123", "sess_123", "CS_123"])
def test_get_checkout_session_rejects_bad_ids_without_provider_call(fake_gateway, session_id):
    with pytest.raises(HTTPException) as exc:
        service.get_checkout_session(session_id, fake_gateway)
    assert exc.value.status_code == 400
    assert fake_gateway.calls == []

def test_get_checkout_session_fetches_string_payment_intent(fake_gateway, make_session, make_intent):
    fake_gateway.sessions["cs_test_123"] = make_session(payment_intent="pi_123")
    fake_gateway.intents["pi_123"] = make_intent(charges={"data": [{"id": "ch_1", "amount": 3097, "status": "succeeded", "receipt_url": "https://r"}]})

    out = service.get_checkout_session("cs_test_123", fake_gateway)

    assert out["success"] is True
    session = out["session"]
    assert session["customer_email"] == "checkout@example.com"
    assert session["customer_name"] == "Rex Owner"
    assert session["payment_intent"]["id"] == "pi_123"
    assert session["payment_intent"]["charges"][0]["id"] == "ch_1"
    assert session["line_items"][0]["price"]["unit_amount"] == 999
    assert ("retrieve_payment_intent", "pi_123") in fake_gateway.calls

def test_get_checkout_session_uses_expanded_payment_intent(fake_gateway, make_session, make_intent):
    fake_gateway.sessions["cs_test_123"] = make_session(payment_intent=make_intent())
    out = service.get_checkout_session("cs_test_123", fake_gateway)
    assert out["session"]["payment_intent"]["status"] == "succeeded"
    assert not any(c[0] == "retrieve_payment_intent" for c in fake_gateway.calls)
