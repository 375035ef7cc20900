"""
Cas d'usage 'payments': orchestre line_items, metadata et la passerelle Stripe.
- Les montants sont calculés en centimes côté serveur (le prix total envoyé par le front est ignoré).
- Les erreurs métier sont levées en HTTPException (400/404); les erreurs Stripe remontent telles quelles
  et sont traduites par la vue.
"""
import logging
from typing import Any, Dict, List, Optional

from hearty_hounds import config
from hearty_hounds.infra.stripe_client import StripeGateway
from hearty_hounds.utils.errors import bad_request
from hearty_hounds.utils.money import platform_fee_cents
from . import line_items as li
from .metadata import build_metadata
from .models import CheckoutSessionRequest

logger = logging.getLogger(__name__)

SESSION_ID_PREFIX = "cs_"

# module hearty_hounds.payments.service
def build_session_params(req: CheckoutSessionRequest) -> Dict[str, Any]:
    """
    Construit les paramètres de stripe.checkout.Session.create (sans appel réseau).
    Lève 400 si le panier est vide ou si une URL de redirection manque.
    """
    if not req.items:
        raise bad_request("Items are required and must be a non-empty array", field="items")
    if not req.success_url or not req.cancel_url:
        missing = "successUrl" if not req.success_url else "cancelUrl"
        raise bad_request("Success and cancel URLs are required", field=missing)

    subtotal = li.subtotal_cents(req.items)
    shipping = req.selected_shipping_rate.amount if req.selected_shipping_rate else 0
    total = subtotal + shipping
    fee = platform_fee_cents(total)

    items = li.to_line_items(req.items)
    if req.selected_shipping_rate and shipping > 0:
        items.append(li.shipping_line_item(req.selected_shipping_rate))

    session_meta, intent_meta = build_metadata(
        req.metadata,
        subtotal=subtotal,
        shipping_cost=shipping,
        total_amount=total,
        platform_fee=fee,
    )

    payment_intent_data: Dict[str, Any] = {"metadata": intent_meta}
    account = req.connected_account_id
    if account:
        if account == config.PLATFORM_ACCOUNT_ID:
            # Pas de transfert vers le compte plateforme lui-même
            logger.warning("Connected account is the platform account, skipping transfer account=%s", account)
            session_meta["platformFee"] = "0"
            intent_meta["platformFee"] = "0"
        else:
            payment_intent_data["application_fee_amount"] = fee
            payment_intent_data["transfer_data"] = {"destination": account}

    params: Dict[str, Any] = {
        "payment_method_types": ["card"],
        "line_items": items,
        "mode": "payment",
        "success_url": req.success_url,
        "cancel_url": req.cancel_url,
        "metadata": session_meta,
        "payment_intent_data": payment_intent_data,
        "billing_address_collection": "required",
        "shipping_address_collection": {"allowed_countries": list(config.SHIPPING_ALLOWED_COUNTRIES)},
    }
    if req.customer_email:
        params["customer_email"] = req.customer_email
    return params

def create_checkout_session(req: CheckoutSessionRequest, gateway: StripeGateway) -> Dict[str, Any]:
    """
    Crée la session Stripe Checkout et renvoie le résumé attendu par le front.
    Retour: {id, url, client_secret, amount_total, currency, payment_status, metadata}
    """
    params = build_session_params(req)
    session = gateway.create_checkout_session(params)
    logger.info(
        "Checkout session created id=%s amount_total=%s items=%s",
        session.get("id"), session.get("amount_total"), len(req.items),
    )
    return {
        "id": session.get("id"),
        "url": session.get("url"),
        "client_secret": session.get("client_secret"),
        "amount_total": session.get("amount_total"),
        "currency": session.get("currency"),
        "payment_status": session.get("payment_status"),
        "metadata": session.get("metadata") or {},
    }

def _obj_id(value: Any) -> Optional[str]:
    """Champ Stripe pouvant être un id ou un objet expansé."""
    if isinstance(value, dict):
        return value.get("id")
    return value

def _summarize_line_items(session: Dict[str, Any]) -> List[Dict[str, Any]]:
    data = (session.get("line_items") or {}).get("data") or []
    out: List[Dict[str, Any]] = []
    for item in data:
        price = item.get("price") or {}
        out.append({
            "id": item.get("id"),
            "amount_total": item.get("amount_total"),
            "amount_subtotal": item.get("amount_subtotal"),
            "currency": item.get("currency"),
            "description": item.get("description"),
            "quantity": item.get("quantity"),
            "price": {
                "id": price.get("id"),
                "unit_amount": price.get("unit_amount"),
                "currency": price.get("currency"),
                "product": price.get("product"),
            } if price else None,
        })
    return out

def _summarize_payment_intent(intent: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not intent:
        return None
    charges = (intent.get("charges") or {}).get("data") or []
    return {
        "id": intent.get("id"),
        "status": intent.get("status"),
        "amount": intent.get("amount"),
        "currency": intent.get("currency"),
        "payment_method": _obj_id(intent.get("payment_method")),
        "application_fee_amount": intent.get("application_fee_amount"),
        "transfer_data": intent.get("transfer_data"),
        "charges": [
            {
                "id": c.get("id"),
                "amount": c.get("amount"),
                "status": c.get("status"),
                "receipt_url": c.get("receipt_url"),
            }
            for c in charges
        ],
    }

def resolve_payment_intent(session: Dict[str, Any], gateway: StripeGateway) -> Optional[Dict[str, Any]]:
    """
    payment_intent d'une session: objet expansé, ou id récupéré séparément.
    """
    pi = session.get("payment_intent")
    if isinstance(pi, str) and pi:
        return gateway.retrieve_payment_intent(pi)
    if isinstance(pi, dict):
        return pi
    return None

def get_checkout_session(session_id: Optional[str], gateway: StripeGateway) -> Dict[str, Any]:
    """
    Détail d'une session Checkout (page de confirmation).
    - 400 si sessionId absent ou ne commence pas par "cs_" (aucun appel Stripe)
    """
    if not session_id:
        raise bad_request("Session ID is required", field="sessionId")
    if not session_id.startswith(SESSION_ID_PREFIX):
        raise bad_request("Invalid session ID format", field="sessionId")

    session = gateway.retrieve_checkout_session(session_id)
    intent = resolve_payment_intent(session, gateway)
    details = session.get("customer_details") or {}

    summary = {
        "id": session.get("id"),
        "payment_status": session.get("payment_status"),
        "status": session.get("status"),
        "amount_total": session.get("amount_total"),
        "amount_subtotal": session.get("amount_subtotal"),
        "currency": session.get("currency"),
        "customer_email": session.get("customer_email") or details.get("email"),
        "customer_name": details.get("name"),
        "customer_phone": details.get("phone"),
        "payment_method_types": session.get("payment_method_types") or [],
        "created": session.get("created"),
        "expires_at": session.get("expires_at"),
        "metadata": session.get("metadata") or {},
        "shipping_details": session.get("shipping_details"),
        "billing_details": session.get("customer_details"),
        "line_items": _summarize_line_items(session),
        "payment_intent": _summarize_payment_intent(intent),
    }
    logger.info("Checkout session retrieved id=%s payment_status=%s", summary["id"], summary["payment_status"])
    return {"success": True, "session": summary}
