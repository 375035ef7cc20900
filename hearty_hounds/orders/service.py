"""
Cas d'usage 'orders': réconciliation paiement Stripe -> commande, consultation, suivi de statut.

Réconciliation (create_order_from_payment):
  1) résout le PaymentIntent (via la session Checkout ou directement)
  2) 404 si introuvable, 400 si son statut n'est pas "succeeded"
  3) idempotence par payment_intent_id (lecture puis insertion conditionnelle sur index unique)
  4) calcule les champs dérivés en centimes, convertis une seule fois en dollars à l'écriture
  5) effets de bord "best effort" (stock, email de confirmation): loggés, jamais bloquants
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from fastapi import HTTPException
from supabase import Client

from hearty_hounds.infra.stripe_client import SESSION_EXPAND, StripeGateway
from hearty_hounds.notifications import repository as notifications_repo
from hearty_hounds.payments.service import resolve_payment_intent
from hearty_hounds.products import repository as products_repo
from hearty_hounds.utils.errors import bad_request, error_body, not_found
from hearty_hounds.utils.money import estimate_stripe_fee_cents, from_cents
from . import repository
from .models import Order, OrderItem, OrderStatus, PaymentStatus, can_transition

logger = logging.getLogger(__name__)

# Le produit des lignes est expansé pour retrouver product_data.metadata.productId
RECONCILE_EXPAND = SESSION_EXPAND + ["line_items.data.price.product"]

MSG_CREATED = "Order created successfully"
MSG_EXISTS = "Order already exists"

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

# --- Résolution du paiement ---

def fetch_payment(
    gateway: StripeGateway,
    session_id: Optional[str],
    payment_intent_id: Optional[str],
) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
    """Retour: (session ou None, payment_intent ou None)."""
    if session_id:
        session = gateway.retrieve_checkout_session(session_id, expand=RECONCILE_EXPAND)
        return session, resolve_payment_intent(session, gateway)
    return None, gateway.retrieve_payment_intent(payment_intent_id)

# --- Champs dérivés ---

def _product_id(line: Dict[str, Any]) -> str:
    price = line.get("price") or {}
    product = price.get("product")
    if isinstance(product, dict):
        return (product.get("metadata") or {}).get("productId") or product.get("id") or line.get("id")
    return product or line.get("id")

def build_items(session: Optional[Dict[str, Any]]) -> Tuple[Optional[List[OrderItem]], int]:
    """
    Lignes de la session -> (items, sous-total en centimes).
    items=None si la session ne porte pas de line_items (sous-total à dériver du total).
    """
    data = ((session or {}).get("line_items") or {}).get("data")
    if not data:
        return None, 0
    items: List[OrderItem] = []
    subtotal = 0
    for line in data:
        subtotal += line.get("amount_subtotal") or 0
        price = line.get("price") or {}
        items.append(OrderItem(
            id=_product_id(line),
            name=line.get("description") or "Product",
            price=from_cents(price.get("unit_amount") or 0),
            quantity=line.get("quantity") or 1,
            total=from_cents(line.get("amount_total") or 0),
        ))
    return items, subtotal

def customer_email(session: Optional[Dict[str, Any]], intent: Dict[str, Any]) -> str:
    details = (session or {}).get("customer_details") or {}
    return details.get("email") or (session or {}).get("customer_email") or intent.get("receipt_email") or ""

def shipping_details(session: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    details = (session or {}).get("shipping_details")
    if not details:
        return None
    address = details.get("address") or {}
    return {
        "name": details.get("name") or "",
        "address": {
            "line1": address.get("line1") or "",
            "line2": address.get("line2") or None,
            "city": address.get("city") or "",
            "state": address.get("state") or "",
            "postal_code": address.get("postal_code") or "",
            "country": address.get("country") or "",
        },
        "phone": ((session or {}).get("customer_details") or {}).get("phone") or None,
    }

def _obj_id(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return value.get("id")
    return value or None

def build_order(session: Optional[Dict[str, Any]], intent: Dict[str, Any], now: Optional[str] = None) -> Order:
    now = now or _now_iso()
    total_cents = intent.get("amount") or 0
    platform_fee = intent.get("application_fee_amount") or 0
    stripe_fee = estimate_stripe_fee_cents(total_cents)

    items, subtotal = build_items(session)
    if items is not None:
        shipping = ((session or {}).get("total_details") or {}).get("amount_shipping") or 0
    else:
        items = []
        subtotal = total_cents - platform_fee - stripe_fee
        shipping = 0

    details = (session or {}).get("customer_details") or {}
    metadata: Dict[str, Any] = {
        **((session or {}).get("metadata") or {}),
        **(intent.get("metadata") or {}),
        "stripeChargeId": _obj_id(intent.get("latest_charge")),
        "receiptUrl": None,
    }
    return Order(
        id=uuid4().hex,
        customer_id=_obj_id((session or {}).get("customer")),
        customer_email=customer_email(session, intent),
        customer_name=details.get("name") or "",
        items=items,
        subtotal=from_cents(subtotal),
        shipping_cost=from_cents(shipping),
        platform_fee=from_cents(platform_fee),
        stripe_fee=from_cents(stripe_fee),
        total=from_cents(total_cents),
        currency=intent.get("currency") or "usd",
        status=OrderStatus.PAID,
        payment_status=PaymentStatus.PAID,
        payment_intent_id=intent.get("id"),
        checkout_session_id=(session or {}).get("id") or "",
        connected_account_id=_obj_id((intent.get("transfer_data") or {}).get("destination")),
        shipping_details=shipping_details(session),
        billing_details=details or None,
        metadata=metadata,
        created_at=now,
        updated_at=now,
        paid_at=now,
    )

# --- Effets de bord ---

def update_inventory(db: Client, items: List[OrderItem]) -> None:
    """Décrémente products.stock de la quantité achetée (plancher 0); produits inconnus ignorés."""
    for item in items:
        product = products_repo.get_product(db, item.id)
        if not product:
            continue
        current = int(product.get("stock") or 0)
        products_repo.set_stock(db, item.id, max(0, current - item.quantity))

def queue_confirmation_email(db: Client, order: Order) -> None:
    notifications_repo.enqueue_email(db, {
        "type": "order_confirmation",
        "to": order.customer_email,
        "order_id": order.id,
        "order_data": order.to_api(),
        "status": "pending",
        "created_at": _now_iso(),
    })

def run_side_effects(db: Client, order: Order) -> None:
    try:
        update_inventory(db, order.items)
    except Exception as e:
        logger.warning("Failed to update inventory order_id=%s error=%s", order.id, e)
    try:
        queue_confirmation_email(db, order)
    except Exception as e:
        logger.warning("Failed to queue confirmation email order_id=%s error=%s", order.id, e)

# --- Cas d'usage ---

def create_order_from_payment(
    db: Client,
    gateway: StripeGateway,
    session_id: Optional[str] = None,
    payment_intent_id: Optional[str] = None,
) -> Tuple[int, Dict[str, Any]]:
    """
    Transforme un paiement Stripe réussi en commande persistée.
    Retour: (code HTTP, corps) avec 201 à la création, 200 si la commande existait déjà.
    """
    if not session_id and not payment_intent_id:
        raise bad_request(
            "Either sessionId or paymentIntentId is required",
            error="Missing required parameter",
            field="sessionId",
        )
    logger.info("Creating order from payment session_id=%s payment_intent_id=%s", session_id, payment_intent_id)

    session, intent = fetch_payment(gateway, session_id, payment_intent_id)
    if not intent:
        raise not_found("Payment intent not found", "Could not retrieve payment intent")
    status = intent.get("status")
    if status != "succeeded":
        raise HTTPException(status_code=400, detail=error_body(
            "Payment not completed", f"Payment status is {status}", paymentStatus=status,
        ))

    existing = repository.find_by_payment_intent(db, intent["id"])
    if existing:
        logger.info("Order already exists order_id=%s payment_intent_id=%s", existing.get("id"), intent["id"])
        return 200, {"success": True, "order": Order.model_validate(existing).to_api(), "message": MSG_EXISTS}

    order = build_order(session, intent)
    inserted = repository.insert_if_absent(db, order.to_row())
    if inserted is None:
        # Insertion concurrente gagnée par une autre requête: renvoyer sa commande, sans effets de bord
        winner = repository.find_by_payment_intent(db, intent["id"])
        if winner is None:
            raise RuntimeError(f"Order insert returned no row for payment intent {intent['id']}")
        logger.info("Order created concurrently order_id=%s payment_intent_id=%s", winner.get("id"), intent["id"])
        return 200, {"success": True, "order": Order.model_validate(winner).to_api(), "message": MSG_EXISTS}

    logger.info(
        "Order created order_id=%s customer_email=%s total=%s payment_intent_id=%s",
        order.id, order.customer_email, order.total, order.payment_intent_id,
    )
    run_side_effects(db, order)
    return 201, {"success": True, "order": order.to_api(), "message": MSG_CREATED}

def get_order(db: Client, order_id: Optional[str]) -> Dict[str, Any]:
    if not order_id:
        raise bad_request("Order ID is required", field="orderId")
    row = repository.get_order(db, order_id)
    if not row:
        raise not_found("Order not found", f"No order with id {order_id}")
    return {"success": True, "order": Order.model_validate(row).to_api()}

def list_orders(db: Client, customer_email: Optional[str] = None, limit: int = 50) -> Dict[str, Any]:
    rows = repository.list_orders(db, customer_email=customer_email, limit=limit)
    orders = [Order.model_validate(r).to_api() for r in rows]
    return {"success": True, "orders": orders, "count": len(orders)}

def update_order_status(db: Client, order_id: str, target: OrderStatus) -> Dict[str, Any]:
    """
    Fait avancer le statut d'une commande.
    - 404 si absente, 409 si la transition n'est pas autorisée (retour arrière, état terminal)
    """
    row = repository.get_order(db, order_id)
    if not row:
        raise not_found("Order not found", f"No order with id {order_id}")
    order = Order.model_validate(row)
    current = OrderStatus(order.status)
    target = OrderStatus(target)
    if not can_transition(current, target):
        raise HTTPException(status_code=409, detail=error_body(
            "Invalid status transition",
            f"Cannot move order from {current.value} to {target.value}",
        ))

    now = _now_iso()
    changes: Dict[str, Any] = {"status": target.value, "updated_at": now}
    if target == OrderStatus.SHIPPED:
        changes["shipped_at"] = now
    elif target == OrderStatus.DELIVERED:
        changes["delivered_at"] = now
    elif target == OrderStatus.REFUNDED:
        changes["payment_status"] = PaymentStatus.REFUNDED.value

    updated = repository.update_order(db, order_id, changes)
    logger.info("Order status updated order_id=%s from=%s to=%s", order_id, current.value, target.value)
    merged = updated or {**row, **changes}
    return {"success": True, "order": Order.model_validate(merged).to_api()}
