import logging
from typing import Any, Dict, Optional

import stripe
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from supabase import Client

from hearty_hounds.dependencies import get_db, get_payment_gateway
from hearty_hounds.infra.stripe_client import StripeGateway, describe_stripe_error
from hearty_hounds.utils.errors import internal_error
from hearty_hounds.utils.rate_limit import optional_rate_limit
from hearty_hounds.utils.security import get_current_user, get_optional_user, require_admin
from . import service
from .models import CreateOrderRequest, StatusUpdateRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/orders", tags=["Orders API"])

# module hearty_hounds.orders.views
@router.post("/from-payment", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_order_from_payment(
    payload: CreateOrderRequest,
    db: Client = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    """
    Crée la commande correspondant à un paiement Stripe réussi (page de succès du checkout).
    - Entrée JSON: {sessionId?} ou {paymentIntentId?}
    - 201 {success, order, message} à la création, 200 si la commande existait déjà
    - Erreurs: 400 paramètre manquant / paiement non abouti / erreur Stripe, 404 PaymentIntent introuvable
    """
    try:
        status_code, body = service.create_order_from_payment(
            db, gateway, session_id=payload.session_id, payment_intent_id=payload.payment_intent_id,
        )
        return JSONResponse(status_code=status_code, content=body)
    except HTTPException:
        raise
    except stripe.StripeError as e:
        logger.warning("Stripe error on order creation: %s", e)
        raise HTTPException(status_code=400, detail=describe_stripe_error(e))
    except Exception as e:
        logger.exception("Erreur create_order_from_payment")
        raise internal_error(e)

@router.get("")
def get_orders(
    request: Request,
    order_id: Optional[str] = Query(default=None, alias="orderId"),
    customer_email: Optional[str] = Query(default=None, alias="customerEmail"),
    limit: int = Query(default=50, ge=1, le=200),
    db: Client = Depends(get_db),
):
    """
    - ?orderId=: une commande (page de confirmation), 404 si absente
    - ?customerEmail=: historique du client, plus récentes d'abord (jeton Bearer du même e-mail ou admin)
    - sans paramètre: toutes les commandes (admin, jeton Bearer requis)
    """
    try:
        if order_id:
            return service.get_order(db, order_id)
        if customer_email:
            user = get_current_user(request)
            if (user.get("email") or "").lower() != customer_email.strip().lower():
                require_admin(user)
            return service.list_orders(db, customer_email=customer_email, limit=limit)
        user = get_optional_user(request)
        if user is None:
            return service.get_order(db, None)
        require_admin(user)
        return service.list_orders(db, limit=limit)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Erreur get_orders")
        raise internal_error(e)

@router.patch("/{order_id}/status")
def update_order_status(
    order_id: str,
    payload: StatusUpdateRequest,
    db: Client = Depends(get_db),
    admin: Dict[str, Any] = Depends(require_admin),
):
    """Fait avancer le statut (admin); 409 si la transition est interdite."""
    try:
        result = service.update_order_status(db, order_id, payload.status)
        logger.info("Order status changed order_id=%s by=%s", order_id, admin.get("email"))
        return result
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Erreur update_order_status")
        raise internal_error(e)
