import logging
from typing import Optional

import stripe
from fastapi import APIRouter, Depends, HTTPException, Query

from hearty_hounds.dependencies import get_payment_gateway
from hearty_hounds.infra.stripe_client import StripeGateway, describe_stripe_error
from hearty_hounds.utils.errors import internal_error, not_found
from hearty_hounds.utils.rate_limit import optional_rate_limit
from . import service
from .models import CheckoutSessionRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/payments", tags=["Payments API"])

# module hearty_hounds.payments.views
@router.post("/checkout-session", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_checkout_session(payload: CheckoutSessionRequest, gateway: StripeGateway = Depends(get_payment_gateway)):
    """
    Crée une session Stripe Checkout pour le panier envoyé par le front.
    - Entrée JSON: {items[], customerEmail?, connectedAccountId?, successUrl, cancelUrl, selectedShippingRate?, metadata?}
    - Sortie: {id, url, client_secret, amount_total, currency, payment_status, metadata}
    - Erreurs: 400 validation ou erreur Stripe (type SDK), 500 sinon
    """
    try:
        return service.create_checkout_session(payload, gateway)
    except HTTPException:
        raise
    except stripe.StripeError as e:
        logger.warning("Stripe error on checkout session: %s", e)
        raise HTTPException(status_code=400, detail=describe_stripe_error(e))
    except Exception as e:
        logger.exception("Erreur create_checkout_session")
        raise internal_error(e)

@router.get("/checkout-session")
def get_checkout_session(
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    """
    Détail d'une session Checkout (page de succès).
    - 400 si sessionId absent/mal formé, 404 si Stripe ne connaît pas la session
    """
    try:
        return service.get_checkout_session(session_id, gateway)
    except HTTPException:
        raise
    except stripe.InvalidRequestError as e:
        logger.info("Checkout session not found id=%s: %s", session_id, e)
        raise not_found("Session not found", "The requested checkout session does not exist")
    except stripe.StripeError as e:
        logger.warning("Stripe error on session retrieval: %s", e)
        raise HTTPException(status_code=400, detail=describe_stripe_error(e))
    except Exception as e:
        logger.exception("Erreur get_checkout_session")
        raise internal_error(e)
