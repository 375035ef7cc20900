"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
- Une instance par process (voir hearty_hounds.dependencies), injectée dans les vues.
- La clé et la version d'API sont passées à chaque appel (pas de stripe.api_key global).
- Les objets Stripe sont convertis en dict simples avant de quitter l'adaptateur.
"""
import json
import logging
from typing import Any, Dict, List, Optional

import stripe

logger = logging.getLogger(__name__)

SESSION_EXPAND = ["line_items", "payment_intent", "customer"]

# module hearty_hounds.infra.stripe_client
def to_plain(obj: Any) -> Any:
    """
    Convertit un StripeObject (éventuellement imbriqué) en dict/list JSON natifs.
    Les valeurs déjà natives (tests, fakes) sont retournées telles quelles.
    """
    if isinstance(obj, stripe.StripeObject):
        return json.loads(str(obj))
    return obj

class StripeGateway:
    def __init__(self, api_key: str, api_version: Optional[str] = None):
        self.api_key = api_key
        self.api_version = api_version

    def _options(self) -> Dict[str, Any]:
        opts: Dict[str, Any] = {"api_key": self.api_key}
        if self.api_version:
            opts["stripe_version"] = self.api_version
        return opts

    def create_checkout_session(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Crée une session Stripe Checkout.
        Retour: dict session (ex: {"id": "cs_test_...", "url": "https://...", ...})
        """
        session = stripe.checkout.Session.create(**params, **self._options())
        return to_plain(session)

    def retrieve_checkout_session(self, session_id: str, expand: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Récupère une session Checkout; expand par défaut: line_items, payment_intent, customer.
        """
        session = stripe.checkout.Session.retrieve(
            session_id,
            expand=list(expand if expand is not None else SESSION_EXPAND),
            **self._options(),
        )
        return to_plain(session)

    def retrieve_payment_intent(self, payment_intent_id: str) -> Dict[str, Any]:
        intent = stripe.PaymentIntent.retrieve(payment_intent_id, **self._options())
        return to_plain(intent)

def describe_stripe_error(exc: "stripe.StripeError") -> Dict[str, Any]:
    """
    Corps d'erreur renvoyé au client pour une erreur fournisseur Stripe.
    - type: error.type renvoyé par Stripe (ex: invalid_request_error, card_error),
      à défaut le nom de la classe SDK (ex: InvalidRequestError)
    """
    message = getattr(exc, "user_message", None) or str(exc) or "Unknown Stripe error"
    error_type = getattr(getattr(exc, "error", None), "type", None) or type(exc).__name__
    return {"error": "Stripe error", "message": message, "type": error_type}
