"""
Métadonnées Stripe attachées à la session et au PaymentIntent.
Stripe n'accepte que des valeurs str: tous les totaux sont sérialisés en centimes.
"""
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from hearty_hounds import config

# module hearty_hounds.payments.metadata
def build_metadata(
    base: Optional[Dict[str, str]],
    *,
    subtotal: int,
    shipping_cost: int,
    total_amount: int,
    platform_fee: int,
    now: Optional[datetime] = None,
) -> Tuple[Dict[str, str], Dict[str, str]]:
    """
    Retourne (metadata_session, metadata_payment_intent).
    - base: métadonnées fournies par l'appelant, fusionnées en premier (les clés calculées gagnent)
    - la session porte en plus l'horodatage ISO-8601 (UTC)
    """
    now = now or datetime.now(timezone.utc)
    totals = {
        "source": config.CHECKOUT_SOURCE_TAG,
        "subtotal": str(subtotal),
        "shippingCost": str(shipping_cost),
        "totalAmount": str(total_amount),
        "platformFee": str(platform_fee),
    }
    intent_meta = {**(base or {}), **totals}
    session_meta = {**(base or {}), **totals, "timestamp": now.isoformat()}
    return session_meta, intent_meta
