"""
Fournisseurs de dépendances FastAPI (clients externes).
- Construits une seule fois par process à partir de hearty_hounds.config.
- Injectés dans les vues via Depends(...); les tests les remplacent via app.dependency_overrides.
"""
import logging
from functools import lru_cache
from typing import Optional

from supabase import Client

from hearty_hounds import config
from hearty_hounds.infra import supabase_client
from hearty_hounds.infra.shippo_client import ShippoClient
from hearty_hounds.infra.stripe_client import StripeGateway

logger = logging.getLogger(__name__)

@lru_cache(maxsize=1)
def get_payment_gateway() -> StripeGateway:
    return StripeGateway(config.STRIPE_SECRET_KEY, api_version=config.STRIPE_API_VERSION)

@lru_cache(maxsize=1)
def get_shipping_client() -> ShippoClient:
    return ShippoClient(config.SHIPPO_API_KEY, base_url=config.SHIPPO_API_URL, timeout=config.SHIPPO_TIMEOUT)

def get_db() -> Client:
    return supabase_client.get_service_supabase()

def get_optional_db() -> Optional[Client]:
    """Client Supabase si configuré, None sinon (lectures avec repli, ex: adresse d'origine)."""
    try:
        return supabase_client.get_service_supabase()
    except RuntimeError as e:
        logger.warning("Supabase unavailable: %s", e)
        return None
