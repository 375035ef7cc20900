"""
Cas d'usage 'addresses': adresse d'origine des expéditions.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from supabase import Client

from hearty_hounds import config
from hearty_hounds.utils.errors import bad_request
from . import repository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "street1", "city", "state", "zip", "country")

def _strip_row(row: Dict[str, Any]) -> Dict[str, Any]:
    return {k: row.get(k) or "" for k in repository.ADDRESS_FIELDS}

def resolve_origin_address(db: Optional[Client]) -> Tuple[Dict[str, Any], bool]:
    """
    Adresse d'origine: adresse vendeur enregistrée, sinon l'adresse par défaut.
    Retour: (adresse, is_fallback). Ne lève jamais: toute erreur de lecture bascule sur le défaut.
    """
    if db is None:
        logger.warning("No database client, using default seller address")
        return dict(config.DEFAULT_SELLER_ADDRESS), True
    try:
        row = repository.get_seller_address(db)
    except Exception as e:
        logger.warning("Error fetching seller address, falling back to default: %s", e)
        return dict(config.DEFAULT_SELLER_ADDRESS), True
    if not row:
        logger.warning("No seller address found, using default")
        return dict(config.DEFAULT_SELLER_ADDRESS), True
    logger.info("Using stored seller address city=%s state=%s", row.get("city"), row.get("state"))
    return _strip_row(row), False

def save_seller_address(db: Client, address: Dict[str, Any]) -> Dict[str, Any]:
    for field in REQUIRED_FIELDS:
        if not address.get(field):
            raise bad_request(f"Missing required address field: {field}", error="Invalid address", field=field)
    row = repository.upsert_seller_address(db, address)
    return _strip_row(row)
