from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

from supabase import Client

logger = logging.getLogger(__name__)

TABLE = "seller_addresses"
SELLER_ADDRESS_ID = "default"
ADDRESS_FIELDS = ("name", "street1", "street2", "city", "state", "zip", "country", "phone", "email")

# module hearty_hounds.addresses.repository
def get_seller_address(db: Client) -> Optional[Dict[str, Any]]:
    """
    Adresse vendeur (singleton id="default"), None si absente.
    Les erreurs Supabase remontent: l'appelant décide du repli.
    """
    res = (
        db.table(TABLE)
        .select("*")
        .eq("id", SELLER_ADDRESS_ID)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def upsert_seller_address(db: Client, address: Dict[str, Any], now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
    """
    Écrit l'adresse vendeur sous l'id constant (insert ou remplacement), sans jamais supprimer d'autres lignes.
    created_at n'est posé qu'à la première écriture.
    """
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    row: Dict[str, Any] = {k: address.get(k) for k in ADDRESS_FIELDS if address.get(k) is not None}
    row["id"] = SELLER_ADDRESS_ID
    row["updated_at"] = stamp
    existing = get_seller_address(db)
    row["created_at"] = (existing or {}).get("created_at") or stamp
    res = db.table(TABLE).upsert(row, on_conflict="id").execute()
    logger.info("addresses.repository.upsert_seller_address id=%s city=%s", SELLER_ADDRESS_ID, row.get("city"))
    return res.data[0] if res.data else row
