from typing import Any, Dict, List, Optional
import logging

from supabase import Client

logger = logging.getLogger(__name__)

TABLE = "orders"

# module hearty_hounds.orders.repository
def find_by_payment_intent(db: Client, payment_intent_id: str) -> Optional[Dict[str, Any]]:
    res = (
        db.table(TABLE)
        .select("*")
        .eq("payment_intent_id", payment_intent_id)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def insert_if_absent(db: Client, row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Insertion conditionnelle gardée par l'index unique orders.payment_intent_id.
    Retour: la ligne insérée, ou None si une commande existe déjà pour ce paiement (aucune écriture).
    """
    res = (
        db.table(TABLE)
        .upsert(row, on_conflict="payment_intent_id", ignore_duplicates=True)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def get_order(db: Client, order_id: str) -> Optional[Dict[str, Any]]:
    res = db.table(TABLE).select("*").eq("id", order_id).limit(1).execute()
    rows = res.data or []
    return rows[0] if rows else None

def update_order(db: Client, order_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    res = db.table(TABLE).update(changes).eq("id", order_id).execute()
    rows = res.data or []
    return rows[0] if rows else None

def list_orders(db: Client, customer_email: Optional[str] = None, limit: int = 50) -> List[Dict[str, Any]]:
    """
    Commandes les plus récentes d'abord; filtrées par email client si fourni.
    """
    query = db.table(TABLE).select("*")
    if customer_email:
        query = query.eq("customer_email", customer_email)
    res = query.order("created_at", desc=True).limit(limit).execute()
    return res.data or []
