from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

from supabase import Client

logger = logging.getLogger(__name__)

TABLE = "products"

# module hearty_hounds.products.repository
def get_product(db: Client, product_id: str) -> Optional[Dict[str, Any]]:
    res = db.table(TABLE).select("id, name, stock").eq("id", product_id).limit(1).execute()
    rows = res.data or []
    return rows[0] if rows else None

def set_stock(db: Client, product_id: str, stock: int) -> None:
    (
        db.table(TABLE)
        .update({"stock": stock, "updated_at": datetime.now(timezone.utc).isoformat()})
        .eq("id", product_id)
        .execute()
    )
    logger.info("products.repository.set_stock id=%s stock=%s", product_id, stock)
