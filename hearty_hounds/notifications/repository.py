from typing import Any, Dict, Optional
import logging

from supabase import Client

logger = logging.getLogger(__name__)

TABLE = "email_queue"

def enqueue_email(db: Client, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Ajoute un email à la file (consommée par un worker externe: extension, SendGrid, ...).
    record: {type, to, order_id, order_data, status, created_at}
    """
    res = db.table(TABLE).insert(record).execute()
    logger.info("notifications.enqueue_email type=%s to=%s", record.get("type"), record.get("to"))
    return res.data[0] if res.data else None
