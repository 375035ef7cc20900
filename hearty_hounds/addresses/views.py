import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from hearty_hounds.dependencies import get_db, get_optional_db
from hearty_hounds.shipping.models import Address
from hearty_hounds.utils.errors import internal_error
from hearty_hounds.utils.security import require_admin
from . import service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/seller-address", tags=["Seller address"])

@router.get("")
def get_seller_address(db: Optional[Client] = Depends(get_optional_db)):
    """Adresse d'origine des expéditions; is_default=True si l'adresse par défaut est utilisée."""
    address, is_default = service.resolve_origin_address(db)
    return {"success": True, "address": address, "is_default": is_default}

@router.put("")
def put_seller_address(
    payload: Address,
    db: Client = Depends(get_db),
    admin: Dict[str, Any] = Depends(require_admin),
):
    """Remplace l'adresse vendeur (admin)."""
    try:
        address = service.save_seller_address(db, payload.as_dict())
        logger.info("Seller address updated by=%s", admin.get("email"))
        return {"success": True, "address": address}
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Erreur put_seller_address")
        raise internal_error(e)
