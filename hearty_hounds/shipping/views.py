import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from hearty_hounds.dependencies import get_optional_db, get_shipping_client
from hearty_hounds.infra.shippo_client import ShippoClient, ShippoError
from hearty_hounds.utils.errors import error_body, internal_error
from hearty_hounds.utils.rate_limit import optional_rate_limit
from . import service
from .models import CartRatesRequest, RatesRequest, ValidateAddressRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/shipping", tags=["Shipping API"])

def _shippo_http_error(e: ShippoError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail=error_body("Shippo API error", e.detail or "Unknown Shippo error", type="shippo_error"),
    )

# module hearty_hounds.shipping.views
@router.post("/cart-rates", dependencies=[Depends(optional_rate_limit(times=30, seconds=60))])
def get_cart_rates(
    payload: CartRatesRequest,
    client: ShippoClient = Depends(get_shipping_client),
    db: Optional[Client] = Depends(get_optional_db),
):
    """
    Tarifs de livraison pour le panier (origine = adresse vendeur).
    - Entrée JSON: {toAddress, items[], connectedAccountId?}
    - Erreurs: 400 validation/Shippo, 404 aucun tarif, 500 sinon
    """
    try:
        return service.get_rates_for_cart(payload, client, db)
    except HTTPException:
        raise
    except ShippoError as e:
        raise _shippo_http_error(e)
    except Exception as e:
        logger.exception("Erreur get_cart_rates")
        raise internal_error(e)

@router.post("/rates", dependencies=[Depends(optional_rate_limit(times=30, seconds=60))])
def get_rates(payload: RatesRequest, client: ShippoClient = Depends(get_shipping_client)):
    """
    Tarifs pour une origine et des colis explicites.
    - Entrée JSON: {fromAddress, toAddress, packages[], async?, carrierAccounts?}
    """
    try:
        return service.get_rates(payload, client)
    except HTTPException:
        raise
    except ShippoError as e:
        raise _shippo_http_error(e)
    except Exception as e:
        logger.exception("Erreur get_rates")
        raise internal_error(e)

@router.post("/validate-address", dependencies=[Depends(optional_rate_limit(times=30, seconds=60))])
def validate_address(payload: ValidateAddressRequest, client: ShippoClient = Depends(get_shipping_client)):
    """
    Validation d'adresse par Shippo. Toute erreur fournisseur => 500.
    """
    try:
        return service.validate_address(payload.address, client)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Erreur validate_address")
        raise internal_error(e)
