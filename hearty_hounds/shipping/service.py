"""
Cas d'usage 'shipping': devis Shippo pour un panier, devis générique, validation d'adresse.
- Les validations (400) sont faites avant tout appel Shippo.
- Aucun tarif => 404 "No rates found" (résultat métier, pas une erreur fournisseur).
- ShippoError remonte telle quelle et est traduite en 400 par la vue.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from supabase import Client

from hearty_hounds import config
from hearty_hounds.addresses.service import resolve_origin_address
from hearty_hounds.infra.shippo_client import ShippoClient
from hearty_hounds.utils.errors import bad_request, error_body
from hearty_hounds.utils.money import order_total
from . import packaging
from . import rates as rate_fmt
from .models import Address, CartRatesRequest, Package, RatesRequest

logger = logging.getLogger(__name__)

CART_ADDRESS_FIELDS = ("street1", "city", "state", "zip", "country")
GENERIC_ADDRESS_FIELDS = ("name", "street1", "city", "state", "zip", "country")

# module hearty_hounds.shipping.service
def _require_fields(addresses: List[Address], fields) -> None:
    for field in fields:
        for address in addresses:
            if not getattr(address, field):
                raise bad_request(f"Missing required address field: {field}", error="Invalid address", field=field)

def to_shippo_address(address: Dict[str, Any], default_name: Optional[str] = None) -> Dict[str, Any]:
    return {
        "name": address.get("name") or default_name or "",
        "street1": address.get("street1") or "",
        "street2": address.get("street2") or "",
        "city": address.get("city") or "",
        "state": address.get("state") or "",
        "zip": address.get("zip") or "",
        "country": address.get("country") or "",
        "phone": address.get("phone") or "",
        "email": address.get("email") or "",
    }

def _no_rates() -> HTTPException:
    return HTTPException(status_code=404, detail=error_body("No rates found", "No shipping rates available for this route"))

def _route(address: Dict[str, Any]) -> str:
    return f"{address.get('city')}, {address.get('state')}"

def get_rates_for_cart(req: CartRatesRequest, client: ShippoClient, db: Optional[Client]) -> Dict[str, Any]:
    """
    Devis pour le panier: adresse d'origine = adresse vendeur, un seul colis agrégé.
    """
    if req.to_address is None or not req.items:
        raise bad_request("toAddress and items are required", error="Missing required fields")
    _require_fields([req.to_address], CART_ADDRESS_FIELDS)

    from_address, _ = resolve_origin_address(db)
    to_address = req.to_address.as_dict()
    package = packaging.calculate_package_details(req.items)

    logger.info(
        "Creating shipment for rate calculation from=%s to=%s packages=1 connected_account=%s",
        _route(from_address), _route(to_address), req.connected_account_id,
    )
    shipment = client.create_shipment({
        "address_from": to_shippo_address(from_address),
        "address_to": to_shippo_address(to_address, default_name="Customer"),
        "parcels": [packaging.to_parcel(package)],
        "async": False,
    })

    raw_rates = shipment.get("rates") or []
    if not raw_rates:
        raise _no_rates()
    formatted = rate_fmt.format_cart_rates(raw_rates)

    total = order_total((item.price, item.quantity or 1) for item in req.items)
    qualifies = total >= config.FREE_SHIPPING_THRESHOLD
    logger.info(
        "Shipping rates retrieved rates=%s shipment_id=%s order_total=%s free_shipping=%s",
        len(formatted), shipment.get("object_id"), total, qualifies,
    )
    return {
        "success": True,
        "rates": formatted,
        "qualifies_for_free_shipping": qualifies,
        "free_shipping_threshold": config.FREE_SHIPPING_THRESHOLD,
        "order_total": total,
        "connected_account_id": req.connected_account_id,
        "package_info": {
            "weight": package["weight"],
            "dimensions": packaging.describe_dimensions(package),
        },
        "metadata": {
            "from": _route(from_address),
            "to": _route(to_address),
            "package_count": 1,
            "shipment_id": shipment.get("object_id"),
        },
    }

def _require_package(pkg: Package) -> None:
    if not (pkg.length and pkg.width and pkg.height and pkg.weight):
        raise bad_request(
            "All package dimensions (length, width, height, weight) are required",
            error="Invalid package",
        )

def get_rates(req: RatesRequest, client: ShippoClient) -> Dict[str, Any]:
    """
    Devis générique: origine et colis fournis par l'appelant, pas d'agrégation.
    """
    if req.from_address is None or req.to_address is None or not req.packages:
        raise bad_request("fromAddress, toAddress, and packages are required", error="Missing required fields")
    _require_fields([req.from_address, req.to_address], GENERIC_ADDRESS_FIELDS)
    for pkg in req.packages:
        _require_package(pkg)

    from_address = req.from_address.as_dict()
    to_address = req.to_address.as_dict()
    logger.info(
        "Creating shipment for rate calculation from=%s to=%s packages=%s",
        _route(from_address), _route(to_address), len(req.packages),
    )
    shipment = client.create_shipment({
        "address_from": to_shippo_address(from_address),
        "address_to": to_shippo_address(to_address),
        "parcels": [packaging.to_parcel(pkg.model_dump()) for pkg in req.packages],
        "async": req.is_async,
        "carrier_accounts": req.carrier_accounts or [],
    })

    raw_rates = shipment.get("rates") or []
    if not raw_rates:
        raise _no_rates()
    formatted = rate_fmt.format_generic_rates(raw_rates)
    logger.info("Shipping rates retrieved rates=%s shipment_id=%s", len(formatted), shipment.get("object_id"))
    return {
        "success": True,
        "rates": formatted,
        "shipment_id": shipment.get("object_id"),
        "metadata": {
            "from": _route(from_address),
            "to": _route(to_address),
            "package_count": len(req.packages),
        },
    }

def validate_address(address: Optional[Address], client: ShippoClient) -> Dict[str, Any]:
    if address is None:
        raise bad_request("Address is required", field="address")
    data = address.as_dict()
    validated = client.validate_address({
        "name": data.get("name") or "",
        "street1": data.get("street1") or "",
        "street2": data.get("street2") or "",
        "city": data.get("city") or "",
        "state": data.get("state") or "",
        "zip": data.get("zip") or "",
        "country": data.get("country") or "",
    })
    results = validated.get("validation_results") or {}
    return {
        "success": True,
        "valid": bool(results.get("is_valid")),
        "address": validated,
        "validation_results": validated.get("validation_results"),
    }
