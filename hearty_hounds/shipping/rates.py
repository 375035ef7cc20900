"""
Mise en forme des tarifs Shippo pour le front.
- amount en centimes entiers (arrondi half-up), tri croissant stable (ordre Shippo conservé à égalité)
"""
from typing import Any, Dict, List, Optional

from hearty_hounds.utils.money import to_cents

def parse_amount(value: Any) -> Optional[float]:
    """Montant Shippo ("5.50") -> float, None si absent ou illisible."""
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None

def delivery_estimate(days: Optional[int]) -> Optional[Dict[str, Any]]:
    if not days:
        return None
    return {
        "minimum": {"unit": "business_day", "value": days},
        "maximum": {"unit": "business_day", "value": days + 1},
    }

def format_rate(rate: Dict[str, Any], upper_currency: bool = True) -> Dict[str, Any]:
    level = rate.get("servicelevel") or {}
    provider = rate.get("provider") or ""
    service = level.get("name") or ""
    currency = rate.get("currency") or ""
    days = rate.get("estimated_days")
    return {
        "id": rate.get("object_id"),
        "display_name": f"{provider} {service}".strip(),
        "amount": to_cents(rate.get("amount")),
        "currency": currency.upper() if upper_currency else currency,
        "delivery_estimate": delivery_estimate(days),
        "carrier": provider,
        "service": service,
        "estimated_days": days,
        "provider": provider,
        "servicelevel": {
            "name": service,
            "token": level.get("token"),
            "terms": level.get("terms"),
        },
    }

def format_cart_rates(rates: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Variante panier: écarte les tarifs sans montant ou sans devise, devise en majuscules."""
    kept = [r for r in rates if r.get("amount") and r.get("currency") and parse_amount(r.get("amount")) is not None]
    return sorted((format_rate(r) for r in kept), key=lambda r: r["amount"])

def format_generic_rates(rates: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Variante générique: garde les tarifs dont le montant est > 0, devise inchangée."""
    kept = [r for r in rates if (parse_amount(r.get("amount")) or 0) > 0]
    return sorted((format_rate(r, upper_currency=False) for r in kept), key=lambda r: r["amount"])
