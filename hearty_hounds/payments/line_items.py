"""
Logique panier -> Stripe pure (pas d'appel Stripe, pas de DB).
- Le sous-total est toujours recalculé côté serveur à partir des prix unitaires reçus.
"""
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from hearty_hounds import config
from hearty_hounds.utils.money import to_cents
from .models import CheckoutItem, SelectedShippingRate

logger = logging.getLogger(__name__)

# module hearty_hounds.payments.line_items
def is_valid_image_url(url: Optional[str]) -> bool:
    """URL absolue http(s) avec un hôte; tout le reste est écarté (pas rejeté)."""
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)

def subtotal_cents(items: List[CheckoutItem]) -> int:
    """Σ round(prix * 100) * quantité (centimes)."""
    return sum(to_cents(item.price) * item.quantity for item in items)

def to_line_items(items: List[CheckoutItem], currency: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe (price_data) à partir du panier.
    - description par défaut si absente
    - images: uniquement si l'URL est valide, sinon ignorée avec un warning
    - product_data.metadata.productId pour relier la ligne au produit
    """
    currency = currency or config.DEFAULT_CURRENCY
    line_items: List[Dict[str, Any]] = []
    for item in items:
        images: List[str] = []
        if item.image_url:
            if is_valid_image_url(item.image_url):
                images.append(item.image_url)
            else:
                logger.warning("Invalid image URL filtered url=%s product_id=%s", item.image_url, item.id)
        line_items.append({
            "price_data": {
                "currency": currency,
                "product_data": {
                    "name": item.name,
                    "description": item.description or config.DEFAULT_PRODUCT_DESCRIPTION,
                    "images": images,
                    "metadata": {"productId": item.id},
                },
                "unit_amount": to_cents(item.price),
            },
            "quantity": item.quantity,
        })
    return line_items

def shipping_line_item(rate: SelectedShippingRate, currency: Optional[str] = None) -> Dict[str, Any]:
    if rate.carrier:
        description = f"{rate.carrier} {rate.service or ''}".strip()
    else:
        description = "Shipping and handling"
    return {
        "price_data": {
            "currency": currency or config.DEFAULT_CURRENCY,
            "product_data": {
                "name": f"Shipping - {rate.display_name}",
                "description": description,
            },
            "unit_amount": rate.amount,
        },
        "quantity": 1,
    }
