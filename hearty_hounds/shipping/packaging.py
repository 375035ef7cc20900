"""
Agrégation du panier en un seul colis (logique pure, aucun appel Shippo).
- Les articles sont empilés: longueur/largeur = max, hauteur = somme (hauteur * quantité).
- Poids par défaut 8 oz par article, dimensions par défaut 6x6x2 in.
- Planchers: 6x6x2 in et 0.1 lb, même pour un article de dimensions nulles.
"""
import logging
from typing import Any, Dict, Iterable, Union

from .models import Dimensions, ShippingItem

logger = logging.getLogger(__name__)

DEFAULT_ITEM_WEIGHT_OZ = 8
DEFAULT_DIMENSIONS = Dimensions(length=6, width=6, height=2)
MIN_LENGTH = 6
MIN_WIDTH = 6
MIN_HEIGHT = 2
MIN_WEIGHT_LB = 0.1
OUNCES_PER_POUND = 16

def format_number(value: Union[int, float]) -> str:
    """6.0 -> "6", 0.5 -> "0.5" (format attendu par Shippo et par le front)."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)

def calculate_package_details(items: Iterable[ShippingItem]) -> Dict[str, Any]:
    total_weight_oz = 0.0
    max_length = 0.0
    max_width = 0.0
    total_height = 0.0
    count = 0

    for item in items:
        count += 1
        quantity = item.quantity or 1
        total_weight_oz += (item.weight or DEFAULT_ITEM_WEIGHT_OZ) * quantity
        dims = item.dimensions or DEFAULT_DIMENSIONS
        max_length = max(max_length, dims.length)
        max_width = max(max_width, dims.width)
        total_height += dims.height * quantity

    weight_lb = total_weight_oz / OUNCES_PER_POUND
    package = {
        "length": max(max_length, MIN_LENGTH),
        "width": max(max_width, MIN_WIDTH),
        "height": max(total_height, MIN_HEIGHT),
        "weight": max(weight_lb, MIN_WEIGHT_LB),
        "distance_unit": "in",
        "mass_unit": "lb",
    }
    logger.info(
        "Calculated package details items=%s weight=%s oz dimensions=%s",
        count, total_weight_oz, describe_dimensions(package),
    )
    return package

def describe_dimensions(package: Dict[str, Any]) -> str:
    return "{}x{}x{} {}".format(
        format_number(package["length"]),
        format_number(package["width"]),
        format_number(package["height"]),
        package.get("distance_unit") or "in",
    )

def to_parcel(package: Dict[str, Any]) -> Dict[str, str]:
    """Colis -> parcel Shippo (valeurs numériques sérialisées en chaînes)."""
    return {
        "length": format_number(package["length"]),
        "width": format_number(package["width"]),
        "height": format_number(package["height"]),
        "weight": format_number(package["weight"]),
        "distance_unit": package.get("distance_unit") or "in",
        "mass_unit": package.get("mass_unit") or "lb",
    }
