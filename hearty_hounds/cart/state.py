"""
État panier (réducteur pur, pas de DB ni de Stripe).
- Une ligne par produit: ADD_ITEM sur un produit déjà présent ne change rien.
- itemCount = nombre de lignes (pas la somme des quantités), total = Σ prix * quantité.
- Indicatif seulement: le checkout recalcule les montants côté serveur.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from hearty_hounds.utils.money import order_total

logger = logging.getLogger(__name__)

ADD_ITEM = "ADD_ITEM"
REMOVE_ITEM = "REMOVE_ITEM"
UPDATE_ITEM = "UPDATE_ITEM"
CLEAR_CART = "CLEAR_CART"
LOAD_CART = "LOAD_CART"

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class CartProduct(_CamelModel):
    id: str
    name: str
    price: float
    description: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    weight: Optional[float] = None
    dimensions: Optional[Dict[str, float]] = None

class CartItem(_CamelModel):
    id: str
    product: CartProduct
    quantity: int = 1
    added_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class CartState(_CamelModel):
    items: List[CartItem] = Field(default_factory=list)
    item_count: int = 0
    total: float = 0.0
    is_loading: bool = False

    def get_item_quantity(self, product_id: str) -> int:
        for item in self.items:
            if item.id == product_id:
                return item.quantity
        return 0

def _with_items(items: List[CartItem]) -> CartState:
    total = order_total((item.product.price, item.quantity) for item in items)
    return CartState(items=items, item_count=len(items), total=total, is_loading=False)

def reduce(state: CartState, action: Dict[str, Any]) -> CartState:
    """
    action: {"type": ADD_ITEM|REMOVE_ITEM|UPDATE_ITEM|CLEAR_CART|LOAD_CART, "payload": ...}
    - ADD_ITEM: payload CartItem
    - REMOVE_ITEM: payload id produit
    - UPDATE_ITEM: payload {"id", "updates": {...}}
    - LOAD_CART: payload liste de CartItem
    Action inconnue: état inchangé.
    """
    kind = action.get("type")
    payload = action.get("payload")

    if kind == ADD_ITEM:
        if any(item.id == payload.id for item in state.items):
            return state
        return _with_items([*state.items, payload])

    if kind == REMOVE_ITEM:
        return _with_items([item for item in state.items if item.id != payload])

    if kind == UPDATE_ITEM:
        target = payload.get("id")
        updates = payload.get("updates") or {}
        return _with_items([
            item.model_copy(update=updates) if item.id == target else item
            for item in state.items
        ])

    if kind == CLEAR_CART:
        return CartState()

    if kind == LOAD_CART:
        return _with_items(list(payload or []))

    return state

def dump_items(state: CartState) -> List[Dict[str, Any]]:
    """
    Forme compacte pour le cookie de session (limite navigateur ~4 Ko):
    {id, name, price, image, quantity, addedAt} par ligne, une seule image, pas de description.
    """
    return [
        {
            "id": item.id,
            "name": item.product.name,
            "price": item.product.price,
            "image": item.product.images[0] if item.product.images else None,
            "quantity": item.quantity,
            "addedAt": item.added_at.isoformat(),
        }
        for item in state.items
    ]

def _load_item(entry: Dict[str, Any]) -> CartItem:
    product = CartProduct(
        id=entry["id"],
        name=entry["name"],
        price=entry["price"],
        images=[entry["image"]] if entry.get("image") else [],
    )
    fields: Dict[str, Any] = {"id": entry["id"], "product": product, "quantity": entry.get("quantity") or 1}
    if entry.get("addedAt"):
        fields["added_at"] = entry["addedAt"]
    return CartItem.model_validate(fields)

def load_items(raw: Any) -> CartState:
    """
    Recharge un panier sauvegardé; un contenu illisible est loggé et ignoré (panier vide).
    """
    if not raw:
        return CartState()
    try:
        items = [_load_item(entry) for entry in raw]
    except (ValidationError, TypeError, KeyError) as e:
        logger.error("Error loading saved cart: %s", e)
        return CartState()
    return reduce(CartState(), {"type": LOAD_CART, "payload": items})
