import logging
from typing import Any, Dict

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from hearty_hounds.utils.errors import not_found
from . import state as cart_state
from .state import CartItem, CartProduct, CartState

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])

SESSION_KEY = "cart"

class AddItemRequest(BaseModel):
    product: CartProduct
    quantity: int = Field(default=1, ge=1)

class UpdateQuantityRequest(BaseModel):
    quantity: int = Field(ge=1)

def _load(request: Request) -> CartState:
    return cart_state.load_items(request.session.get(SESSION_KEY))

def _save(request: Request, state: CartState) -> Dict[str, Any]:
    # Sauvegarde après chaque changement (cookie de session signé)
    request.session[SESSION_KEY] = cart_state.dump_items(state)
    return state.model_dump(mode="json", by_alias=True)

# module hearty_hounds.cart.views
@router.get("")
def get_cart(request: Request):
    return _load(request).model_dump(mode="json", by_alias=True)

@router.post("/items")
def add_item(payload: AddItemRequest, request: Request):
    """
    Ajoute un produit (une ligne par produit). Déjà présent: panier inchangé, added=False.
    """
    current = _load(request)
    item = CartItem(id=payload.product.id, product=payload.product, quantity=payload.quantity)
    new_state = cart_state.reduce(current, {"type": cart_state.ADD_ITEM, "payload": item})
    added = new_state is not current
    message = f"{payload.product.name} added to cart" if added else f"{payload.product.name} is already in your cart"
    return {"added": added, "message": message, "cart": _save(request, new_state)}

@router.patch("/items/{product_id}")
def update_quantity(product_id: str, payload: UpdateQuantityRequest, request: Request):
    current = _load(request)
    if not current.get_item_quantity(product_id):
        raise not_found("Item not found", f"Product {product_id} is not in the cart")
    new_state = cart_state.reduce(current, {
        "type": cart_state.UPDATE_ITEM,
        "payload": {"id": product_id, "updates": {"quantity": payload.quantity}},
    })
    return {"cart": _save(request, new_state)}

@router.delete("/items/{product_id}")
def remove_item(product_id: str, request: Request):
    new_state = cart_state.reduce(_load(request), {"type": cart_state.REMOVE_ITEM, "payload": product_id})
    return {"cart": _save(request, new_state)}

@router.delete("")
def clear_cart(request: Request):
    return {"cart": _save(request, cart_state.reduce(_load(request), {"type": cart_state.CLEAR_CART}))}

@router.get("/items/{product_id}/quantity")
def get_item_quantity(product_id: str, request: Request):
    return {"id": product_id, "quantity": _load(request).get_item_quantity(product_id)}
