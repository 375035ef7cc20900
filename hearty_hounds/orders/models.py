"""
Modèle Order: lignes Supabase en snake_case, JSON API en camelCase (alias générés).
- Montants en unités décimales (dollars), jamais en centimes.
- Horodatages ISO-8601 (UTC).
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

# Transitions autorisées (vers l'avant uniquement); cancelled/refunded sont terminaux
ALLOWED_TRANSITIONS: Dict[OrderStatus, frozenset] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED, OrderStatus.REFUNDED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.REFUNDED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}

def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)

class OrderItem(_CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float
    quantity: int = 1
    image_url: Optional[str] = None
    total: float

class Order(_CamelModel):
    id: str
    customer_id: Optional[str] = None
    customer_email: str = ""
    customer_name: Optional[str] = None
    items: List[OrderItem] = Field(default_factory=list)
    subtotal: float = 0.0
    shipping_cost: float = 0.0
    platform_fee: float = 0.0
    stripe_fee: float = 0.0
    total: float = 0.0
    currency: str = "usd"
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_intent_id: str
    checkout_session_id: str = ""
    connected_account_id: Optional[str] = None
    shipping_details: Optional[Dict[str, Any]] = None
    billing_details: Optional[Dict[str, Any]] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    paid_at: Optional[str] = None
    shipped_at: Optional[str] = None
    delivered_at: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        """Ligne Supabase (colonnes snake_case)."""
        return self.model_dump(mode="json")

    def to_api(self) -> Dict[str, Any]:
        """Représentation JSON renvoyée au front (clés camelCase)."""
        return self.model_dump(mode="json", by_alias=True)

class CreateOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")
    payment_intent_id: Optional[str] = Field(default=None, alias="paymentIntentId")

class StatusUpdateRequest(BaseModel):
    status: OrderStatus
