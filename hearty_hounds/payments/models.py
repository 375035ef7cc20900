"""
Schémas d'entrée de la feature 'payments' (corps JSON du front, clés camelCase acceptées).
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

class CheckoutItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: Optional[str] = None
    price: float = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    @field_validator("quantity", mode="before")
    def default_quantity(cls, v: Any) -> Any:
        # quantité absente/0 => 1 article
        return v or 1

class SelectedShippingRate(BaseModel):
    id: Optional[str] = None
    display_name: str = "Shipping"
    amount: int = Field(default=0, ge=0)
    currency: Optional[str] = None
    carrier: Optional[str] = None
    service: Optional[str] = None
    estimated_days: Optional[int] = None
    delivery_estimate: Optional[Dict[str, Any]] = None

class CheckoutSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: List[CheckoutItem] = Field(default_factory=list)
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")
    connected_account_id: Optional[str] = Field(default=None, alias="connectedAccountId")
    success_url: Optional[str] = Field(default=None, alias="successUrl")
    cancel_url: Optional[str] = Field(default=None, alias="cancelUrl")
    selected_shipping_rate: Optional[SelectedShippingRate] = Field(default=None, alias="selectedShippingRate")
    metadata: Dict[str, str] = Field(default_factory=dict)
