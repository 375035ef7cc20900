"""
Schémas d'entrée de la feature 'shipping'.
Les champs d'adresse sont optionnels au niveau du schéma: le service renvoie un 400 qui nomme le champ manquant.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

class Address(BaseModel):
    name: Optional[str] = None
    street1: Optional[str] = None
    street2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

class Dimensions(BaseModel):
    length: float = Field(ge=0)
    width: float = Field(ge=0)
    height: float = Field(ge=0)

class ShippingItem(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    price: float = Field(default=0.0, ge=0)
    quantity: Optional[int] = Field(default=1, ge=1)
    weight: Optional[float] = Field(default=None, ge=0)  # onces
    dimensions: Optional[Dimensions] = None  # pouces

    @field_validator("quantity", mode="before")
    def default_quantity(cls, v: Any) -> Any:
        return v or 1

class Package(BaseModel):
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    distance_unit: Optional[str] = None
    mass_unit: Optional[str] = None

class CartRatesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to_address: Optional[Address] = Field(default=None, alias="toAddress")
    items: List[ShippingItem] = Field(default_factory=list)
    connected_account_id: Optional[str] = Field(default=None, alias="connectedAccountId")

class RatesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_address: Optional[Address] = Field(default=None, alias="fromAddress")
    to_address: Optional[Address] = Field(default=None, alias="toAddress")
    packages: List[Package] = Field(default_factory=list)
    is_async: bool = Field(default=False, alias="async")
    carrier_accounts: Optional[List[str]] = Field(default=None, alias="carrierAccounts")

class ValidateAddressRequest(BaseModel):
    address: Optional[Address] = None
