from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Optional, Literal
from datetime import datetime

from core.order_flow import OrderAction, OrderStatus
from schemas.menu import PricedOptionSchema


# Output schema for an individual order line item
class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    menu_item_id: Optional[int] = None
    name: str
    quantity: int
    price: float
    selected_variant: Optional[PricedOptionSchema] = None
    selected_addons: List[PricedOptionSchema] = []
    instructions: Optional[str] = None
    line_total: float

    @field_validator("selected_addons", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return v or []


class ContactFields(BaseModel):
    customer_name: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)
    service_option: Literal["delivery", "pickup"] = "delivery"
    delivery_address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("customer_name", "customer_phone")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field is required")
        return v

    @model_validator(mode="after")
    def _address_for_delivery(self):
        if self.service_option == "delivery" and not (self.delivery_address or "").strip():
            raise ValueError("Delivery address is required for delivery orders")
        return self


# Input schema for checkout
class CheckoutPayload(ContactFields):
    payment_method: Literal["cash", "card"] = "cash"


# Admin edit of contact, address and notes. Status is never edited here.
class OrderEditPayload(BaseModel):
    customer_name: Optional[str] = Field(None, min_length=1)
    customer_phone: Optional[str] = Field(None, min_length=1)
    service_option: Optional[Literal["delivery", "pickup"]] = None
    delivery_address: Optional[str] = None
    notes: Optional[str] = None


# Output schema representing the full order details
class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_code: str
    status: OrderStatus
    customer_name: str
    customer_phone: str
    service_option: str
    delivery_address: Optional[str] = None
    payment_method: str
    notes: Optional[str] = None
    total: float
    vat_amount: Optional[float] = None
    created_at: Optional[datetime] = None
    items: List[OrderItemOut]
    allowed_actions: List[OrderAction] = []


class CheckoutResponse(BaseModel):
    order: OrderResponse
    message: str
    chat_url: str


# Schema for a status workflow action
class OrderTransitionPayload(BaseModel):
    action: OrderAction
    expected_status: Optional[OrderStatus] = None


class OrderRevertPayload(BaseModel):
    entry_id: Optional[int] = None
    expected_status: Optional[OrderStatus] = None


class HistoryEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    old_status: Optional[str] = None
    new_status: str
    changed_at: Optional[datetime] = None
    revertible: bool = False
