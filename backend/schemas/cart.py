from pydantic import BaseModel, Field
from typing import List, Optional

from schemas.menu import PricedOptionSchema

# Request schema for adding an item to the cart
class CartAddItem(BaseModel):
    menu_item_id: int
    quantity: int = Field(default=1, ge=1)
    variant_id: Optional[str] = None
    addon_ids: List[str] = Field(default_factory=list)
    instructions: Optional[str] = Field(default="", max_length=500)

# Request schema for updating cart line quantity (0 or less removes the line)
class CartUpdateItem(BaseModel):
    quantity: int

# Response schema for a single cart line
class CartItemOut(BaseModel):
    line_id: str
    menu_item_id: Optional[int] = None
    name: str
    quantity: int
    unit_price: float
    variant: Optional[PricedOptionSchema] = None
    addons: List[PricedOptionSchema] = []
    instructions: str = ""
    image_url: Optional[str] = None
    line_total: float

# Response schema for the entire cart summary
class CartOut(BaseModel):
    items: List[CartItemOut]
    subtotal: float
    vat_amount: float
    delivery_fee: float
    total: float
