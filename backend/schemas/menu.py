# backend/schemas/menu.py
import uuid
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Variant or add-on attached to a menu item
class PricedOptionSchema(ORMBase):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])
    name: str = Field(min_length=1)
    price: float = Field(ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        return str(v) if v is not None else uuid.uuid4().hex[:8]


def _unique_ids(options: Optional[List[PricedOptionSchema]]) -> Optional[List[PricedOptionSchema]]:
    if options is None:
        return None
    ids = [o.id for o in options]
    if len(ids) != len(set(ids)):
        raise ValueError("Option ids must be unique")
    return options


# Shared attributes for menu items
class MenuItemBase(ORMBase):
    name: str = Field(min_length=1)
    description: Optional[str] = ""
    price: float = Field(ge=0)
    image_url: Optional[str] = None
    category: Optional[str] = None
    popular: bool = False
    in_stock: bool = True
    variants: Optional[List[PricedOptionSchema]] = None
    addons: Optional[List[PricedOptionSchema]] = None

    @field_validator("variants", "addons")
    @classmethod
    def _check_unique(cls, v):
        return _unique_ids(v)


# Schema for creating or fully replacing a menu item
class MenuItemCreate(MenuItemBase):
    pass


# Schema for partial menu item updates
class MenuItemUpdate(ORMBase):
    """All fields optional (PATCH)."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None
    category: Optional[str] = None
    popular: Optional[bool] = None
    in_stock: Optional[bool] = None
    variants: Optional[List[PricedOptionSchema]] = None
    addons: Optional[List[PricedOptionSchema]] = None

    @field_validator("variants", "addons")
    @classmethod
    def _check_unique(cls, v):
        return _unique_ids(v)


class MenuItemOut(MenuItemBase):
    id: int
    created_at: Optional[datetime] = None

    @field_validator("variants", "addons", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return v or []


class StockToggle(BaseModel):
    in_stock: bool


# Categories
class CategoryBase(ORMBase):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1, pattern=r"^[a-z0-9-]+$")
    image_url: Optional[str] = None
    display_order: int = 0


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1, pattern=r"^[a-z0-9-]+$")
    image_url: Optional[str] = None
    display_order: Optional[int] = None


class CategoryOut(CategoryBase):
    id: int


class UploadOut(BaseModel):
    url: str
