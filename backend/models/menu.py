# backend/models/menu.py
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, JSON, CheckConstraint, func
from database import Base

# Menu category shown as a tab on the customer menu
class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    image_url = Column(String, nullable=True)
    display_order = Column(Integer, nullable=False, default=0)


# Single dish on the menu.
# Variants and add-ons are stored as JSON lists of {id, name, price};
# they are validated by the pydantic schemas before they reach this table.
class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(String, nullable=True)
    price = Column(Float, CheckConstraint("price >= 0"), nullable=False)
    image_url = Column(String, nullable=True)
    category = Column(String, nullable=True, index=True) # Category slug
    popular = Column(Boolean, nullable=False, default=False)
    in_stock = Column(Boolean, nullable=False, default=True)

    variants = Column(JSON, nullable=True)
    addons = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
