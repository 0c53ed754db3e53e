from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Float, JSON, func
from sqlalchemy.orm import relationship
from database import Base

# Represents an anonymous customer's cart, keyed by the client session key
class Cart(Base):
    __tablename__ = "carts" # Table name

    id = Column(Integer, primary_key=True, index=True) # Primary key
    session_key = Column(String, unique=True, index=True, nullable=False) # X-Cart-Session header value
    created_at = Column(DateTime, server_default=func.now()) # Creation timestamp
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # One-to-many relationship with cart lines, kept in display order
    items = relationship("CartItem", back_populates="cart", cascade="all, delete-orphan",
                         order_by="CartItem.position")


# Represents a single cart line (item selection + quantity) within a cart
class CartItem(Base):
    __tablename__ = "cart_items" # Table name

    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(Integer, ForeignKey("carts.id"), index=True, nullable=False) # Foreign key to parent cart
    line_id = Column(String, nullable=False, index=True) # Line identity exposed to the client
    position = Column(Integer, nullable=False, default=0)

    menu_item_id = Column(Integer, ForeignKey("menu_items.id", ondelete="SET NULL"), nullable=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    image_url = Column(String, nullable=True)

    quantity = Column(Integer, nullable=False, default=1)
    unit_price_snapshot = Column(Float, nullable=False) # Effective unit price at the moment of addition
    selected_variant = Column(JSON, nullable=True)
    selected_addons = Column(JSON, nullable=True)
    instructions = Column(String, nullable=True)

    cart = relationship("Cart", back_populates="items") # Relationship back to Cart
