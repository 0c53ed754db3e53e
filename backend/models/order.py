from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, JSON, func
from sqlalchemy.orm import relationship
from database import Base

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_code = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default="pending", index=True)
    total = Column(Float, nullable=False)
    vat_amount = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Customer contact details
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)

    # Fulfilment
    service_option = Column(String, nullable=False, default="delivery")
    delivery_address = Column(String, nullable=True)
    payment_method = Column(String, nullable=False, default="cash")
    notes = Column(String, nullable=True)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan",
                         order_by="OrderItem.id")
    history = relationship("OrderStatusHistory", back_populates="order", cascade="all, delete-orphan",
                           order_by="OrderStatusHistory.id")

# Snapshot of a cart line taken at checkout
class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id", ondelete="SET NULL"), nullable=True)
    name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False) # Effective unit price (variant overrides base)
    selected_variant = Column(JSON, nullable=True)
    selected_addons = Column(JSON, nullable=True)
    instructions = Column(String, nullable=True)

    order = relationship("Order", back_populates="items")
    menu_item = relationship("MenuItem")

# Append-only audit trail of status changes
class OrderStatusHistory(Base):
    __tablename__ = "order_status_history"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    old_status = Column(String, nullable=True)
    new_status = Column(String, nullable=False)
    changed_at = Column(DateTime(timezone=True), server_default=func.now())
    changed_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    order = relationship("Order", back_populates="history")
