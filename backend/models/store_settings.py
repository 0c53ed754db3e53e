from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, JSON, func
from database import Base


# Restaurant-wide settings. The table holds a single row.
class StoreSettings(Base):
    __tablename__ = "store_settings"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_name = Column(String, nullable=False, default="Restaurant")
    business_phone = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)
    webhook_url = Column(String, nullable=True)

    is_open = Column(Boolean, nullable=False, default=True)
    opening_time = Column(String, nullable=True) # HH:MM, superseded by schedule
    closing_time = Column(String, nullable=True)
    schedule = Column(JSON, nullable=True) # {"monday": {"isOpen", "open", "close"}, ...}
    closed_dates = Column(JSON, nullable=True) # [{"date", "reason"}]

    is_delivery_enabled = Column(Boolean, nullable=False, default=True)
    is_pickup_enabled = Column(Boolean, nullable=False, default=True)
    vat_enabled = Column(Boolean, nullable=False, default=False)
    vat_percentage = Column(Float, nullable=False, default=0.0)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
