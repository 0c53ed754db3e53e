from sqlalchemy import Boolean, Column, DateTime, Integer, String, func
from database import Base

ADMIN_ROLES = ("admin", "staff")


# Back-office account. Customers never log in; they only hold a cart session key.
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default="admin") # admin | staff
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
