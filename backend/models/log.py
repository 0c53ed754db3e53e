from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, JSON, func
from database import Base


# Audit trail of admin actions, logins and placed orders (see utils.audit.write_log)
class Log(Base):
    __tablename__ = "logs"
    __table_args__ = (
        Index("ix_logs_resource_ts", "resource", "ts"),
    )

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Null for anonymous customers (checkout) and failed logins
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    action = Column(String(50), index=True) # e.g. ORDER_STATUS_CHANGE
    resource = Column(String(50), index=True) # orders, menu, settings, auth ...
    status = Column(String(20), index=True) # SUCCESS | FAIL
    ip = Column(String(64), nullable=True)
    meta = Column(JSON, nullable=True)
