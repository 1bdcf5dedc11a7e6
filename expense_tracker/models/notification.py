# models/notification.py
"""SQLAlchemy model for user notifications."""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String
from ..database import Base
from .budget import utc_now

NOTIFICATION_TYPES = ("Info", "Warning", "Alert", "Success")


class Notification(Base):
    """System-generated message for one user (budget alerts, confirmations, summaries)."""
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notification_owner_read", "owner_id", "is_read"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(String(1000), nullable=False)
    type = Column(String(50), nullable=False, default="Info")
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    read_at = Column(DateTime(timezone=True), nullable=True)
