from datetime import datetime
from typing import Optional

from .budget import ApiModel


class Notification(ApiModel):
    notification_id: int
    user_id: int
    title: str
    message: str
    type: str
    is_read: bool
    created_at: Optional[datetime] = None
    read_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, notification) -> "Notification":
        return cls(
            notification_id=notification.id,
            user_id=notification.owner_id,
            title=notification.title,
            message=notification.message,
            type=notification.type,
            is_read=notification.is_read,
            created_at=notification.created_at,
            read_at=notification.read_at,
        )


class UnreadCount(ApiModel):
    user_id: int
    unread_count: int
