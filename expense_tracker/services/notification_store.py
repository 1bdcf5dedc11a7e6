# services/notification_store.py
"""Persistence of user notifications and their read state."""

from typing import List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..exceptions import translate_store_errors


class NotificationStore:
    def __init__(self, db: Session):
        self.db = db

    def create(self, owner_id: int, title: str, message: str, type: str = "Info") -> models.Notification:
        if type not in models.NOTIFICATION_TYPES:
            raise ValueError(f"Unknown notification type: {type}")

        notification = models.Notification(
            owner_id=owner_id,
            title=title,
            message=message,
            type=type,
            is_read=False,
        )
        with translate_store_errors("notification insert"):
            self.db.add(notification)
            self.db.commit()
            self.db.refresh(notification)
        return notification

    def get_by_id(self, notification_id: int) -> Optional[models.Notification]:
        with translate_store_errors("notification lookup"):
            return self.db.query(models.Notification).filter(
                models.Notification.id == notification_id
            ).first()

    def list_for_owner(self, owner_id: int) -> List[models.Notification]:
        """All notifications of a user, newest first."""
        with translate_store_errors("notification listing"):
            return self.db.query(models.Notification).filter(
                models.Notification.owner_id == owner_id
            ).order_by(
                models.Notification.created_at.desc(),
                models.Notification.id.desc(),
            ).all()

    def unread_count(self, owner_id: int) -> int:
        with translate_store_errors("unread count"):
            return self.db.query(models.Notification).filter(
                models.Notification.owner_id == owner_id,
                models.Notification.is_read.is_(False),
            ).count()

    def mark_read(self, notification_id: int) -> bool:
        """Flag a notification as read. read_at keeps the time of the first read."""
        with translate_store_errors("notification update"):
            notification = self.get_by_id(notification_id)
            if notification is None:
                return False
            if not notification.is_read:
                notification.is_read = True
                notification.read_at = models.utc_now()
                self.db.commit()
        return True

    def delete(self, notification_id: int) -> bool:
        with translate_store_errors("notification delete"):
            deleted = self.db.query(models.Notification).filter(
                models.Notification.id == notification_id
            ).delete()
            self.db.commit()
        return deleted > 0
