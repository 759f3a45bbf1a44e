"""Notification entity — an in-app message for a user or the admin channel."""

from dataclasses import dataclass
from datetime import datetime

from helpdesk.domain.value_objects.enums import NotificationPriority, NotificationType


@dataclass
class Notification:
    id: int | None
    title: str
    content: str
    user_id: int | None = None
    type: NotificationType = NotificationType.SYSTEM
    priority: NotificationPriority = NotificationPriority.MEDIUM
    link: str = ""
    is_admin_notification: bool = False
    is_read: bool = False
    created_at: datetime | None = None
