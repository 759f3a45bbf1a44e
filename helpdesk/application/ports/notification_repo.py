"""Port interface for in-app notification persistence."""

from abc import ABC, abstractmethod

from helpdesk.domain.entities.notification import Notification


class NotificationRepository(ABC):
    @abstractmethod
    async def save(self, notification: Notification) -> Notification:
        ...

    @abstractmethod
    async def list_for_user(self, user_id: int, include_admin: bool = False) -> list[Notification]:
        """Newest first. Admins also see the shared admin-channel notifications."""
        ...

    @abstractmethod
    async def mark_read(self, notification_id: int, user_id: int) -> bool:
        """Return False if no such notification belongs to the user."""
        ...
