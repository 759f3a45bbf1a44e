"""Notification endpoints — inbox and read receipts."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.adapters.persistence.database import get_session
from helpdesk.adapters.persistence.repositories import SqlNotificationRepository
from helpdesk.domain.errors import NotFound
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.infrastructure.api.auth import get_current_actor
from helpdesk.infrastructure.api.dependencies import get_notification_repo
from helpdesk.infrastructure.api.schemas import serialize_notification

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
async def list_notifications(
    actor: Actor = Depends(get_current_actor),
    repo: SqlNotificationRepository = Depends(get_notification_repo),
):
    """The caller's notifications, newest first; admins also get the admin channel."""
    items = await repo.list_for_user(actor.id, include_admin=actor.is_admin())
    return {
        "unread": sum(1 for n in items if not n.is_read),
        "notifications": [serialize_notification(n) for n in items],
    }


@router.post("/{notification_id}/read")
async def mark_notification_read(
    notification_id: int,
    actor: Actor = Depends(get_current_actor),
    repo: SqlNotificationRepository = Depends(get_notification_repo),
    session: AsyncSession = Depends(get_session),
):
    if not await repo.mark_read(notification_id, actor.id):
        raise NotFound(f"Notification {notification_id} not found")
    await session.commit()
    return {"id": notification_id, "is_read": True}
