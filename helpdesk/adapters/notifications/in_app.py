"""In-app notifications for ticket lifecycle events.

Each event fans out to the requester, the assigned agent and the shared
admin channel. Failures are logged and swallowed.
"""

from __future__ import annotations

import logging

from helpdesk.application.ports.notification_port import NotificationDispatcher
from helpdesk.application.ports.notification_repo import NotificationRepository
from helpdesk.domain.entities.notification import Notification
from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import NotificationPriority, NotificationType

logger = logging.getLogger(__name__)


def _ticket_link(ticket: Ticket) -> str:
    return f"/tickets/{ticket.id}"


class InAppNotificationDispatcher(NotificationDispatcher):
    def __init__(self, notification_repo: NotificationRepository):
        self._repo = notification_repo

    async def ticket_created(self, ticket: Ticket) -> None:
        agent = ticket.assigned_to
        agent_name = agent.full_name if agent else "nobody"
        batch = [
            Notification(
                id=None,
                user_id=ticket.requester.user_id,
                title="Ticket Submitted",
                content=(
                    f'Your ticket "{ticket.title}" has been successfully created '
                    "and assigned to an agent."
                ),
                type=NotificationType.TICKET,
                priority=NotificationPriority.LOW,
                link=_ticket_link(ticket),
            ),
            Notification(
                id=None,
                title="New Ticket Created",
                content=(
                    f'A new ticket "{ticket.title}" has been created and assigned '
                    f"to Agent {agent_name}."
                ),
                type=NotificationType.TICKET,
                priority=NotificationPriority.MEDIUM,
                link=_ticket_link(ticket),
                is_admin_notification=True,
            ),
        ]
        if agent is not None:
            batch.append(
                Notification(
                    id=None,
                    user_id=agent.user_id,
                    title="New Ticket Assigned",
                    content=f'A new ticket "{ticket.title}" has been assigned to you.',
                    type=NotificationType.TICKET,
                    priority=NotificationPriority.MEDIUM,
                    link=_ticket_link(ticket),
                )
            )
        await self._send(batch, "created", ticket)

    async def ticket_updated(self, ticket: Ticket, actor: Actor) -> None:
        batch = self._fan_out(
            ticket,
            actor,
            title="Ticket Updated",
            requester_text=f'Your ticket "{ticket.title}" has been updated.',
            agent_text=f'Ticket "{ticket.title}" assigned to you has been updated.',
            admin_text=f'Ticket "{ticket.title}" has been updated by {_who(actor)}.',
            link=_ticket_link(ticket),
        )
        await self._send(batch, "updated", ticket)

    async def ticket_deleted(self, ticket: Ticket, actor: Actor) -> None:
        batch = self._fan_out(
            ticket,
            actor,
            title="Ticket Deleted",
            requester_text=f'Your ticket "{ticket.title}" has been deleted.',
            agent_text=f'Ticket "{ticket.title}" assigned to you has been deleted.',
            admin_text=f'Ticket "{ticket.title}" has been deleted by {_who(actor)}.',
            link="/tickets",
        )
        await self._send(batch, "deleted", ticket)

    def _fan_out(
        self,
        ticket: Ticket,
        actor: Actor,
        title: str,
        requester_text: str,
        agent_text: str,
        admin_text: str,
        link: str,
    ) -> list[Notification]:
        # The actor is never notified about their own change
        batch = []
        if ticket.requester.user_id != actor.id:
            batch.append(
                Notification(
                    id=None,
                    user_id=ticket.requester.user_id,
                    title=title,
                    content=requester_text,
                    type=NotificationType.TICKET,
                    priority=NotificationPriority.LOW,
                    link=link,
                )
            )
        if ticket.assigned_to is not None and ticket.assigned_to.user_id != actor.id:
            batch.append(
                Notification(
                    id=None,
                    user_id=ticket.assigned_to.user_id,
                    title=title,
                    content=agent_text,
                    type=NotificationType.TICKET,
                    priority=NotificationPriority.LOW,
                    link=link,
                )
            )
        if not actor.is_admin():
            batch.append(
                Notification(
                    id=None,
                    title=title,
                    content=admin_text,
                    type=NotificationType.TICKET,
                    priority=NotificationPriority.LOW,
                    link=link,
                    is_admin_notification=True,
                )
            )
        return batch

    async def _send(self, batch: list[Notification], event: str, ticket: Ticket) -> None:
        for notification in batch:
            try:
                await self._repo.save(notification)
            except Exception:
                logger.exception(
                    "Failed to store '%s' notification for ticket %s", event, ticket.id
                )


def _who(actor: Actor) -> str:
    if actor.is_staff():
        return f"{actor.role.value} {actor.full_name}".strip()
    return "the user"
