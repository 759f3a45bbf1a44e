"""DeleteTicketUseCase — remove a ticket, keep its audit history."""

from __future__ import annotations

import logging

from helpdesk.application.ports.notification_port import NotificationDispatcher
from helpdesk.application.ports.ticket_repo import TicketRepository
from helpdesk.application.use_cases.audit_trail import AuditTrail
from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.errors import NotAuthorized, TicketNotFound
from helpdesk.domain.policies.ticket_access import can_modify
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import AuditAction

logger = logging.getLogger(__name__)


class DeleteTicketUseCase:
    def __init__(
        self,
        ticket_repo: TicketRepository,
        audit: AuditTrail,
        notifier: NotificationDispatcher,
    ):
        self._tickets = ticket_repo
        self._audit = audit
        self._notifier = notifier

    async def execute(self, actor: Actor, ticket_id: int) -> Ticket:
        """Delete the ticket and return its last state.

        Audit entries are soft references, so the ticket's history stays
        queryable and gains a final "deleted" entry.
        """
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise TicketNotFound(ticket_id)
        if not can_modify(actor, ticket):
            raise NotAuthorized("Not authorized to delete this ticket")

        await self._tickets.delete(ticket_id)
        logger.info("Ticket %s deleted by user %s", ticket_id, actor.id)

        await self._audit.record(ticket_id, AuditAction.DELETED, actor.id)
        await self._notifier.ticket_deleted(ticket, actor)
        return ticket
