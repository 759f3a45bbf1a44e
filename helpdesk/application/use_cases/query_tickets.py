"""Read-side ticket use cases: fetch, scoped search, audit history."""

from __future__ import annotations

from dataclasses import dataclass, replace

from helpdesk.application.ports.ticket_repo import TicketQuery, TicketRepository
from helpdesk.application.use_cases.audit_trail import AuditPage, AuditTrail
from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.errors import TicketNotFound
from helpdesk.domain.policies.ticket_access import can_view
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import Role


@dataclass
class TicketPage:
    tickets: list[Ticket]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


def scope_query(actor: Actor, query: TicketQuery) -> TicketQuery:
    """Restrict a search to what the actor may see.

    Users see tickets they filed, agents the tickets assigned to them,
    admins everything.
    """
    if actor.role == Role.USER:
        return replace(query, requester_id=actor.id)
    if actor.role == Role.AGENT:
        return replace(query, assigned_to=actor.id)
    return query


class GetTicketUseCase:
    def __init__(self, ticket_repo: TicketRepository):
        self._tickets = ticket_repo

    async def execute(self, actor: Actor, ticket_id: int) -> Ticket:
        ticket = await self._tickets.get_by_id(ticket_id)
        # Hide existence from actors who may not see the ticket
        if ticket is None or not can_view(actor, ticket):
            raise TicketNotFound(ticket_id)
        return ticket


class SearchTicketsUseCase:
    def __init__(self, ticket_repo: TicketRepository):
        self._tickets = ticket_repo

    async def execute(self, actor: Actor, query: TicketQuery) -> TicketPage:
        scoped = scope_query(actor, query)
        tickets, total = await self._tickets.search(scoped)
        page = scoped.offset // scoped.limit + 1 if scoped.limit else 1
        return TicketPage(tickets=tickets, total=total, page=page, limit=scoped.limit)


class TicketHistoryUseCase:
    """Audit history of one ticket, including tickets that no longer exist."""

    def __init__(self, ticket_repo: TicketRepository, audit: AuditTrail):
        self._tickets = ticket_repo
        self._audit = audit

    async def execute(
        self, actor: Actor, ticket_id: int, page: int = 1, limit: int = 20
    ) -> AuditPage:
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            # Only admins may read the history of a deleted ticket
            if not actor.is_admin():
                raise TicketNotFound(ticket_id)
        elif not can_view(actor, ticket):
            raise TicketNotFound(ticket_id)

        history = await self._audit.history(ticket_id, page=page, limit=limit)
        if ticket is None and history.total == 0:
            raise TicketNotFound(ticket_id)
        return history
