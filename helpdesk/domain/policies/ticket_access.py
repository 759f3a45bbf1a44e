"""TicketAccessPolicy — who may see and change which parts of a ticket."""

from __future__ import annotations

from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.value_objects.actor import Actor

REQUESTER_FIELDS: frozenset[str] = frozenset(
    {"title", "description", "priority", "department", "category", "equipment", "is_pinned"}
)
STAFF_FIELDS: frozenset[str] = REQUESTER_FIELDS | {"status", "assigned_to"}


def can_view(actor: Actor, ticket: Ticket) -> bool:
    return (
        actor.is_admin()
        or ticket.is_requested_by(actor.id)
        or ticket.is_assigned_to(actor.id)
    )


def can_modify(actor: Actor, ticket: Ticket) -> bool:
    return can_view(actor, ticket)


def editable_fields(actor: Actor, ticket: Ticket) -> frozenset[str]:
    """Staff on the ticket (assignee or any admin) also get status and assignment."""
    if actor.is_admin() or ticket.is_assigned_to(actor.id):
        return STAFF_FIELDS
    if ticket.is_requested_by(actor.id):
        return REQUESTER_FIELDS
    return frozenset()
