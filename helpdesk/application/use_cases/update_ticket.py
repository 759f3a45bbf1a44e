"""UpdateTicketUseCase — authorize → diff → apply → persist → audit → notify."""

from __future__ import annotations

import logging
from typing import Any

from helpdesk.application.ports.notification_port import NotificationDispatcher
from helpdesk.application.ports.ticket_repo import TicketRepository
from helpdesk.application.ports.user_repo import UserRepository
from helpdesk.application.use_cases.audit_trail import AuditTrail
from helpdesk.application.use_cases.create_ticket import build_equipment
from helpdesk.domain.entities.ticket import PersonSnapshot, Ticket
from helpdesk.domain.entities.user import User
from helpdesk.domain.errors import NotAuthorized, TicketNotFound, TicketValidationError
from helpdesk.domain.policies.audit_diff import diff_fields
from helpdesk.domain.policies.ticket_access import STAFF_FIELDS, can_modify, editable_fields
from helpdesk.domain.policies.ticket_validation import validate_ticket_changes
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import (
    Category,
    Department,
    Priority,
    TicketStatus,
)

logger = logging.getLogger(__name__)

_ENUM_SETTERS = {
    "status": TicketStatus,
    "priority": Priority,
    "department": Department,
    "category": Category,
}


class UpdateTicketUseCase:
    """Applies a partial update and records one audit entry per audited change.

    Status moves are not checked against a state machine: any authorized
    actor may set any status, and the trail records what happened.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        user_repo: UserRepository,
        audit: AuditTrail,
        notifier: NotificationDispatcher,
    ):
        self._tickets = ticket_repo
        self._users = user_repo
        self._audit = audit
        self._notifier = notifier

    async def execute(self, actor: Actor, ticket_id: int, changes: dict[str, Any]) -> Ticket:
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise TicketNotFound(ticket_id)
        if not can_modify(actor, ticket):
            raise NotAuthorized("Not authorized to modify this ticket")

        unknown = sorted(set(changes) - STAFF_FIELDS)
        if unknown:
            raise TicketValidationError([f"Unknown field: {name}" for name in unknown])
        forbidden = sorted(set(changes) - editable_fields(actor, ticket))
        if forbidden:
            raise NotAuthorized(f"Not allowed to change: {', '.join(forbidden)}")

        current_equipment = (
            {"name": ticket.equipment.name, "type": ticket.equipment.type.value}
            if ticket.equipment else None
        )
        violations = validate_ticket_changes(
            changes, ticket.category.value, current_equipment
        )

        new_agent = None
        if "assigned_to" in changes:
            new_agent = await self._resolve_agent(changes["assigned_to"])
            if new_agent is None:
                violations.append(f"User {changes['assigned_to']} is not an agent")

        if violations:
            raise TicketValidationError(violations)

        changes = {
            k: v.strip() if k in ("title", "description") and isinstance(v, str) else v
            for k, v in changes.items()
        }
        diffs = diff_fields(ticket, changes)
        self._apply(ticket, changes, new_agent)
        ticket = await self._tickets.update(ticket)
        logger.info(
            "Ticket %s updated by user %s (%d audited change(s))",
            ticket.id, actor.id, len(diffs),
        )

        await self._audit.record_changes(ticket.id, diffs, actor.id)
        await self._notifier.ticket_updated(ticket, actor)
        return ticket

    async def _resolve_agent(self, agent_id: Any) -> User | None:
        if not isinstance(agent_id, int):
            return None
        user = await self._users.get_by_id(agent_id)
        return user if user is not None and user.is_agent() else None

    @staticmethod
    def _apply(ticket: Ticket, changes: dict[str, Any], new_agent: User | None) -> None:
        for field, value in changes.items():
            if field in _ENUM_SETTERS:
                setattr(ticket, field, _ENUM_SETTERS[field](value))
            elif field == "assigned_to":
                ticket.assigned_to = PersonSnapshot.of(new_agent)
            elif field == "equipment":
                ticket.equipment = build_equipment(value)
            else:
                setattr(ticket, field, value)
