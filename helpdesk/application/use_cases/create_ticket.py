"""CreateTicketUseCase — validate → allocate → persist → audit → notify."""

from __future__ import annotations

import logging
from typing import Any

from helpdesk.application.ports.notification_port import NotificationDispatcher
from helpdesk.application.ports.ticket_repo import TicketRepository
from helpdesk.application.use_cases.allocate_agent import AssignmentAllocator
from helpdesk.application.use_cases.audit_trail import AuditTrail
from helpdesk.domain.entities.ticket import Equipment, PersonSnapshot, Ticket
from helpdesk.domain.errors import TicketValidationError
from helpdesk.domain.policies.ticket_validation import validate_ticket_draft
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import (
    AuditAction,
    Category,
    Department,
    EquipmentType,
    Priority,
)

logger = logging.getLogger(__name__)


def build_equipment(raw: dict[str, Any] | None) -> Equipment | None:
    if not raw or not raw.get("name") or not raw.get("type"):
        return None
    return Equipment(name=raw["name"].strip(), type=EquipmentType(raw["type"]))


class CreateTicketUseCase:
    """Orchestrates creation of a ticket with round-robin assignment."""

    def __init__(
        self,
        ticket_repo: TicketRepository,
        allocator: AssignmentAllocator,
        audit: AuditTrail,
        notifier: NotificationDispatcher,
    ):
        self._tickets = ticket_repo
        self._allocator = allocator
        self._audit = audit
        self._notifier = notifier

    async def execute(self, actor: Actor, draft: dict[str, Any]) -> Ticket:
        """Create a ticket on behalf of *actor*.

        Pipeline:
        1. Validate the draft (nothing touched on failure)
        2. Allocate an agent (NoAgentsAvailable aborts before any write)
        3. Persist the ticket with requester + assignee snapshots
        4. Audit "created" then "assigned"
        5. Notify requester, assignee and admins

        Raises:
            TicketValidationError: the draft is incomplete or invalid.
            NoAgentsAvailable: nobody to assign the ticket to.
        """
        violations = validate_ticket_draft(draft)
        if violations:
            raise TicketValidationError(violations)

        agent = await self._allocator.allocate()

        ticket = Ticket(
            id=None,
            title=draft["title"].strip(),
            description=draft["description"].strip(),
            department=Department(draft["department"]),
            category=Category(draft["category"]),
            priority=Priority(draft.get("priority") or Priority.MEDIUM.value),
            equipment=build_equipment(draft.get("equipment")),
            requester=PersonSnapshot(
                user_id=actor.id,
                first_name=actor.first_name,
                last_name=actor.last_name,
                email=actor.email,
            ),
            assigned_to=PersonSnapshot.of(agent),
        )
        ticket = await self._tickets.save(ticket)
        logger.info("Ticket %s created by user %s → agent %s", ticket.id, actor.id, agent.id)

        await self._audit.record(ticket.id, AuditAction.CREATED, actor.id)
        await self._audit.record(
            ticket.id, AuditAction.ASSIGNED, actor.id,
            field_changed="assigned_to", new_value=agent.id,
        )

        await self._notifier.ticket_created(ticket)
        return ticket
