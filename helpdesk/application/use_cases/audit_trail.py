"""AuditTrail — append-only activity log for tickets.

Writes here are fire-and-forget relative to the ticket operation they
describe: a failed append is logged on the ``helpdesk.audit`` channel and
swallowed, and the ticket mutation that triggered it stands.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from helpdesk.application.ports.audit_repo import AuditRepository
from helpdesk.application.ports.user_repo import UserRepository
from helpdesk.domain.entities.audit_entry import AuditEntry
from helpdesk.domain.errors import AuditWriteFailure
from helpdesk.domain.policies.audit_description import describe
from helpdesk.domain.policies.audit_diff import FieldChange
from helpdesk.domain.value_objects.enums import AuditAction

logger = logging.getLogger("helpdesk.audit")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AuditPage:
    entries: list[AuditEntry]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


@dataclass
class DescribedEntry:
    entry: AuditEntry
    description: str
    actor_name: str | None = None


class AuditTrail:
    def __init__(
        self,
        audit_repo: AuditRepository,
        user_repo: UserRepository | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._audit = audit_repo
        self._users = user_repo
        self._clock = clock

    async def record(
        self,
        ticket_id: int,
        action: AuditAction,
        performed_by: int,
        field_changed: str | None = None,
        previous_value: Any = None,
        new_value: Any = None,
    ) -> AuditEntry | None:
        """Append exactly one entry stamped with the server clock.

        Returns the stored entry, or None if the write failed.
        """
        entry = AuditEntry(
            id=None,
            ticket_id=ticket_id,
            action=action,
            performed_by=performed_by,
            timestamp=self._clock(),
            field_changed=field_changed,
            previous_value=previous_value,
            new_value=new_value,
        )
        try:
            return await self._audit.append(entry)
        except Exception as e:
            failure = AuditWriteFailure(
                f"ticket={ticket_id} action={action.value} by={performed_by}: {e}"
            )
            logger.exception("Audit write failed: %s", failure)
            return None

    async def record_changes(
        self, ticket_id: int, changes: list[FieldChange], performed_by: int
    ) -> list[AuditEntry]:
        """One entry per field change; failed appends are skipped."""
        written = []
        for change in changes:
            entry = await self.record(
                ticket_id,
                change.action,
                performed_by,
                field_changed=change.field,
                previous_value=change.previous_value,
                new_value=change.new_value,
            )
            if entry is not None:
                written.append(entry)
        return written

    async def history(self, ticket_id: int, page: int = 1, limit: int = 20) -> AuditPage:
        """Entries for one ticket, oldest first. Works after the ticket is deleted."""
        page = max(page, 1)
        entries = await self._audit.get_by_ticket(
            ticket_id, offset=(page - 1) * limit, limit=limit
        )
        total = await self._audit.count_by_ticket(ticket_id)
        return AuditPage(entries=entries, total=total, page=page, limit=limit)

    async def list_all(self, page: int = 1, limit: int = 20) -> AuditPage:
        page = max(page, 1)
        entries = await self._audit.get_page(offset=(page - 1) * limit, limit=limit)
        total = await self._audit.count()
        return AuditPage(entries=entries, total=total, page=page, limit=limit)

    async def recent(self, limit: int = 10) -> list[DescribedEntry]:
        """Newest entries with display text, for the dashboard activity feed."""
        entries = await self._audit.get_recent(limit)
        return await self.describe_all(entries)

    async def describe_all(self, entries: list[AuditEntry]) -> list[DescribedEntry]:
        names: dict[int, str | None] = {}
        described = []
        for entry in entries:
            if entry.performed_by not in names:
                names[entry.performed_by] = await self._actor_name(entry.performed_by)
            name = names[entry.performed_by]
            described.append(
                DescribedEntry(entry=entry, description=describe(entry, name), actor_name=name)
            )
        return described

    async def _actor_name(self, user_id: int) -> str | None:
        if self._users is None:
            return None
        user = await self._users.get_by_id(user_id)
        return user.full_name if user else None
