"""AuditEntry — one immutable fact about something that happened to a ticket."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from helpdesk.domain.value_objects.enums import AuditAction


@dataclass(frozen=True)
class AuditEntry:
    id: int | None
    ticket_id: int
    action: AuditAction
    performed_by: int
    timestamp: datetime
    field_changed: str | None = None
    previous_value: Any = None
    new_value: Any = None
