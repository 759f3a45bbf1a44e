"""AuditDiffPolicy — which ticket field changes end up in the audit trail."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.value_objects.enums import AuditAction

# Field → audit action. Fields absent from this map are never audited.
AUDITED_FIELDS: dict[str, AuditAction] = {
    "status": AuditAction.STATUS_CHANGED,
    "priority": AuditAction.PRIORITY_CHANGED,
    "assigned_to": AuditAction.ASSIGNED,
    "title": AuditAction.UPDATED,
    "description": AuditAction.UPDATED,
}


@dataclass(frozen=True)
class FieldChange:
    field: str
    action: AuditAction
    previous_value: Any
    new_value: Any


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def diff_fields(before: Ticket, changes: dict[str, Any]) -> list[FieldChange]:
    """Compare the pre-update ticket with the requested changes.

    Returns one FieldChange per whitelisted field whose value differs by plain
    inequality, in whitelist order. ``assigned_to`` is compared by agent id.
    """
    diffs = []
    for field, action in AUDITED_FIELDS.items():
        if field not in changes:
            continue
        previous = before.field_value(field)
        new = _plain(changes[field])
        if previous != new:
            diffs.append(
                FieldChange(field=field, action=action, previous_value=previous, new_value=new)
            )
    return diffs
