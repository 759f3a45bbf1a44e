"""Human-readable one-liners for audit entries (dashboard activity feed)."""

from helpdesk.domain.entities.audit_entry import AuditEntry
from helpdesk.domain.value_objects.enums import AuditAction

_VERBS: dict[AuditAction, str] = {
    AuditAction.CREATED: "created",
    AuditAction.UPDATED: "updated",
    AuditAction.DELETED: "deleted",
    AuditAction.STATUS_CHANGED: "changed the status of",
    AuditAction.PRIORITY_CHANGED: "changed the priority of",
    AuditAction.ASSIGNED: "assigned",
    AuditAction.COMMENT_ADDED: "commented on",
    AuditAction.ATTACHMENT_ADDED: "added an attachment to",
    AuditAction.FEEDBACK_SUBMITTED: "left feedback on",
}


def short_ticket_ref(ticket_id: int) -> str:
    return str(ticket_id).zfill(5)[-5:]


def describe(entry: AuditEntry, actor_name: str | None = None) -> str:
    """E.g. "Jane Doe changed the priority of ticket #00042 (medium → high)"."""
    who = actor_name or "Someone"
    verb = _VERBS.get(entry.action, "performed an action on")
    text = f"{who} {verb} ticket #{short_ticket_ref(entry.ticket_id)}"
    if entry.action in (AuditAction.STATUS_CHANGED, AuditAction.PRIORITY_CHANGED):
        text += f" ({entry.previous_value} → {entry.new_value})"
    return text
