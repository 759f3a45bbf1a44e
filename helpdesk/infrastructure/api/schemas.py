"""Request bodies and response serializers for the HTTP API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from helpdesk.application.use_cases.audit_trail import AuditPage, DescribedEntry
from helpdesk.domain.entities.audit_entry import AuditEntry
from helpdesk.domain.entities.feedback import Feedback
from helpdesk.domain.entities.notification import Notification
from helpdesk.domain.entities.ticket import PersonSnapshot, Ticket
from helpdesk.domain.entities.user import User
from helpdesk.domain.value_objects.enums import FeedbackRating, Role

# ─── Requests ────────────────────────────────────────────────────────


class EquipmentIn(BaseModel):
    name: str | None = None
    type: str | None = None


class TicketCreate(BaseModel):
    """Loosely typed: field rules are enforced by ticket validation, which
    reports every violation at once."""

    title: str | None = None
    description: str | None = None
    department: str | None = None
    category: str | None = None
    priority: str | None = None
    equipment: EquipmentIn | None = None


class TicketUpdate(BaseModel):
    # Unknown fields pass through so the update can reject them by name
    model_config = ConfigDict(extra="allow")

    title: str | None = None
    description: str | None = None
    department: str | None = None
    category: str | None = None
    priority: str | None = None
    status: str | None = None
    equipment: EquipmentIn | None = None
    is_pinned: bool | None = None
    assigned_to: int | None = None


class FeedbackCreate(BaseModel):
    rating: FeedbackRating
    comment: str | None = Field(default=None, max_length=2000)


class UserRegister(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8, description="At least 8 characters")
    department: str | None = Field(default=None, max_length=100)


class UserCreate(UserRegister):
    role: Role = Role.USER


class UserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(
        default=None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$"
    )
    password: str | None = Field(default=None, min_length=8)
    department: str | None = Field(default=None, max_length=100)
    role: Role | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


# ─── Responses ───────────────────────────────────────────────────────


class AuditEntryOut(BaseModel):
    """Wire shape of an audit entry: camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int | None
    ticket: int
    action: str
    field_changed: str | None = None
    previous_value: Any = None
    new_value: Any = None
    performed_by: int
    timestamp: datetime

    @classmethod
    def of(cls, entry: AuditEntry) -> "AuditEntryOut":
        return cls(
            id=entry.id,
            ticket=entry.ticket_id,
            action=entry.action.value,
            field_changed=entry.field_changed,
            previous_value=entry.previous_value,
            new_value=entry.new_value,
            performed_by=entry.performed_by,
            timestamp=entry.timestamp,
        )


def serialize_audit_entry(entry: AuditEntry) -> dict:
    return AuditEntryOut.of(entry).model_dump(by_alias=True, mode="json")


def serialize_described(item: DescribedEntry) -> dict:
    data = serialize_audit_entry(item.entry)
    data["description"] = item.description
    data["performedByName"] = item.actor_name
    return data


def serialize_audit_page(page: AuditPage) -> dict:
    return {
        "total": page.total,
        "page": page.page,
        "limit": page.limit,
        "pages": page.pages,
        "entries": [serialize_audit_entry(e) for e in page.entries],
    }


def _person(p: PersonSnapshot | None) -> dict | None:
    if p is None:
        return None
    return {
        "id": p.user_id,
        "first_name": p.first_name,
        "last_name": p.last_name,
        "email": p.email,
    }


def serialize_ticket(t: Ticket) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "description": t.description,
        "department": t.department.value,
        "category": t.category.value,
        "priority": t.priority.value,
        "status": t.status.value,
        "equipment": (
            {"name": t.equipment.name, "type": t.equipment.type.value} if t.equipment else None
        ),
        "is_pinned": t.is_pinned,
        "requester": _person(t.requester),
        "assigned_to": _person(t.assigned_to),
        "created_at": t.created_at.isoformat() if t.created_at else None,
        "updated_at": t.updated_at.isoformat() if t.updated_at else None,
    }


def serialize_feedback(f: Feedback) -> dict:
    return {
        "id": f.id,
        "ticket": f.ticket_id,
        "created_by": f.created_by,
        "agent": f.agent_id,
        "rating": f.rating.value,
        "comment": f.comment,
        "created_at": f.created_at.isoformat() if f.created_at else None,
    }


def serialize_notification(n: Notification) -> dict:
    return {
        "id": n.id,
        "title": n.title,
        "content": n.content,
        "type": n.type.value,
        "priority": n.priority.value,
        "link": n.link,
        "is_admin_notification": n.is_admin_notification,
        "is_read": n.is_read,
        "created_at": n.created_at.isoformat() if n.created_at else None,
    }


def serialize_user(u: User) -> dict:
    return {
        "id": u.id,
        "first_name": u.first_name,
        "last_name": u.last_name,
        "email": u.email,
        "role": u.role.value,
        "department": u.department,
        "created_at": u.created_at.isoformat() if u.created_at else None,
    }
