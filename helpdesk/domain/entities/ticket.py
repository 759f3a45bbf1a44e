"""Ticket entity — a support request for medical equipment or services."""

from dataclasses import dataclass
from datetime import datetime

from helpdesk.domain.entities.user import User
from helpdesk.domain.value_objects.enums import (
    Category,
    Department,
    EquipmentType,
    Priority,
    TicketStatus,
)


@dataclass(frozen=True)
class PersonSnapshot:
    """Denormalized copy of a user's identity at the time it was attached."""

    user_id: int
    first_name: str
    last_name: str
    email: str

    @classmethod
    def of(cls, user: User) -> "PersonSnapshot":
        return cls(
            user_id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Equipment:
    name: str
    type: EquipmentType


@dataclass
class Ticket:
    id: int | None
    title: str
    description: str
    department: Department
    category: Category
    requester: PersonSnapshot
    assigned_to: PersonSnapshot | None = None
    priority: Priority = Priority.MEDIUM
    status: TicketStatus = TicketStatus.OPEN
    equipment: Equipment | None = None
    is_pinned: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_requested_by(self, user_id: int) -> bool:
        return self.requester.user_id == user_id

    def is_assigned_to(self, user_id: int) -> bool:
        return self.assigned_to is not None and self.assigned_to.user_id == user_id

    def field_value(self, name: str):
        """Comparable value of a ticket field, as the audit trail stores it.

        Enums collapse to their string value and the assignee to its user id.
        """
        value = getattr(self, name)
        if name == "assigned_to":
            return value.user_id if value is not None else None
        if hasattr(value, "value"):
            return value.value
        return value
