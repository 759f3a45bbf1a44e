"""User entity — anyone who files, works on, or administers tickets."""

from dataclasses import dataclass, field
from datetime import datetime

from helpdesk.domain.value_objects.enums import Role


@dataclass
class User:
    id: int | None
    first_name: str
    last_name: str
    email: str
    role: Role = Role.USER
    department: str | None = None
    created_at: datetime | None = None
    password_hash: str | None = field(default=None, repr=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def is_agent(self) -> bool:
        return self.role == Role.AGENT

    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
