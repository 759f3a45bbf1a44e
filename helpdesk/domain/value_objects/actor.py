"""Actor value object — the authenticated caller behind a request."""

from dataclasses import dataclass

from helpdesk.domain.value_objects.enums import Role


@dataclass(frozen=True)
class Actor:
    id: int
    role: Role
    first_name: str = ""
    last_name: str = ""
    email: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def is_staff(self) -> bool:
        return self.role in (Role.AGENT, Role.ADMIN)
