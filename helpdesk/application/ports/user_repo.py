"""Port interface for user persistence."""

from abc import ABC, abstractmethod

from helpdesk.domain.entities.user import User
from helpdesk.domain.value_objects.enums import Role


class UserRepository(ABC):
    @abstractmethod
    async def save(self, user: User) -> User:
        ...

    @abstractmethod
    async def get_by_id(self, user_id: int) -> User | None:
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        ...

    @abstractmethod
    async def list_agents(self) -> list[User]:
        """All users with the agent role, ascending by id."""
        ...

    @abstractmethod
    async def update(self, user: User) -> User:
        """Persist profile, role and credential changes of an existing user."""
        ...

    @abstractmethod
    async def list_users(self, role: Role | None = None) -> list[User]:
        ...
