"""Port interface for the append-only audit log."""

from abc import ABC, abstractmethod

from helpdesk.domain.entities.audit_entry import AuditEntry


class AuditRepository(ABC):
    @abstractmethod
    async def append(self, entry: AuditEntry) -> AuditEntry:
        """Insert one entry. There is deliberately no update or delete."""
        ...

    @abstractmethod
    async def get_by_ticket(
        self, ticket_id: int, offset: int = 0, limit: int = 20
    ) -> list[AuditEntry]:
        """Entries for one ticket, oldest first (timestamp, then insertion order)."""
        ...

    @abstractmethod
    async def count_by_ticket(self, ticket_id: int) -> int:
        ...

    @abstractmethod
    async def get_page(self, offset: int = 0, limit: int = 20) -> list[AuditEntry]:
        """All entries, newest first."""
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    async def get_recent(self, limit: int = 10) -> list[AuditEntry]:
        return await self.get_page(offset=0, limit=limit)
