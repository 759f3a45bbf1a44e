"""Port interface for ticket persistence."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from helpdesk.domain.entities.ticket import Ticket


@dataclass
class TicketQuery:
    """Search filters; unset fields do not constrain the result."""

    keyword: str | None = None
    status: str | None = None
    priority: str | None = None
    department: str | None = None
    category: str | None = None
    assigned_to: int | None = None
    requester_id: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    offset: int = 0
    limit: int = 10


class TicketRepository(ABC):
    @abstractmethod
    async def save(self, ticket: Ticket) -> Ticket:
        ...

    @abstractmethod
    async def get_by_id(self, ticket_id: int) -> Ticket | None:
        ...

    @abstractmethod
    async def update(self, ticket: Ticket) -> Ticket:
        ...

    @abstractmethod
    async def delete(self, ticket_id: int) -> None:
        ...

    @abstractmethod
    async def search(self, query: TicketQuery) -> tuple[list[Ticket], int]:
        """Return one page of matches (newest first) and the total match count."""
        ...
