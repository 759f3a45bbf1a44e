"""Port interface for ticket-event notification fan-out."""

from abc import ABC, abstractmethod

from helpdesk.domain.entities.ticket import Ticket
from helpdesk.domain.value_objects.actor import Actor


class NotificationDispatcher(ABC):
    """Consumes ticket lifecycle events.

    Implementations must never raise: a failed notification cannot affect
    the ticket operation that produced it.
    """

    @abstractmethod
    async def ticket_created(self, ticket: Ticket) -> None:
        ...

    @abstractmethod
    async def ticket_updated(self, ticket: Ticket, actor: Actor) -> None:
        ...

    @abstractmethod
    async def ticket_deleted(self, ticket: Ticket, actor: Actor) -> None:
        ...
