"""Port interface for feedback persistence."""

from abc import ABC, abstractmethod

from helpdesk.domain.entities.feedback import Feedback


class FeedbackRepository(ABC):
    @abstractmethod
    async def save(self, feedback: Feedback) -> Feedback:
        ...

    @abstractmethod
    async def get_by_ticket(self, ticket_id: int) -> Feedback | None:
        ...

    @abstractmethod
    async def get_by_ticket_and_user(self, ticket_id: int, user_id: int) -> Feedback | None:
        ...

    @abstractmethod
    async def count_by_rating(self, agent_id: int) -> dict[str, int]:
        """Rating value → number of feedback entries for the agent."""
        ...
