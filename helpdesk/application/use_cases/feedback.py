"""Feedback use cases — rate a resolved ticket, summarize an agent's ratings."""

from __future__ import annotations

import logging

from helpdesk.application.ports.feedback_repo import FeedbackRepository
from helpdesk.application.ports.ticket_repo import TicketRepository
from helpdesk.application.use_cases.audit_trail import AuditTrail
from helpdesk.domain.entities.feedback import Feedback
from helpdesk.domain.errors import FeedbackRejected, NotAuthorized, TicketNotFound
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import AuditAction, FeedbackRating, TicketStatus

logger = logging.getLogger(__name__)


class SubmitFeedbackUseCase:
    def __init__(
        self,
        ticket_repo: TicketRepository,
        feedback_repo: FeedbackRepository,
        audit: AuditTrail,
    ):
        self._tickets = ticket_repo
        self._feedback = feedback_repo
        self._audit = audit

    async def execute(
        self,
        actor: Actor,
        ticket_id: int,
        rating: FeedbackRating,
        comment: str | None = None,
    ) -> Feedback:
        """Record the requester's rating of a resolved ticket.

        Rules:
          1. Only the requester may rate their ticket.
          2. The ticket must be resolved and have an assigned agent.
          3. One feedback per user per ticket.
        """
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise TicketNotFound(ticket_id)
        if not ticket.is_requested_by(actor.id):
            raise NotAuthorized("Only the requester can leave feedback")
        if await self._feedback.get_by_ticket_and_user(ticket_id, actor.id):
            raise FeedbackRejected("Feedback already submitted for this ticket")
        if ticket.status != TicketStatus.RESOLVED:
            raise FeedbackRejected("Ticket has not been resolved")
        if ticket.assigned_to is None:
            raise FeedbackRejected("Ticket has no agent assigned")

        feedback = await self._feedback.save(
            Feedback(
                id=None,
                ticket_id=ticket_id,
                created_by=actor.id,
                agent_id=ticket.assigned_to.user_id,
                rating=rating,
                comment=comment,
            )
        )
        logger.info("Feedback %s (%s) on ticket %s", feedback.id, rating.value, ticket_id)

        await self._audit.record(
            ticket_id, AuditAction.FEEDBACK_SUBMITTED, actor.id, new_value=rating.value
        )
        return feedback


class AgentFeedbackSummaryUseCase:
    def __init__(self, feedback_repo: FeedbackRepository):
        self._feedback = feedback_repo

    async def execute(self, agent_id: int) -> dict[str, int]:
        """Counts per rating; ratings nobody gave are reported as 0."""
        counts = await self._feedback.count_by_rating(agent_id)
        return {r.value: counts.get(r.value, 0) for r in FeedbackRating}
