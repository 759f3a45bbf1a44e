"""Feedback endpoints — rate a resolved ticket, per-agent summary."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.adapters.persistence.database import get_session
from helpdesk.adapters.persistence.repositories import SqlFeedbackRepository
from helpdesk.application.use_cases.feedback import (
    AgentFeedbackSummaryUseCase,
    SubmitFeedbackUseCase,
)
from helpdesk.application.use_cases.query_tickets import GetTicketUseCase
from helpdesk.domain.errors import NotAuthorized
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import Role
from helpdesk.infrastructure.api.auth import get_current_actor
from helpdesk.infrastructure.api.dependencies import (
    get_agent_summary_uc,
    get_feedback_repo,
    get_submit_feedback_uc,
    get_ticket_uc,
)
from helpdesk.infrastructure.api.schemas import FeedbackCreate, serialize_feedback

router = APIRouter(tags=["feedback"])


@router.post("/tickets/{ticket_id}/feedback", status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    ticket_id: int,
    body: FeedbackCreate,
    actor: Actor = Depends(get_current_actor),
    uc: SubmitFeedbackUseCase = Depends(get_submit_feedback_uc),
    session: AsyncSession = Depends(get_session),
):
    feedback = await uc.execute(actor, ticket_id, body.rating, body.comment)
    await session.commit()
    return serialize_feedback(feedback)


@router.get("/tickets/{ticket_id}/feedback")
async def get_ticket_feedback(
    ticket_id: int,
    actor: Actor = Depends(get_current_actor),
    tickets: GetTicketUseCase = Depends(get_ticket_uc),
    repo: SqlFeedbackRepository = Depends(get_feedback_repo),
):
    # Raises TicketNotFound for tickets the caller cannot see
    await tickets.execute(actor, ticket_id)
    feedback = await repo.get_by_ticket(ticket_id)
    return {"feedback": serialize_feedback(feedback) if feedback else None}


@router.get("/feedback/agents/{agent_id}/summary")
async def agent_feedback_summary(
    agent_id: int,
    actor: Actor = Depends(get_current_actor),
    uc: AgentFeedbackSummaryUseCase = Depends(get_agent_summary_uc),
):
    """Rating counts for one agent. Agents may only see their own."""
    if actor.role != Role.ADMIN and actor.id != agent_id:
        raise NotAuthorized("Not allowed to view another agent's feedback")
    return {"agent": agent_id, "ratings": await uc.execute(agent_id)}
