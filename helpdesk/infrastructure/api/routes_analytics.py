"""Analytics endpoints — dashboard summary + agent load."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.adapters.persistence.database import get_session
from helpdesk.adapters.persistence.models import (
    AuditEntryModel,
    FeedbackModel,
    RoundRobinStateModel,
    TicketModel,
    UserModel,
)
from helpdesk.application.use_cases.allocate_agent import AssignmentAllocator
from helpdesk.config import settings
from helpdesk.domain.errors import NoAgentsAvailable
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import Role, TicketStatus
from helpdesk.infrastructure.api.auth import require_role
from helpdesk.infrastructure.api.dependencies import get_allocator

router = APIRouter(prefix="/analytics", tags=["analytics"])

_OPEN_STATUSES = [TicketStatus.OPEN.value, TicketStatus.PENDING.value, TicketStatus.IN_PROGRESS.value]


async def _count_by(session: AsyncSession, column) -> dict[str, int]:
    rows = (
        await session.execute(select(column, func.count(TicketModel.id)).group_by(column))
    ).all()
    return {row[0]: row[1] for row in rows}


@router.get("/summary")
async def analytics_summary(
    actor: Actor = Depends(require_role(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
):
    """Aggregate stats for the dashboard."""
    total_tickets = (
        await session.execute(select(func.count(TicketModel.id)))
    ).scalar() or 0

    unassigned = (
        await session.execute(
            select(func.count(TicketModel.id)).where(TicketModel.assigned_to_id.is_(None))
        )
    ).scalar() or 0

    audit_entries = (
        await session.execute(select(func.count(AuditEntryModel.id)))
    ).scalar() or 0

    rating_rows = (
        await session.execute(
            select(FeedbackModel.rating, func.count(FeedbackModel.id)).group_by(
                FeedbackModel.rating
            )
        )
    ).all()

    rr_counter = (
        await session.execute(
            select(RoundRobinStateModel.counter).where(
                RoundRobinStateModel.rr_key == settings.agent_rr_key
            )
        )
    ).scalar()

    return {
        "total_tickets": total_tickets,
        "unassigned": unassigned,
        "by_status": await _count_by(session, TicketModel.status),
        "by_priority": await _count_by(session, TicketModel.priority),
        "by_department": await _count_by(session, TicketModel.department),
        "by_category": await _count_by(session, TicketModel.category),
        "feedback": {row[0]: row[1] for row in rating_rows},
        "audit_entries": audit_entries,
        "rotation_counter": rr_counter or 0,
    }


@router.get("/agents")
async def agent_load(
    actor: Actor = Depends(require_role(Role.ADMIN)),
    session: AsyncSession = Depends(get_session),
    allocator: AssignmentAllocator = Depends(get_allocator),
):
    """Ticket load per agent, in rotation order, and who gets the next ticket."""
    open_count = func.count(TicketModel.id).filter(TicketModel.status.in_(_OPEN_STATUSES))
    result = await session.execute(
        select(
            UserModel.id,
            UserModel.first_name,
            UserModel.last_name,
            UserModel.email,
            func.count(TicketModel.id).label("total"),
            open_count.label("open"),
        )
        .outerjoin(TicketModel, TicketModel.assigned_to_id == UserModel.id)
        .where(UserModel.role == Role.AGENT.value)
        .group_by(UserModel.id, UserModel.first_name, UserModel.last_name, UserModel.email)
        .order_by(UserModel.id)
    )
    agents = result.all()
    try:
        next_agent = (await allocator.peek()).id
    except NoAgentsAvailable:
        next_agent = None

    return {
        "total_agents": len(agents),
        "next_agent": next_agent,
        "agents": [
            {
                "id": a.id,
                "name": f"{a.first_name} {a.last_name}".strip(),
                "email": a.email,
                "total_tickets": a.total,
                "open_tickets": a.open,
            }
            for a in agents
        ],
    }
