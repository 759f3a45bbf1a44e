"""Ticket endpoints — create, read, search, update, delete, history."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.adapters.persistence.database import get_session
from helpdesk.application.ports.ticket_repo import TicketQuery
from helpdesk.application.use_cases.create_ticket import CreateTicketUseCase
from helpdesk.application.use_cases.delete_ticket import DeleteTicketUseCase
from helpdesk.application.use_cases.query_tickets import (
    GetTicketUseCase,
    SearchTicketsUseCase,
    TicketHistoryUseCase,
    TicketPage,
)
from helpdesk.application.use_cases.update_ticket import UpdateTicketUseCase
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import Role
from helpdesk.infrastructure.api.auth import get_current_actor, require_role
from helpdesk.infrastructure.api.dependencies import (
    get_create_ticket_uc,
    get_delete_ticket_uc,
    get_search_tickets_uc,
    get_ticket_history_uc,
    get_ticket_uc,
    get_update_ticket_uc,
)
from helpdesk.infrastructure.api.schemas import (
    TicketCreate,
    TicketUpdate,
    serialize_audit_page,
    serialize_ticket,
)

router = APIRouter(prefix="/tickets", tags=["tickets"])


def _serialize_page(result: TicketPage) -> dict:
    return {
        "total": result.total,
        "page": result.page,
        "limit": result.limit,
        "pages": result.pages,
        "tickets": [serialize_ticket(t) for t in result.tickets],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_ticket(
    body: TicketCreate,
    actor: Actor = Depends(get_current_actor),
    uc: CreateTicketUseCase = Depends(get_create_ticket_uc),
    session: AsyncSession = Depends(get_session),
):
    """Create a ticket and assign it to the next agent in rotation."""
    ticket = await uc.execute(actor, body.model_dump(exclude_none=True))
    await session.commit()
    return serialize_ticket(ticket)


@router.get("")
async def list_tickets(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    actor: Actor = Depends(get_current_actor),
    uc: SearchTicketsUseCase = Depends(get_search_tickets_uc),
):
    """Own tickets for users, assigned tickets for agents, everything for admins."""
    result = await uc.execute(actor, TicketQuery(offset=(page - 1) * limit, limit=limit))
    return _serialize_page(result)


@router.get("/search")
async def search_tickets(
    keyword: str | None = None,
    status_: str | None = Query(None, alias="status"),
    priority: str | None = None,
    department: str | None = None,
    category: str | None = None,
    assigned_to: int | None = None,
    requester_id: int | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    actor: Actor = Depends(require_role(Role.AGENT, Role.ADMIN)),
    uc: SearchTicketsUseCase = Depends(get_search_tickets_uc),
):
    query = TicketQuery(
        keyword=keyword,
        status=status_,
        priority=priority,
        department=department,
        category=category,
        assigned_to=assigned_to,
        requester_id=requester_id,
        start_date=start_date,
        end_date=end_date,
        offset=(page - 1) * limit,
        limit=limit,
    )
    return _serialize_page(await uc.execute(actor, query))


@router.get("/{ticket_id}")
async def get_ticket(
    ticket_id: int,
    actor: Actor = Depends(get_current_actor),
    uc: GetTicketUseCase = Depends(get_ticket_uc),
):
    return serialize_ticket(await uc.execute(actor, ticket_id))


@router.patch("/{ticket_id}")
async def update_ticket(
    ticket_id: int,
    body: TicketUpdate,
    actor: Actor = Depends(get_current_actor),
    uc: UpdateTicketUseCase = Depends(get_update_ticket_uc),
    session: AsyncSession = Depends(get_session),
):
    ticket = await uc.execute(actor, ticket_id, body.model_dump(exclude_unset=True))
    await session.commit()
    return serialize_ticket(ticket)


@router.delete("/{ticket_id}")
async def delete_ticket(
    ticket_id: int,
    actor: Actor = Depends(get_current_actor),
    uc: DeleteTicketUseCase = Depends(get_delete_ticket_uc),
    session: AsyncSession = Depends(get_session),
):
    ticket = await uc.execute(actor, ticket_id)
    await session.commit()
    return {"deleted": True, "id": ticket.id}


@router.get("/{ticket_id}/history")
async def ticket_history(
    ticket_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    actor: Actor = Depends(get_current_actor),
    uc: TicketHistoryUseCase = Depends(get_ticket_history_uc),
):
    """Audit entries for a ticket, oldest first."""
    return serialize_audit_page(await uc.execute(actor, ticket_id, page=page, limit=limit))
