"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.adapters.notifications.in_app import InAppNotificationDispatcher
from helpdesk.adapters.persistence.database import get_session
from helpdesk.adapters.persistence.repositories import (
    SqlAuditRepository,
    SqlFeedbackRepository,
    SqlNotificationRepository,
    SqlRoundRobinRepository,
    SqlTicketRepository,
    SqlUserRepository,
)
from helpdesk.application.use_cases.allocate_agent import AssignmentAllocator
from helpdesk.application.use_cases.audit_trail import AuditTrail
from helpdesk.application.use_cases.create_ticket import CreateTicketUseCase
from helpdesk.application.use_cases.delete_ticket import DeleteTicketUseCase
from helpdesk.application.use_cases.feedback import (
    AgentFeedbackSummaryUseCase,
    SubmitFeedbackUseCase,
)
from helpdesk.application.use_cases.manage_users import (
    AuthenticateUserUseCase,
    RegisterUserUseCase,
    UpdateUserUseCase,
)
from helpdesk.application.use_cases.query_tickets import (
    GetTicketUseCase,
    SearchTicketsUseCase,
    TicketHistoryUseCase,
)
from helpdesk.application.use_cases.update_ticket import UpdateTicketUseCase
from helpdesk.config import settings
from helpdesk.infrastructure.api.auth import get_password_hash, verify_password


def get_ticket_repo(session: AsyncSession = Depends(get_session)) -> SqlTicketRepository:
    return SqlTicketRepository(session)


def get_user_repo(session: AsyncSession = Depends(get_session)) -> SqlUserRepository:
    return SqlUserRepository(session)


def get_feedback_repo(session: AsyncSession = Depends(get_session)) -> SqlFeedbackRepository:
    return SqlFeedbackRepository(session)


def get_notification_repo(
    session: AsyncSession = Depends(get_session),
) -> SqlNotificationRepository:
    return SqlNotificationRepository(session)


def get_audit_trail(session: AsyncSession = Depends(get_session)) -> AuditTrail:
    return AuditTrail(SqlAuditRepository(session), user_repo=SqlUserRepository(session))


def get_allocator(session: AsyncSession = Depends(get_session)) -> AssignmentAllocator:
    return AssignmentAllocator(
        user_repo=SqlUserRepository(session),
        rr_repo=SqlRoundRobinRepository(session),
        rr_key=settings.agent_rr_key,
    )


def get_notifier(session: AsyncSession = Depends(get_session)) -> InAppNotificationDispatcher:
    return InAppNotificationDispatcher(SqlNotificationRepository(session))


def get_create_ticket_uc(
    session: AsyncSession = Depends(get_session),
) -> CreateTicketUseCase:
    return CreateTicketUseCase(
        ticket_repo=SqlTicketRepository(session),
        allocator=get_allocator(session),
        audit=get_audit_trail(session),
        notifier=get_notifier(session),
    )


def get_update_ticket_uc(
    session: AsyncSession = Depends(get_session),
) -> UpdateTicketUseCase:
    return UpdateTicketUseCase(
        ticket_repo=SqlTicketRepository(session),
        user_repo=SqlUserRepository(session),
        audit=get_audit_trail(session),
        notifier=get_notifier(session),
    )


def get_delete_ticket_uc(
    session: AsyncSession = Depends(get_session),
) -> DeleteTicketUseCase:
    return DeleteTicketUseCase(
        ticket_repo=SqlTicketRepository(session),
        audit=get_audit_trail(session),
        notifier=get_notifier(session),
    )


def get_ticket_uc(session: AsyncSession = Depends(get_session)) -> GetTicketUseCase:
    return GetTicketUseCase(SqlTicketRepository(session))


def get_search_tickets_uc(
    session: AsyncSession = Depends(get_session),
) -> SearchTicketsUseCase:
    return SearchTicketsUseCase(SqlTicketRepository(session))


def get_ticket_history_uc(
    session: AsyncSession = Depends(get_session),
) -> TicketHistoryUseCase:
    return TicketHistoryUseCase(SqlTicketRepository(session), get_audit_trail(session))


def get_submit_feedback_uc(
    session: AsyncSession = Depends(get_session),
) -> SubmitFeedbackUseCase:
    return SubmitFeedbackUseCase(
        ticket_repo=SqlTicketRepository(session),
        feedback_repo=SqlFeedbackRepository(session),
        audit=get_audit_trail(session),
    )


def get_agent_summary_uc(
    session: AsyncSession = Depends(get_session),
) -> AgentFeedbackSummaryUseCase:
    return AgentFeedbackSummaryUseCase(SqlFeedbackRepository(session))


def get_register_user_uc(
    users: SqlUserRepository = Depends(get_user_repo),
) -> RegisterUserUseCase:
    return RegisterUserUseCase(users, hash_password=get_password_hash)


def get_authenticate_uc(
    users: SqlUserRepository = Depends(get_user_repo),
) -> AuthenticateUserUseCase:
    return AuthenticateUserUseCase(users, verify_password=verify_password)


def get_update_user_uc(
    users: SqlUserRepository = Depends(get_user_repo),
) -> UpdateUserUseCase:
    return UpdateUserUseCase(users, hash_password=get_password_hash)
