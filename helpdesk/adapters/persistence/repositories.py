"""SQLAlchemy repository implementations."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.adapters.persistence.models import (
    AuditEntryModel,
    FeedbackModel,
    NotificationModel,
    RoundRobinStateModel,
    TicketModel,
    UserModel,
)
from helpdesk.application.ports.audit_repo import AuditRepository
from helpdesk.application.ports.feedback_repo import FeedbackRepository
from helpdesk.application.ports.notification_repo import NotificationRepository
from helpdesk.application.ports.round_robin_repo import RoundRobinRepository
from helpdesk.application.ports.ticket_repo import TicketQuery, TicketRepository
from helpdesk.application.ports.user_repo import UserRepository
from helpdesk.domain.entities.audit_entry import AuditEntry
from helpdesk.domain.entities.feedback import Feedback
from helpdesk.domain.entities.notification import Notification
from helpdesk.domain.entities.ticket import Equipment, PersonSnapshot, Ticket
from helpdesk.domain.entities.user import User
from helpdesk.domain.value_objects.enums import (
    AuditAction,
    Category,
    Department,
    EquipmentType,
    FeedbackRating,
    NotificationPriority,
    NotificationType,
    Priority,
    Role,
    TicketStatus,
)

# ─── Mappers ─────────────────────────────────────────────────────────


def _user_to_domain(m: UserModel) -> User:
    return User(
        id=m.id,
        first_name=m.first_name,
        last_name=m.last_name,
        email=m.email,
        role=Role(m.role),
        department=m.department,
        created_at=m.created_at,
        password_hash=m.password_hash,
    )


def _ticket_to_domain(m: TicketModel) -> Ticket:
    equipment = None
    if m.equipment_name and m.equipment_type:
        equipment = Equipment(name=m.equipment_name, type=EquipmentType(m.equipment_type))
    assigned_to = None
    if m.assigned_to_id is not None:
        assigned_to = PersonSnapshot(
            user_id=m.assigned_to_id,
            first_name=m.assigned_first_name or "",
            last_name=m.assigned_last_name or "",
            email=m.assigned_email or "",
        )
    return Ticket(
        id=m.id,
        title=m.title,
        description=m.description,
        department=Department(m.department),
        category=Category(m.category),
        priority=Priority(m.priority),
        status=TicketStatus(m.status),
        equipment=equipment,
        is_pinned=m.is_pinned,
        requester=PersonSnapshot(
            user_id=m.requester_id,
            first_name=m.requester_first_name,
            last_name=m.requester_last_name,
            email=m.requester_email,
        ),
        assigned_to=assigned_to,
        created_at=m.created_at,
        updated_at=m.updated_at,
    )


def _ticket_columns(ticket: Ticket) -> dict:
    """Flatten a Ticket into column values (everything but id and timestamps)."""
    assignee = ticket.assigned_to
    return {
        "title": ticket.title,
        "description": ticket.description,
        "department": ticket.department.value,
        "category": ticket.category.value,
        "priority": ticket.priority.value,
        "status": ticket.status.value,
        "equipment_name": ticket.equipment.name if ticket.equipment else None,
        "equipment_type": ticket.equipment.type.value if ticket.equipment else None,
        "is_pinned": ticket.is_pinned,
        "requester_id": ticket.requester.user_id,
        "requester_first_name": ticket.requester.first_name,
        "requester_last_name": ticket.requester.last_name,
        "requester_email": ticket.requester.email,
        "assigned_to_id": assignee.user_id if assignee else None,
        "assigned_first_name": assignee.first_name if assignee else None,
        "assigned_last_name": assignee.last_name if assignee else None,
        "assigned_email": assignee.email if assignee else None,
    }


def _audit_to_domain(m: AuditEntryModel) -> AuditEntry:
    return AuditEntry(
        id=m.id,
        ticket_id=m.ticket_id,
        action=AuditAction(m.action),
        performed_by=m.performed_by,
        timestamp=m.timestamp,
        field_changed=m.field_changed,
        previous_value=m.previous_value,
        new_value=m.new_value,
    )


def _feedback_to_domain(m: FeedbackModel) -> Feedback:
    return Feedback(
        id=m.id,
        ticket_id=m.ticket_id,
        created_by=m.created_by,
        agent_id=m.agent_id,
        rating=FeedbackRating(m.rating),
        comment=m.comment,
        created_at=m.created_at,
    )


def _notification_to_domain(m: NotificationModel) -> Notification:
    return Notification(
        id=m.id,
        user_id=m.user_id,
        title=m.title,
        content=m.content,
        type=NotificationType(m.type),
        priority=NotificationPriority(m.priority),
        link=m.link,
        is_admin_notification=m.is_admin_notification,
        is_read=m.is_read,
        created_at=m.created_at,
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, user: User) -> User:
        m = UserModel(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email.strip().lower(),
            role=user.role.value,
            department=user.department,
            password_hash=user.password_hash,
        )
        self._s.add(m)
        await self._s.flush()
        await self._s.refresh(m)
        return _user_to_domain(m)

    async def get_by_id(self, user_id: int) -> User | None:
        m = await self._s.get(UserModel, user_id)
        return _user_to_domain(m) if m else None

    async def get_by_email(self, email: str) -> User | None:
        result = await self._s.execute(
            select(UserModel).where(UserModel.email == email.strip().lower())
        )
        m = result.scalar_one_or_none()
        return _user_to_domain(m) if m else None

    async def list_agents(self) -> list[User]:
        return await self.list_users(Role.AGENT)

    async def list_users(self, role: Role | None = None) -> list[User]:
        stmt = select(UserModel).order_by(UserModel.id)
        if role is not None:
            stmt = stmt.where(UserModel.role == role.value)
        result = await self._s.execute(stmt)
        return [_user_to_domain(m) for m in result.scalars()]

    async def update(self, user: User) -> User:
        m = await self._s.get(UserModel, user.id)
        m.first_name = user.first_name
        m.last_name = user.last_name
        m.email = user.email.strip().lower()
        m.role = user.role.value
        m.department = user.department
        m.password_hash = user.password_hash
        await self._s.flush()
        return _user_to_domain(m)


class SqlTicketRepository(TicketRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, ticket: Ticket) -> Ticket:
        m = TicketModel(**_ticket_columns(ticket))
        self._s.add(m)
        await self._s.flush()
        await self._s.refresh(m)
        return _ticket_to_domain(m)

    async def get_by_id(self, ticket_id: int) -> Ticket | None:
        m = await self._s.get(TicketModel, ticket_id)
        return _ticket_to_domain(m) if m else None

    async def update(self, ticket: Ticket) -> Ticket:
        await self._s.execute(
            update(TicketModel)
            .where(TicketModel.id == ticket.id)
            .values(**_ticket_columns(ticket), updated_at=func.now())
            .execution_options(synchronize_session="fetch")
        )
        await self._s.flush()
        m = await self._s.get(TicketModel, ticket.id, populate_existing=True)
        return _ticket_to_domain(m)

    async def delete(self, ticket_id: int) -> None:
        await self._s.execute(delete(TicketModel).where(TicketModel.id == ticket_id))
        await self._s.flush()

    async def search(self, query: TicketQuery) -> tuple[list[Ticket], int]:
        conditions = []
        if query.keyword:
            for word in query.keyword.split():
                pattern = f"%{word}%"
                conditions.append(
                    or_(TicketModel.title.ilike(pattern), TicketModel.description.ilike(pattern))
                )
        if query.status:
            conditions.append(TicketModel.status == query.status)
        if query.priority:
            conditions.append(TicketModel.priority == query.priority)
        if query.department:
            conditions.append(TicketModel.department == query.department)
        if query.category:
            conditions.append(TicketModel.category == query.category)
        if query.assigned_to is not None:
            conditions.append(TicketModel.assigned_to_id == query.assigned_to)
        if query.requester_id is not None:
            conditions.append(TicketModel.requester_id == query.requester_id)
        if query.start_date:
            conditions.append(TicketModel.created_at >= query.start_date)
        if query.end_date:
            conditions.append(TicketModel.created_at <= query.end_date)

        where = and_(*conditions) if conditions else None
        stmt = select(TicketModel)
        count_stmt = select(func.count(TicketModel.id))
        if where is not None:
            stmt = stmt.where(where)
            count_stmt = count_stmt.where(where)

        total = (await self._s.execute(count_stmt)).scalar() or 0
        result = await self._s.execute(
            stmt.order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        return [_ticket_to_domain(m) for m in result.scalars()], total


class SqlAuditRepository(AuditRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def append(self, entry: AuditEntry) -> AuditEntry:
        m = AuditEntryModel(
            ticket_id=entry.ticket_id,
            action=entry.action.value,
            field_changed=entry.field_changed,
            previous_value=entry.previous_value,
            new_value=entry.new_value,
            performed_by=entry.performed_by,
            timestamp=entry.timestamp,
        )
        # SAVEPOINT: a failed append must not poison the ticket's transaction
        async with self._s.begin_nested():
            self._s.add(m)
        return replace(entry, id=m.id)

    async def get_by_ticket(
        self, ticket_id: int, offset: int = 0, limit: int = 20
    ) -> list[AuditEntry]:
        result = await self._s.execute(
            select(AuditEntryModel)
            .where(AuditEntryModel.ticket_id == ticket_id)
            .order_by(AuditEntryModel.timestamp, AuditEntryModel.id)
            .offset(offset)
            .limit(limit)
        )
        return [_audit_to_domain(m) for m in result.scalars()]

    async def count_by_ticket(self, ticket_id: int) -> int:
        result = await self._s.execute(
            select(func.count(AuditEntryModel.id)).where(AuditEntryModel.ticket_id == ticket_id)
        )
        return result.scalar() or 0

    async def get_page(self, offset: int = 0, limit: int = 20) -> list[AuditEntry]:
        result = await self._s.execute(
            select(AuditEntryModel)
            .order_by(AuditEntryModel.timestamp.desc(), AuditEntryModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [_audit_to_domain(m) for m in result.scalars()]

    async def count(self) -> int:
        result = await self._s.execute(select(func.count(AuditEntryModel.id)))
        return result.scalar() or 0


class SqlFeedbackRepository(FeedbackRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, feedback: Feedback) -> Feedback:
        m = FeedbackModel(
            ticket_id=feedback.ticket_id,
            created_by=feedback.created_by,
            agent_id=feedback.agent_id,
            rating=feedback.rating.value,
            comment=feedback.comment,
        )
        self._s.add(m)
        await self._s.flush()
        await self._s.refresh(m)
        return _feedback_to_domain(m)

    async def get_by_ticket(self, ticket_id: int) -> Feedback | None:
        result = await self._s.execute(
            select(FeedbackModel)
            .where(FeedbackModel.ticket_id == ticket_id)
            .order_by(FeedbackModel.id)
            .limit(1)
        )
        m = result.scalar_one_or_none()
        return _feedback_to_domain(m) if m else None

    async def get_by_ticket_and_user(self, ticket_id: int, user_id: int) -> Feedback | None:
        result = await self._s.execute(
            select(FeedbackModel).where(
                FeedbackModel.ticket_id == ticket_id,
                FeedbackModel.created_by == user_id,
            )
        )
        m = result.scalar_one_or_none()
        return _feedback_to_domain(m) if m else None

    async def count_by_rating(self, agent_id: int) -> dict[str, int]:
        rows = (
            await self._s.execute(
                select(FeedbackModel.rating, func.count(FeedbackModel.id))
                .where(FeedbackModel.agent_id == agent_id)
                .group_by(FeedbackModel.rating)
            )
        ).all()
        return {row[0]: row[1] for row in rows}


class SqlNotificationRepository(NotificationRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, notification: Notification) -> Notification:
        m = NotificationModel(
            user_id=notification.user_id,
            title=notification.title,
            content=notification.content,
            type=notification.type.value,
            priority=notification.priority.value,
            link=notification.link,
            is_admin_notification=notification.is_admin_notification,
        )
        async with self._s.begin_nested():
            self._s.add(m)
        notification.id = m.id
        return notification

    async def list_for_user(self, user_id: int, include_admin: bool = False) -> list[Notification]:
        condition = NotificationModel.user_id == user_id
        if include_admin:
            condition = or_(condition, NotificationModel.is_admin_notification.is_(True))
        result = await self._s.execute(
            select(NotificationModel)
            .where(condition)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        return [_notification_to_domain(m) for m in result.scalars()]

    async def mark_read(self, notification_id: int, user_id: int) -> bool:
        result = await self._s.execute(
            update(NotificationModel)
            .where(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
            .values(is_read=True)
        )
        await self._s.flush()
        return result.rowcount > 0


class SqlRoundRobinRepository(RoundRobinRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_counter(self, rr_key: str) -> int:
        result = await self._s.execute(
            select(RoundRobinStateModel).where(
                RoundRobinStateModel.rr_key == rr_key
            )
        )
        m = result.scalar_one_or_none()
        if m is None:
            m = RoundRobinStateModel(rr_key=rr_key, counter=0)
            self._s.add(m)
            await self._s.flush()
        return m.counter

    async def get_and_increment(self, rr_key: str, modulus: int) -> int:
        if modulus <= 0:
            raise ValueError("modulus must be positive")
        result = await self._s.execute(
            select(RoundRobinStateModel)
            .where(RoundRobinStateModel.rr_key == rr_key)
            .with_for_update()
        )
        m = result.scalar_one_or_none()
        if m is None:
            m = RoundRobinStateModel(rr_key=rr_key, counter=1 % modulus)
            self._s.add(m)
            await self._s.flush()
            return 0
        old_value = m.counter
        m.counter = (old_value + 1) % modulus
        await self._s.flush()
        return old_value
