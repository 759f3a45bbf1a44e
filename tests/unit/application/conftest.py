"""In-memory fakes for use-case tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from helpdesk.application.ports.audit_repo import AuditRepository
from helpdesk.application.ports.feedback_repo import FeedbackRepository
from helpdesk.application.ports.notification_port import NotificationDispatcher
from helpdesk.application.ports.round_robin_repo import RoundRobinRepository
from helpdesk.application.ports.ticket_repo import TicketRepository
from helpdesk.application.ports.user_repo import UserRepository
from helpdesk.application.use_cases.allocate_agent import AssignmentAllocator
from helpdesk.application.use_cases.audit_trail import AuditTrail
from helpdesk.application.use_cases.create_ticket import CreateTicketUseCase
from helpdesk.application.use_cases.delete_ticket import DeleteTicketUseCase
from helpdesk.application.use_cases.update_ticket import UpdateTicketUseCase
from helpdesk.domain.entities.user import User
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import Role

# ─── In-memory fakes ────────────────────────────────────────────────


class FakeUserRepo(UserRepository):
    def __init__(self, users=()):
        self.users: dict[int, User] = {u.id: u for u in users}

    async def save(self, user):
        user.id = max(self.users, default=0) + 1
        self.users[user.id] = user
        return user

    async def get_by_id(self, user_id):
        return self.users.get(user_id)

    async def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    async def list_agents(self):
        return await self.list_users(Role.AGENT)

    async def list_users(self, role=None):
        return [u for u in self.users.values() if role is None or u.role == role]

    async def update(self, user):
        self.users[user.id] = user
        return user


class FakeRoundRobinRepo(RoundRobinRepository):
    def __init__(self, counter: int = 0):
        self.counters: dict[str, int] = {}
        self.initial = counter
        self.increments = 0

    async def get_counter(self, rr_key):
        return self.counters.setdefault(rr_key, self.initial)

    async def get_and_increment(self, rr_key, modulus):
        old = self.counters.setdefault(rr_key, self.initial)
        self.counters[rr_key] = (old + 1) % modulus
        self.increments += 1
        return old


class FakeTicketRepo(TicketRepository):
    def __init__(self):
        self.tickets = {}
        self._next_id = 1

    async def save(self, ticket):
        ticket.id = self._next_id
        self._next_id += 1
        ticket.created_at = ticket.updated_at = datetime.now(timezone.utc)
        self.tickets[ticket.id] = replace(ticket)
        return ticket

    async def get_by_id(self, ticket_id):
        stored = self.tickets.get(ticket_id)
        return replace(stored) if stored else None

    async def update(self, ticket):
        ticket.updated_at = datetime.now(timezone.utc)
        self.tickets[ticket.id] = replace(ticket)
        return ticket

    async def delete(self, ticket_id):
        self.tickets.pop(ticket_id, None)

    async def search(self, query):
        found = list(self.tickets.values())
        if query.requester_id is not None:
            found = [t for t in found if t.requester.user_id == query.requester_id]
        if query.assigned_to is not None:
            found = [t for t in found if t.is_assigned_to(query.assigned_to)]
        if query.status:
            found = [t for t in found if t.status.value == query.status]
        if query.keyword:
            kw = query.keyword.lower()
            found = [
                t for t in found
                if kw in t.title.lower() or kw in t.description.lower()
            ]
        found.sort(key=lambda t: t.id, reverse=True)
        return found[query.offset:query.offset + query.limit], len(found)


class FakeAuditRepo(AuditRepository):
    def __init__(self):
        self.entries = []
        self.fail = False

    async def append(self, entry):
        if self.fail:
            raise RuntimeError("audit store unavailable")
        stored = replace(entry, id=len(self.entries) + 1)
        self.entries.append(stored)
        return stored

    def _ordered(self):
        return sorted(self.entries, key=lambda e: (e.timestamp, e.id))

    async def get_by_ticket(self, ticket_id, offset=0, limit=20):
        rows = [e for e in self._ordered() if e.ticket_id == ticket_id]
        return rows[offset:offset + limit]

    async def count_by_ticket(self, ticket_id):
        return sum(1 for e in self.entries if e.ticket_id == ticket_id)

    async def get_page(self, offset=0, limit=20):
        return list(reversed(self._ordered()))[offset:offset + limit]

    async def count(self):
        return len(self.entries)


class FakeFeedbackRepo(FeedbackRepository):
    def __init__(self):
        self.items = []

    async def save(self, feedback):
        feedback.id = len(self.items) + 1
        self.items.append(feedback)
        return feedback

    async def get_by_ticket(self, ticket_id):
        return next((f for f in self.items if f.ticket_id == ticket_id), None)

    async def get_by_ticket_and_user(self, ticket_id, user_id):
        return next(
            (f for f in self.items if f.ticket_id == ticket_id and f.created_by == user_id),
            None,
        )

    async def count_by_rating(self, agent_id):
        counts = {}
        for f in self.items:
            if f.agent_id == agent_id:
                counts[f.rating.value] = counts.get(f.rating.value, 0) + 1
        return counts


class FakeNotifier(NotificationDispatcher):
    def __init__(self):
        self.events = []

    async def ticket_created(self, ticket):
        self.events.append(("created", ticket.id))

    async def ticket_updated(self, ticket, actor):
        self.events.append(("updated", ticket.id))

    async def ticket_deleted(self, ticket, actor):
        self.events.append(("deleted", ticket.id))


class TickingClock:
    """Strictly increasing timestamps, one second apart."""

    def __init__(self):
        self._now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self._now += timedelta(seconds=1)
        return self._now


# ─── People ──────────────────────────────────────────────────────────


def make_user(uid: int, role: Role, first: str = "", last: str = "") -> User:
    return User(
        id=uid,
        first_name=first or f"First{uid}",
        last_name=last or f"Last{uid}",
        email=f"u{uid}@example.com",
        role=role,
    )


def as_actor(user: User) -> Actor:
    return Actor(
        id=user.id,
        role=user.role,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
    )


ADMIN = make_user(1, Role.ADMIN, "Ada", "Admin")
AGENT_A = make_user(10, Role.AGENT, "Alice", "Agent")
AGENT_B = make_user(11, Role.AGENT, "Bob", "Agent")
AGENT_C = make_user(12, Role.AGENT, "Cleo", "Agent")
REQUESTER = make_user(20, Role.USER, "Rita", "Requester")
OTHER_USER = make_user(21, Role.USER, "Otto", "Other")


@pytest.fixture
def users():
    return FakeUserRepo([ADMIN, AGENT_A, AGENT_B, AGENT_C, REQUESTER, OTHER_USER])


@pytest.fixture
def rr_repo():
    return FakeRoundRobinRepo()


@pytest.fixture
def ticket_repo():
    return FakeTicketRepo()


@pytest.fixture
def audit_repo():
    return FakeAuditRepo()


@pytest.fixture
def feedback_repo():
    return FakeFeedbackRepo()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def audit(audit_repo, users):
    return AuditTrail(audit_repo, user_repo=users, clock=TickingClock())


@pytest.fixture
def allocator(users, rr_repo):
    return AssignmentAllocator(users, rr_repo)


@pytest.fixture
def create_uc(ticket_repo, allocator, audit, notifier):
    return CreateTicketUseCase(ticket_repo, allocator, audit, notifier)


@pytest.fixture
def update_uc(ticket_repo, users, audit, notifier):
    return UpdateTicketUseCase(ticket_repo, users, audit, notifier)


@pytest.fixture
def delete_uc(ticket_repo, audit, notifier):
    return DeleteTicketUseCase(ticket_repo, audit, notifier)


@pytest.fixture
def requester():
    return as_actor(REQUESTER)


@pytest.fixture
def draft():
    return {
        "title": "MRI scanner shows calibration error",
        "description": "Error E-42 on boot since this morning",
        "department": "Radiology",
        "category": "Equipment Issue",
        "priority": "medium",
        "equipment": {"name": "MRI-3T Room 2", "type": "MRI Scanner"},
    }


@pytest.fixture
def admin():
    return as_actor(ADMIN)


@pytest.fixture
def agent_a():
    return as_actor(AGENT_A)


@pytest.fixture
def agent_b():
    return as_actor(AGENT_B)


@pytest.fixture
def outsider():
    return as_actor(OTHER_USER)


@pytest.fixture
def roster_of():
    """Build a user repo whose agents have the given ids."""

    def _build(*agent_ids):
        return FakeUserRepo([make_user(i, Role.AGENT) for i in agent_ids] + [ADMIN, REQUESTER])

    return _build
