"""Seed the database with staff accounts and the rotation counter.

Usage:
    python -m helpdesk.tools.seed_db
    python -m helpdesk.tools.seed_db --agents 5
    python -m helpdesk.tools.seed_db --drop  # drop existing data first
    python -m helpdesk.tools.seed_db --create-tables  # without alembic
    python -m helpdesk.tools.seed_db --password s3cret-pass  # enable login
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.adapters.persistence.database import Base, async_session_factory, engine
from helpdesk.adapters.persistence.models import (
    AuditEntryModel,
    FeedbackModel,
    NotificationModel,
    RoundRobinStateModel,
    TicketModel,
    UserModel,
)
from helpdesk.adapters.persistence.repositories import SqlUserRepository
from helpdesk.config import settings
from helpdesk.domain.entities.user import User
from helpdesk.domain.value_objects.enums import Department, Role
from helpdesk.infrastructure.api.auth import create_access_token, get_password_hash

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

_AGENT_NAMES = [
    ("Amina", "Bekova"),
    ("Daniel", "Okafor"),
    ("Sofia", "Marquez"),
    ("Tomas", "Lindqvist"),
    ("Priya", "Raman"),
    ("Jonas", "Weber"),
]


def _staff(agent_count: int) -> list[User]:
    users = [
        User(
            id=None,
            first_name="Helen",
            last_name="Admin",
            email="admin@helpdesk.local",
            role=Role.ADMIN,
        ),
        User(
            id=None,
            first_name="Demo",
            last_name="User",
            email="user@helpdesk.local",
            role=Role.USER,
            department=Department.RADIOLOGY.value,
        ),
    ]
    for i in range(agent_count):
        first, last = _AGENT_NAMES[i % len(_AGENT_NAMES)]
        users.append(
            User(
                id=None,
                first_name=first,
                last_name=last,
                email=f"agent{i + 1}@helpdesk.local",
                role=Role.AGENT,
            )
        )
    return users


async def _drop_data(session: AsyncSession) -> None:
    """Delete all data in correct order (respecting FK constraints)."""
    for model in [
        NotificationModel,
        FeedbackModel,
        AuditEntryModel,
        TicketModel,
        RoundRobinStateModel,
        UserModel,
    ]:
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


async def seed(
    agent_count: int = 3, drop: bool = False, password: str | None = None
) -> list[User]:
    """Create missing accounts and the rotation counter. Returns every seeded user.

    With ``password``, new accounts can also log in through /api/users/login.
    """
    seeded: list[User] = []
    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        repo = SqlUserRepository(session)
        for user in _staff(agent_count):
            existing = await repo.get_by_email(user.email)
            if existing:
                logger.debug("User '%s' already exists, skipping", user.email)
                seeded.append(existing)
                continue
            if password:
                user.password_hash = get_password_hash(password)
            seeded.append(await repo.save(user))
            logger.info("Created %s %s", user.role.value, user.email)
        await session.commit()

        existing_rr = await session.execute(
            select(RoundRobinStateModel).where(
                RoundRobinStateModel.rr_key == settings.agent_rr_key
            )
        )
        if not existing_rr.scalar_one_or_none():
            session.add(RoundRobinStateModel(rr_key=settings.agent_rr_key, counter=0))
            await session.commit()
            logger.info("Initialized rotation counter '%s'", settings.agent_rr_key)

    return seeded


async def _create_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created")


def _print_tokens(users: list[User]) -> None:
    print(f"\n{'='*50}")
    print("BEARER TOKENS")
    print(f"{'='*50}")
    for user in users:
        print(f"{user.role.value:<6} {user.email}")
        print(f"       {create_access_token(user.id, user.role)}")
    print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Seed the helpdesk database")
    parser.add_argument(
        "--agents", type=int, default=3,
        help="Number of agent accounts to create (default: 3)",
    )
    parser.add_argument(
        "--drop", action="store_true",
        help="Drop existing data before seeding",
    )
    parser.add_argument(
        "--password", default=None,
        help="Login password for newly created accounts (min 8 characters)",
    )
    parser.add_argument(
        "--create-tables", action="store_true",
        help="Create tables from the ORM metadata before seeding",
    )
    args = parser.parse_args()

    if args.agents < 0:
        parser.error("--agents must not be negative")
    if args.password is not None and len(args.password) < 8:
        parser.error("--password must be at least 8 characters")

    async def run_all():
        if args.create_tables:
            await _create_tables()
        users = await seed(args.agents, drop=args.drop, password=args.password)
        await engine.dispose()
        return users

    _print_tokens(asyncio.run(run_all()))


if __name__ == "__main__":
    main()
