"""User account use cases — registration, login and profile/role changes.

The agent roster is every user whose role is ``agent``, so a role change
here is how agents join or leave the assignment rotation.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable

from helpdesk.application.ports.user_repo import UserRepository
from helpdesk.domain.entities.user import User
from helpdesk.domain.errors import DuplicateUser, InvalidCredentials, NotAuthorized, NotFound
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import Role

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class RegisterUserUseCase:
    def __init__(self, user_repo: UserRepository, hash_password: Callable[[str], str]):
        self._users = user_repo
        self._hash = hash_password

    async def execute(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        role: Role = Role.USER,
        department: str | None = None,
    ) -> User:
        email = _normalize_email(email)
        if await self._users.get_by_email(email):
            raise DuplicateUser(email)

        user = await self._users.save(
            User(
                id=None,
                first_name=first_name.strip(),
                last_name=last_name.strip(),
                email=email,
                role=role,
                department=department,
                password_hash=self._hash(password),
            )
        )
        logger.info("Registered %s %s (id=%s)", user.role.value, user.email, user.id)
        return user


class AuthenticateUserUseCase:
    def __init__(self, user_repo: UserRepository, verify_password: Callable[[str, str], bool]):
        self._users = user_repo
        self._verify = verify_password

    async def execute(self, email: str, password: str) -> User:
        user = await self._users.get_by_email(_normalize_email(email))
        # Accounts created without a password (seeded, legacy) cannot log in
        if user is None or not user.password_hash or not self._verify(password, user.password_hash):
            logger.info("Failed login for %s", email)
            raise InvalidCredentials()
        return user


class UpdateUserUseCase:
    def __init__(self, user_repo: UserRepository, hash_password: Callable[[str], str]):
        self._users = user_repo
        self._hash = hash_password

    async def execute(self, actor: Actor, user_id: int, changes: dict[str, Any]) -> User:
        """Apply profile changes, and role changes when an admin asks.

        Rules:
          1. Users may change their own profile; admins may change anyone's.
          2. Only admins change roles, and never their own.
          3. Email stays unique across accounts.
        """
        if actor.id != user_id and not actor.is_admin():
            raise NotAuthorized("Not allowed to modify another user")
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")

        new_role = changes.get("role")
        if new_role is not None and Role(new_role) != user.role:
            if not actor.is_admin():
                raise NotAuthorized("Only admins can change roles")
            if actor.id == user_id:
                raise NotAuthorized("Admins cannot change their own role")

        updated = replace(user)
        if "email" in changes:
            email = _normalize_email(changes["email"])
            if email != user.email:
                existing = await self._users.get_by_email(email)
                if existing is not None and existing.id != user_id:
                    raise DuplicateUser(email)
            updated.email = email
        for name in ("first_name", "last_name"):
            if name in changes:
                setattr(updated, name, changes[name].strip())
        if "department" in changes:
            updated.department = changes["department"]
        if changes.get("password"):
            updated.password_hash = self._hash(changes["password"])
        if new_role is not None:
            updated.role = Role(new_role)

        saved = await self._users.update(updated)
        if saved.role != user.role:
            logger.info(
                "User %s role changed %s -> %s by user %s",
                user_id, user.role.value, saved.role.value, actor.id,
            )
        return saved
