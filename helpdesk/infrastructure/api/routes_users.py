"""User endpoints — registration, login, profile, admin account management."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.adapters.persistence.database import get_session
from helpdesk.adapters.persistence.repositories import SqlUserRepository
from helpdesk.application.use_cases.manage_users import (
    AuthenticateUserUseCase,
    RegisterUserUseCase,
    UpdateUserUseCase,
)
from helpdesk.domain.entities.user import User
from helpdesk.domain.errors import NotFound
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import Role
from helpdesk.infrastructure.api.auth import (
    create_access_token,
    get_current_actor,
    require_role,
)
from helpdesk.infrastructure.api.dependencies import (
    get_authenticate_uc,
    get_register_user_uc,
    get_update_user_uc,
    get_user_repo,
)
from helpdesk.infrastructure.api.schemas import (
    LoginRequest,
    UserCreate,
    UserRegister,
    UserUpdate,
    serialize_user,
)

router = APIRouter(prefix="/users", tags=["users"])


def _with_token(user: User) -> dict:
    return {
        **serialize_user(user),
        "access_token": create_access_token(user.id, user.role),
        "token_type": "bearer",
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: UserRegister,
    uc: RegisterUserUseCase = Depends(get_register_user_uc),
    session: AsyncSession = Depends(get_session),
):
    """Self-service sign-up. New accounts always start as plain users."""
    user = await uc.execute(
        body.first_name, body.last_name, body.email, body.password,
        department=body.department,
    )
    await session.commit()
    return _with_token(user)


@router.post("/login")
async def login(
    body: LoginRequest,
    uc: AuthenticateUserUseCase = Depends(get_authenticate_uc),
):
    return _with_token(await uc.execute(body.email, body.password))


@router.get("/me")
async def my_profile(
    actor: Actor = Depends(get_current_actor),
    users: SqlUserRepository = Depends(get_user_repo),
):
    return serialize_user(await users.get_by_id(actor.id))


@router.patch("/me")
async def update_my_profile(
    body: UserUpdate,
    actor: Actor = Depends(get_current_actor),
    uc: UpdateUserUseCase = Depends(get_update_user_uc),
    session: AsyncSession = Depends(get_session),
):
    user = await uc.execute(actor, actor.id, body.model_dump(exclude_none=True))
    await session.commit()
    return serialize_user(user)


# ─── Admin ───────────────────────────────────────────────────────────


@router.get("")
async def list_users(
    role: Role | None = None,
    actor: Actor = Depends(require_role(Role.ADMIN)),
    users: SqlUserRepository = Depends(get_user_repo),
):
    found = await users.list_users(role)
    return {"total": len(found), "users": [serialize_user(u) for u in found]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    actor: Actor = Depends(require_role(Role.ADMIN)),
    uc: RegisterUserUseCase = Depends(get_register_user_uc),
    session: AsyncSession = Depends(get_session),
):
    """Create an account with any role; a new agent joins the rotation at once."""
    user = await uc.execute(
        body.first_name, body.last_name, body.email, body.password,
        role=body.role, department=body.department,
    )
    await session.commit()
    return serialize_user(user)


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    actor: Actor = Depends(require_role(Role.ADMIN)),
    users: SqlUserRepository = Depends(get_user_repo),
):
    user = await users.get_by_id(user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")
    return serialize_user(user)


@router.patch("/{user_id}")
async def update_user(
    user_id: int,
    body: UserUpdate,
    actor: Actor = Depends(require_role(Role.ADMIN)),
    uc: UpdateUserUseCase = Depends(get_update_user_uc),
    session: AsyncSession = Depends(get_session),
):
    """Update a profile or change a role (promote to / demote from agent)."""
    user = await uc.execute(actor, user_id, body.model_dump(exclude_none=True))
    await session.commit()
    return serialize_user(user)
