"""Audit endpoints — activity feed and the full paginated log."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from helpdesk.application.use_cases.audit_trail import AuditTrail
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import Role
from helpdesk.infrastructure.api.auth import require_role
from helpdesk.infrastructure.api.dependencies import get_audit_trail
from helpdesk.infrastructure.api.schemas import serialize_audit_page, serialize_described

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/recent")
async def recent_activity(
    limit: int = Query(10, ge=1, le=50),
    actor: Actor = Depends(require_role(Role.AGENT, Role.ADMIN)),
    audit: AuditTrail = Depends(get_audit_trail),
):
    """Newest entries with human-readable descriptions."""
    return {"entries": [serialize_described(d) for d in await audit.recent(limit)]}


@router.get("")
async def list_audit(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    actor: Actor = Depends(require_role(Role.ADMIN)),
    audit: AuditTrail = Depends(get_audit_trail),
):
    return serialize_audit_page(await audit.list_all(page=page, limit=limit))
