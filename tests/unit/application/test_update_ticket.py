"""Tests for UpdateTicketUseCase: authorization, validation, audited diffs."""

from __future__ import annotations

import pytest
import pytest_asyncio

from helpdesk.domain.errors import NotAuthorized, TicketNotFound, TicketValidationError
from helpdesk.domain.value_objects.enums import AuditAction, Priority, TicketStatus


@pytest_asyncio.fixture
async def ticket(create_uc, requester, draft):
    # Assigned to agent 10 (first in rotation)
    return await create_uc.execute(requester, draft)


async def _entries_after_create(audit, ticket_id):
    history = await audit.history(ticket_id)
    return history.entries[2:]


@pytest.mark.asyncio
async def test_priority_change_writes_one_entry(update_uc, audit, ticket, agent_a):
    updated = await update_uc.execute(agent_a, ticket.id, {"priority": "high"})

    assert updated.priority == Priority.HIGH
    entries = await _entries_after_create(audit, ticket.id)
    assert len(entries) == 1
    assert entries[0].action == AuditAction.PRIORITY_CHANGED
    assert entries[0].field_changed == "priority"
    assert entries[0].previous_value == "medium"
    assert entries[0].new_value == "high"
    assert entries[0].performed_by == agent_a.id


@pytest.mark.asyncio
async def test_unaudited_field_writes_nothing(update_uc, audit, ticket, requester):
    updated = await update_uc.execute(requester, ticket.id, {"department": "Cardiology"})

    assert updated.department.value == "Cardiology"
    assert await _entries_after_create(audit, ticket.id) == []


@pytest.mark.asyncio
async def test_same_value_is_not_a_change(update_uc, audit, ticket, agent_a):
    await update_uc.execute(agent_a, ticket.id, {"priority": "medium", "status": "open"})
    assert await _entries_after_create(audit, ticket.id) == []


@pytest.mark.asyncio
async def test_several_changes_one_entry_each(update_uc, audit, ticket, admin):
    await update_uc.execute(
        admin,
        ticket.id,
        {"status": "in_progress", "title": "MRI down", "assigned_to": 12},
    )

    entries = await _entries_after_create(audit, ticket.id)
    assert [(e.action, e.field_changed) for e in entries] == [
        (AuditAction.STATUS_CHANGED, "status"),
        (AuditAction.ASSIGNED, "assigned_to"),
        (AuditAction.UPDATED, "title"),
    ]
    reassigned = entries[1]
    assert (reassigned.previous_value, reassigned.new_value) == (10, 12)


@pytest.mark.asyncio
async def test_reassignment_updates_snapshot(update_uc, ticket, admin, ticket_repo):
    await update_uc.execute(admin, ticket.id, {"assigned_to": 11})
    stored = await ticket_repo.get_by_id(ticket.id)
    assert stored.assigned_to.user_id == 11
    assert stored.assigned_to.first_name == "Bob"


@pytest.mark.asyncio
async def test_assigning_a_non_agent_is_rejected(update_uc, ticket, admin):
    with pytest.raises(TicketValidationError) as exc:
        await update_uc.execute(admin, ticket.id, {"assigned_to": 21})
    assert exc.value.violations == ["User 21 is not an agent"]


@pytest.mark.asyncio
async def test_any_status_jump_is_allowed(update_uc, ticket, agent_a):
    updated = await update_uc.execute(agent_a, ticket.id, {"status": "closed"})
    assert updated.status == TicketStatus.CLOSED
    updated = await update_uc.execute(agent_a, ticket.id, {"status": "open"})
    assert updated.status == TicketStatus.OPEN


@pytest.mark.asyncio
async def test_requester_cannot_change_status(update_uc, ticket, requester):
    with pytest.raises(NotAuthorized):
        await update_uc.execute(requester, ticket.id, {"status": "resolved"})


@pytest.mark.asyncio
async def test_outsider_cannot_update(update_uc, ticket, outsider, agent_b):
    with pytest.raises(NotAuthorized):
        await update_uc.execute(outsider, ticket.id, {"title": "mine now"})
    with pytest.raises(NotAuthorized):
        await update_uc.execute(agent_b, ticket.id, {"priority": "low"})


@pytest.mark.asyncio
async def test_unknown_field_rejected(update_uc, ticket, admin):
    with pytest.raises(TicketValidationError) as exc:
        await update_uc.execute(admin, ticket.id, {"requester": 5})
    assert exc.value.violations == ["Unknown field: requester"]


@pytest.mark.asyncio
async def test_invalid_enum_rejected(update_uc, ticket, admin, audit):
    with pytest.raises(TicketValidationError):
        await update_uc.execute(admin, ticket.id, {"priority": "urgent"})
    assert await _entries_after_create(audit, ticket.id) == []


@pytest.mark.asyncio
async def test_null_pin_flag_rejected(update_uc, ticket, requester, ticket_repo):
    with pytest.raises(TicketValidationError) as exc:
        await update_uc.execute(requester, ticket.id, {"is_pinned": None})
    assert exc.value.violations == ["Field 'is_pinned' must be true or false"]
    assert (await ticket_repo.get_by_id(ticket.id)).is_pinned is False


@pytest.mark.asyncio
async def test_missing_ticket(update_uc, admin):
    with pytest.raises(TicketNotFound):
        await update_uc.execute(admin, 999, {"priority": "low"})


@pytest.mark.asyncio
async def test_switching_to_equipment_issue_requires_equipment(
    update_uc, create_uc, requester, draft
):
    draft["category"] = "Software Problem"
    del draft["equipment"]
    ticket = await create_uc.execute(requester, draft)

    with pytest.raises(TicketValidationError):
        await update_uc.execute(requester, ticket.id, {"category": "Equipment Issue"})

    updated = await update_uc.execute(
        requester,
        ticket.id,
        {"category": "Equipment Issue", "equipment": {"name": "CT-1", "type": "CT Scanner"}},
    )
    assert updated.equipment.name == "CT-1"


@pytest.mark.asyncio
async def test_update_notifies(update_uc, notifier, ticket, agent_a):
    await update_uc.execute(agent_a, ticket.id, {"status": "pending"})
    assert notifier.events[-1] == ("updated", ticket.id)
