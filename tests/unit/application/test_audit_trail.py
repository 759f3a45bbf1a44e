"""Tests for AuditTrail recording, ordering and feeds."""

from __future__ import annotations

import logging

import pytest

from helpdesk.domain.policies.audit_diff import FieldChange
from helpdesk.domain.value_objects.enums import AuditAction


@pytest.mark.asyncio
async def test_record_stamps_server_time(audit):
    first = await audit.record(1, AuditAction.CREATED, 20)
    second = await audit.record(1, AuditAction.UPDATED, 20)
    assert first.timestamp < second.timestamp
    assert first.id == 1


@pytest.mark.asyncio
async def test_failed_write_is_logged_and_swallowed(audit, audit_repo, caplog):
    audit_repo.fail = True

    with caplog.at_level(logging.ERROR, logger="helpdesk.audit"):
        result = await audit.record(5, AuditAction.DELETED, 1)

    assert result is None
    assert "ticket=5 action=deleted by=1" in caplog.text


@pytest.mark.asyncio
async def test_record_changes_one_entry_per_change(audit):
    changes = [
        FieldChange("status", AuditAction.STATUS_CHANGED, "open", "pending"),
        FieldChange("priority", AuditAction.PRIORITY_CHANGED, "low", "high"),
    ]
    written = await audit.record_changes(3, changes, performed_by=10)
    assert [e.field_changed for e in written] == ["status", "priority"]


@pytest.mark.asyncio
async def test_list_all_is_newest_first(audit):
    for ticket_id in (1, 2, 3):
        await audit.record(ticket_id, AuditAction.CREATED, 20)

    page = await audit.list_all(page=1, limit=2)

    assert page.total == 3
    assert [e.ticket_id for e in page.entries] == [3, 2]


@pytest.mark.asyncio
async def test_recent_describes_entries(audit):
    await audit.record(42, AuditAction.CREATED, 20)
    await audit.record(
        42, AuditAction.PRIORITY_CHANGED, 10,
        field_changed="priority", previous_value="medium", new_value="high",
    )

    feed = await audit.recent(limit=10)

    assert feed[0].description == (
        "Alice Agent changed the priority of ticket #00042 (medium → high)"
    )
    assert feed[1].description == "Rita Requester created ticket #00042"


@pytest.mark.asyncio
async def test_unknown_actor_falls_back_to_someone(audit):
    await audit.record(7, AuditAction.DELETED, 999)
    feed = await audit.recent()
    assert feed[0].actor_name is None
    assert feed[0].description.startswith("Someone deleted")
