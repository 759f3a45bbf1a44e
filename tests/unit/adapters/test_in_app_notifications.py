"""Tests for InAppNotificationDispatcher fan-out."""

from __future__ import annotations

import logging

import pytest

from helpdesk.adapters.notifications.in_app import InAppNotificationDispatcher
from helpdesk.application.ports.notification_repo import NotificationRepository
from helpdesk.domain.entities.ticket import PersonSnapshot, Ticket
from helpdesk.domain.value_objects.actor import Actor
from helpdesk.domain.value_objects.enums import Category, Department, Role


class FakeNotificationRepo(NotificationRepository):
    def __init__(self, fail: bool = False):
        self.saved = []
        self.fail = fail

    async def save(self, notification):
        if self.fail:
            raise RuntimeError("db down")
        notification.id = len(self.saved) + 1
        self.saved.append(notification)
        return notification

    async def list_for_user(self, user_id, include_admin=False):
        return [n for n in self.saved if n.user_id == user_id]

    async def mark_read(self, notification_id, user_id):
        return False


def _ticket() -> Ticket:
    return Ticket(
        id=9,
        title="Ultrasound probe cracked",
        description="Visible crack on the housing",
        department=Department.EMERGENCY,
        category=Category.OTHER,
        requester=PersonSnapshot(20, "Rita", "Requester", "rita@example.com"),
        assigned_to=PersonSnapshot(10, "Alice", "Agent", "alice@example.com"),
    )


@pytest.mark.asyncio
async def test_created_notifies_requester_agent_and_admins():
    repo = FakeNotificationRepo()
    await InAppNotificationDispatcher(repo).ticket_created(_ticket())

    by_title = {n.title: n for n in repo.saved}
    assert by_title["Ticket Submitted"].user_id == 20
    assert by_title["New Ticket Assigned"].user_id == 10
    admin = by_title["New Ticket Created"]
    assert admin.is_admin_notification and admin.user_id is None
    assert "Alice Agent" in admin.content
    assert all(n.link == "/tickets/9" for n in repo.saved)


@pytest.mark.asyncio
async def test_updated_skips_the_actor():
    repo = FakeNotificationRepo()
    agent = Actor(id=10, role=Role.AGENT, first_name="Alice", last_name="Agent")

    await InAppNotificationDispatcher(repo).ticket_updated(_ticket(), agent)

    recipients = sorted((n.user_id or 0, n.is_admin_notification) for n in repo.saved)
    assert recipients == [(0, True), (20, False)]


@pytest.mark.asyncio
async def test_deleted_by_admin_has_no_admin_broadcast():
    repo = FakeNotificationRepo()
    admin = Actor(id=1, role=Role.ADMIN)

    await InAppNotificationDispatcher(repo).ticket_deleted(_ticket(), admin)

    assert {n.user_id for n in repo.saved} == {20, 10}
    assert all(n.link == "/tickets" for n in repo.saved)


@pytest.mark.asyncio
async def test_storage_failure_is_swallowed(caplog):
    with caplog.at_level(logging.ERROR):
        await InAppNotificationDispatcher(FakeNotificationRepo(fail=True)).ticket_created(
            _ticket()
        )
    assert "Failed to store 'created' notification for ticket 9" in caplog.text
