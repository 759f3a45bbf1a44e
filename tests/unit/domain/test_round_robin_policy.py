"""Tests for RoundRobinPolicy."""

import pytest

from helpdesk.domain.entities.user import User
from helpdesk.domain.errors import NoAgentsAvailable
from helpdesk.domain.policies.round_robin import pick_next, stable_roster
from helpdesk.domain.value_objects.enums import Role


def _agent(uid: int) -> User:
    return User(id=uid, first_name=f"A{uid}", last_name="", email=f"a{uid}@x.io", role=Role.AGENT)


def test_pick_single_candidate():
    chosen, index = pick_next([_agent(1)], 0)
    assert chosen.id == 1
    assert index == 0


def test_pick_three_candidates_cycles():
    roster = [_agent(1), _agent(2), _agent(3)]
    ids = [pick_next(roster, counter)[0].id for counter in range(6)]
    assert ids == [1, 2, 3, 1, 2, 3]


def test_pick_ignores_input_order():
    """Roster is re-sorted by id, so callers may pass agents in any order."""
    chosen, _ = pick_next([_agent(9), _agent(3), _agent(5)], 0)
    assert chosen.id == 3


def test_counter_larger_than_roster_wraps():
    chosen, index = pick_next([_agent(1), _agent(2)], 7)
    assert chosen.id == 2
    assert index == 1


def test_empty_roster_raises():
    with pytest.raises(NoAgentsAvailable):
        pick_next([], 0)


def test_stable_roster_sorts_by_id():
    assert [a.id for a in stable_roster([_agent(4), _agent(2), _agent(8)])] == [2, 4, 8]
