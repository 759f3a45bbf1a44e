"""Tests for AssignmentAllocator rotation and fairness."""

from __future__ import annotations

from collections import Counter

import pytest

from helpdesk.application.use_cases.allocate_agent import (
    DEFAULT_RR_KEY,
    AssignmentAllocator,
)
from helpdesk.domain.errors import NoAgentsAvailable


@pytest.mark.asyncio
async def test_three_agents_four_allocations_wrap_around(roster_of, rr_repo):
    """[A, B, C] from counter 0 → A, B, C, A and the counter ends at 1."""
    allocator = AssignmentAllocator(roster_of(10, 11, 12), rr_repo)

    picked = [(await allocator.allocate()).id for _ in range(4)]

    assert picked == [10, 11, 12, 10]
    assert rr_repo.counters[DEFAULT_RR_KEY] == 1


@pytest.mark.asyncio
async def test_roster_is_ordered_by_id_not_insertion(roster_of, rr_repo):
    allocator = AssignmentAllocator(roster_of(30, 5, 17), rr_repo)
    picked = [(await allocator.allocate()).id for _ in range(3)]
    assert picked == [5, 17, 30]


@pytest.mark.asyncio
@pytest.mark.parametrize("agents,tickets", [(3, 10), (4, 4), (5, 23), (2, 1)])
async def test_fair_share(roster_of, rr_repo, agents, tickets):
    """Each agent gets floor(N/R) or ceil(N/R) tickets."""
    ids = list(range(100, 100 + agents))
    allocator = AssignmentAllocator(roster_of(*ids), rr_repo)

    counts = Counter([(await allocator.allocate()).id for _ in range(tickets)])

    low, high = tickets // agents, -(-tickets // agents)
    for agent_id in ids:
        assert low <= counts.get(agent_id, 0) <= high


@pytest.mark.asyncio
async def test_single_agent_gets_everything(roster_of, rr_repo):
    allocator = AssignmentAllocator(roster_of(7), rr_repo)
    picked = {(await allocator.allocate()).id for _ in range(5)}
    assert picked == {7}
    assert rr_repo.counters[DEFAULT_RR_KEY] == 0


@pytest.mark.asyncio
async def test_peek_does_not_advance(roster_of, rr_repo):
    allocator = AssignmentAllocator(roster_of(10, 11, 12), rr_repo)
    await allocator.allocate()

    first = await allocator.peek()
    second = await allocator.peek()

    assert first.id == second.id == 11
    assert rr_repo.increments == 1
    assert (await allocator.allocate()).id == 11


@pytest.mark.asyncio
async def test_empty_roster_leaves_counter_untouched(roster_of, rr_repo):
    allocator = AssignmentAllocator(roster_of(), rr_repo)

    with pytest.raises(NoAgentsAvailable):
        await allocator.allocate()
    with pytest.raises(NoAgentsAvailable):
        await allocator.peek()

    assert rr_repo.increments == 0
    assert rr_repo.counters == {}


@pytest.mark.asyncio
async def test_stale_counter_beyond_shrunken_roster(roster_of, rr_repo):
    """A counter written for a larger roster still lands in range."""
    rr_repo.counters[DEFAULT_RR_KEY] = 4
    allocator = AssignmentAllocator(roster_of(10, 11), rr_repo)
    assert (await allocator.allocate()).id == 10
    assert rr_repo.counters[DEFAULT_RR_KEY] == 1


@pytest.mark.asyncio
async def test_separate_keys_rotate_independently(roster_of, rr_repo):
    repo = roster_of(10, 11)
    first = AssignmentAllocator(repo, rr_repo, rr_key="radiology")
    second = AssignmentAllocator(repo, rr_repo, rr_key="cardiology")

    await first.allocate()
    assert (await second.allocate()).id == 10
    assert (await first.allocate()).id == 11
