"""AssignmentAllocator — round-robin pick of the agent for a new ticket."""

from __future__ import annotations

import logging

from helpdesk.application.ports.round_robin_repo import RoundRobinRepository
from helpdesk.application.ports.user_repo import UserRepository
from helpdesk.domain.entities.user import User
from helpdesk.domain.errors import NoAgentsAvailable
from helpdesk.domain.policies.round_robin import pick_next, stable_roster

logger = logging.getLogger(__name__)

DEFAULT_RR_KEY = "agent_rr_index"


class AssignmentAllocator:
    """Walks the agent roster in id order, one step per created ticket.

    Fairness is best-effort: the counter store serializes each
    read-and-advance, but two concurrent creations that interleave around
    it may still land on the same agent back to back.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        rr_repo: RoundRobinRepository,
        rr_key: str = DEFAULT_RR_KEY,
    ):
        self._users = user_repo
        self._rr = rr_repo
        self._key = rr_key

    async def _roster(self) -> list[User]:
        roster = stable_roster(await self._users.list_agents())
        if not roster:
            logger.warning("Allocation requested but the agent roster is empty")
            raise NoAgentsAvailable()
        return roster

    async def allocate(self) -> User:
        """Pick the next agent and advance the rotation counter exactly once.

        Raises:
            NoAgentsAvailable: roster is empty; the counter is left untouched.
        """
        roster = await self._roster()
        position = await self._rr.get_and_increment(self._key, len(roster))
        agent, index = pick_next(roster, position)
        logger.info(
            "Allocated agent %s (position %d of %d)", agent.id, index, len(roster)
        )
        return agent

    async def peek(self) -> User:
        """The agent the next allocate() would return. Does not advance."""
        roster = await self._roster()
        position = await self._rr.get_counter(self._key)
        agent, _ = pick_next(roster, position)
        return agent
