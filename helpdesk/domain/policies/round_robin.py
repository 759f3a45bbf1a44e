"""RoundRobinPolicy — deterministic fair agent selection."""

from __future__ import annotations

from helpdesk.domain.entities.user import User
from helpdesk.domain.errors import NoAgentsAvailable


def stable_roster(agents: list[User]) -> list[User]:
    """Order agents by their monotonically assigned id."""
    return sorted(agents, key=lambda a: a.id)


def pick_next(roster: list[User], counter: int) -> tuple[User, int]:
    """Deterministic round-robin pick from the agent roster.

    1. Sort agents by id for a stable order across calls.
    2. Use *counter mod len(roster)* to select the index.
    3. Return the chosen agent and the index that was used.

    The counter is a rotation position, not a bound index: if the roster
    shrank since it was written, the modulo keeps the pick in range.

    Raises:
        NoAgentsAvailable: if the roster is empty.
    """
    if not roster:
        raise NoAgentsAvailable()

    ordered = stable_roster(roster)
    index = counter % len(ordered)
    return ordered[index], index
