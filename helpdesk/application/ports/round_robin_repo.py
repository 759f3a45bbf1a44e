"""Port interface for rotation-counter persistence."""

from abc import ABC, abstractmethod


class RoundRobinRepository(ABC):
    @abstractmethod
    async def get_counter(self, rr_key: str) -> int:
        """Get the current counter for the given key. Creates entry (0) if missing.

        Never advances the counter.
        """
        ...

    @abstractmethod
    async def get_and_increment(self, rr_key: str, modulus: int) -> int:
        """Return the stored value and persist ``(value + 1) % modulus``.

        Must be a single locked read-modify-write (SELECT ... FOR UPDATE or an
        equivalent conditional update). Creates the entry if missing.
        """
        ...
