"""Abstract interface for durable identifier generation."""

from abc import ABC, abstractmethod


class IIdGenerator(ABC):
    """Allocates unique identifiers per entity kind."""

    @abstractmethod
    async def generate(self, kind: str, prefix: str) -> str:
        """Return a new identifier for `kind`, e.g. ("batch", "BAT") -> "BAT-000042".

        Must be unique across concurrent callers for the same kind.
        """
        pass
