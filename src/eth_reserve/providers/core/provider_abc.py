"""Abstract base class for external data providers."""
from abc import ABC


class ProviderABC(ABC):
    """Base interface for every external collaborator (market data, chain, email).

    Providers own their network clients; the reconciliation code only sees the
    capability protocols in `providers.core.protocols`. Subclasses release
    their clients in close().
    """

    name: str = "provider"

    async def close(self) -> None:
        """Clean up resources (connections, clients).

        Override in subclasses if cleanup is needed.
        """

    async def __aenter__(self) -> "ProviderABC":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        """Async context manager exit - calls close()."""
        await self.close()
