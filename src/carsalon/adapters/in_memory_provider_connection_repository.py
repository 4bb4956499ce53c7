from __future__ import annotations

from carsalon.domain.financing import ProviderConnection
from carsalon.ports.provider_connection_repository import ProviderConnectionRepository


class InMemoryProviderConnectionRepository(ProviderConnectionRepository):
    """Canonical contract implementation for tests. First active match wins."""

    def __init__(self, connections: list[ProviderConnection]) -> None:
        self._connections = connections

    def get_active(self, provider: str) -> ProviderConnection | None:
        for connection in self._connections:
            if connection.provider == provider and connection.is_active:
                return connection
        return None
