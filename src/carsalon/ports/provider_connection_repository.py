from __future__ import annotations

from abc import ABC, abstractmethod

from carsalon.domain.financing import ProviderConnection


class ProviderConnectionRepository(ABC):
    """Port for the credentials of external financing providers."""

    @abstractmethod
    def get_active(self, provider: str) -> ProviderConnection | None:
        """Return the active connection for a provider, or None if not configured."""
        ...
