from abc import ABC, abstractmethod
from typing import Mapping, Optional

from packages.auth.providers.models import Session, SessionProvider


class SessionProviderInterface(ABC):
    """Interface for session providers"""

    @abstractmethod
    async def get_session(self, headers: Mapping[str, str]) -> Optional[Session]:
        """
        Resolve the session carried by request headers.

        Args:
            headers: Incoming request headers (cookies, authorization)

        Returns:
            The session, or None when the request is not authenticated
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> SessionProvider:
        """Get the provider name"""
        pass
