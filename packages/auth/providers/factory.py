"""Factory for creating singleton session provider instances."""

from typing import Dict, Optional
from packages.auth.providers.interface import SessionProviderInterface
from packages.auth.providers.models import SessionProvider
from packages.auth.providers.better_auth_provider import BetterAuthSessionProvider


class SessionProviderFactory:
    """Factory for creating and managing session provider singletons."""

    _instances: Dict[SessionProvider, SessionProviderInterface] = {}

    @classmethod
    def get_provider(cls, provider: SessionProvider) -> SessionProviderInterface:
        """Get or create a singleton instance of the specified session provider.

        Raises:
            ValueError: If the provider is not supported
        """
        if provider not in cls._instances:
            cls._instances[provider] = cls._create_provider(provider)

        return cls._instances[provider]

    @classmethod
    def _create_provider(cls, provider: SessionProvider) -> SessionProviderInterface:
        if provider == SessionProvider.BETTER_AUTH:
            return BetterAuthSessionProvider()
        raise ValueError(
            f"Unsupported session provider: {provider}. Supported: BETTER_AUTH."
        )

    @classmethod
    def clear_cache(cls, provider: Optional[SessionProvider] = None):
        """Clear cached provider instances.

        Args:
            provider: Specific provider to clear, or None to clear all
        """
        if provider:
            cls._instances.pop(provider, None)
        else:
            cls._instances.clear()


def get_session_provider(
    provider: SessionProvider = SessionProvider.BETTER_AUTH,
) -> SessionProviderInterface:
    """Convenience function to get a session provider instance."""
    return SessionProviderFactory.get_provider(provider)
