from typing import Mapping, Optional
import httpx
from pydantic import ValidationError

from common.core.config import settings
from common.core.exceptions import UpstreamError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.auth.providers.interface import SessionProviderInterface
from packages.auth.providers.models import Session, SessionProvider

logger = get_logger(__name__)

# Only these request headers identify a Better Auth session
FORWARDED_HEADERS = ("cookie", "authorization")


class BetterAuthSessionProvider(SessionProviderInterface):
    """Resolves sessions through a Better Auth server's get-session endpoint"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.session_url = (
            f"{settings.better_auth_url.rstrip('/')}{settings.better_auth_session_path}"
        )
        self.timeout = settings.auth_request_timeout_seconds
        self._transport = transport

    def get_provider_name(self) -> SessionProvider:
        return SessionProvider.BETTER_AUTH

    @trace_span
    async def get_session(self, headers: Mapping[str, str]) -> Optional[Session]:
        """Forward the caller's session headers and parse the session, if any"""
        forwarded = {
            name: value
            for name, value in headers.items()
            if name.lower() in FORWARDED_HEADERS
        }
        if not forwarded:
            return None

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(self.session_url, headers=forwarded)
        except httpx.HTTPError as e:
            logger.error(f"Session lookup failed: {e}")
            raise UpstreamError(f"Session lookup failed: {e}")

        if response.status_code in (401, 403):
            return None
        if response.status_code >= 400:
            logger.error(
                "Session lookup returned an error",
                extra={"status_code": response.status_code},
            )
            raise UpstreamError(
                f"Session lookup failed with status {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            payload = response.json() if response.content else None
        except ValueError:
            logger.warning("Session endpoint returned a non-JSON body")
            return None
        if not isinstance(payload, dict) or not payload.get("user"):
            return None

        try:
            return Session.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed session payload: {e}")
            return None
