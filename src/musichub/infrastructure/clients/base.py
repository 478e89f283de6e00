"""Common base for all service clients."""

import logging
from abc import abstractmethod
from typing import ClassVar

import httpx

from musichub.domain.entities import Account, ServiceType
from musichub.domain.exceptions import AuthenticationAbandoned
from musichub.domain.ports import IAuthenticatedClient

logger = logging.getLogger(__name__)


class AuthenticatedClient(IAuthenticatedClient):
    """Shared state handling for the per-account clients.

    Subclasses set SERVICE_TYPE and implement _perform_authenticate() plus the
    extra-data (de)serialization of their own state.
    """

    SERVICE_TYPE: ClassVar[ServiceType]

    def __init__(self, identifier: str, transport: httpx.AsyncClient) -> None:
        """Initialize client.

        Args:
            identifier: Stable id (the persisted record id as string)
            transport: Shared HTTP client
        """
        self.identifier = identifier
        self.transport = transport
        self.device_id = ""
        self.current_account: Account | None = None

    @property
    def service_type(self) -> ServiceType:
        return self.SERVICE_TYPE

    @property
    def is_authenticated(self) -> bool:
        return self.current_account is not None

    # Hey future me - abandoned (user closed the prompt/browser) is NOT an error! We log it and
    # hand back None, exactly like a flow that finished without an account. Real failures
    # (network, bad address) still raise and the orchestrator logs them.
    async def authenticate(self) -> Account | None:
        """Run authentication and remember the account."""
        try:
            account = await self._perform_authenticate()
        except AuthenticationAbandoned:
            logger.info("Authentication for %s client %s abandoned", self.service_type.value, self.identifier)
            return None

        if account is not None:
            self.current_account = account
            logger.info("Authenticated %s client %s", self.service_type.value, self.identifier)
        return account

    def reset_data(self) -> None:
        """Forget the account and every piece of service-specific state."""
        self.current_account = None
        self._reset_state()

    @abstractmethod
    async def _perform_authenticate(self) -> Account | None: ...

    def _reset_state(self) -> None:
        """Clear service-specific state (override where there is some)."""
        pass
