"""Client for a Tunez server on the local network."""

import logging

import httpx
from pydantic import BaseModel, ValidationError

from musichub.domain.entities import Account, ServiceType
from musichub.domain.exceptions import InvalidStateException, ProviderOperationError
from musichub.domain.ports import ITextPrompt
from musichub.infrastructure.clients.base import AuthenticatedClient

logger = logging.getLogger(__name__)


class _TunezState(BaseModel):
    base_address: str = ""


class TunezClient(AuthenticatedClient):
    """Tunez "authentication" is just asking the user where the server is."""

    SERVICE_TYPE = ServiceType.TUNEZ

    def __init__(
        self,
        identifier: str,
        transport: httpx.AsyncClient,
        prompt: ITextPrompt,
        default_address: str = "",
    ) -> None:
        """Initialize client.

        Args:
            identifier: Stable id (the persisted record id as string)
            transport: Shared HTTP client
            prompt: Text input collaborator used to ask for the address
            default_address: Pre-filled value of the prompt
        """
        super().__init__(identifier, transport)
        self._prompt = prompt
        self._default_address = default_address
        self._base_address = ""

    @property
    def base_address(self) -> str:
        return self._base_address

    @property
    def host(self) -> str:
        return self._server_url().host

    @property
    def port(self) -> int:
        url = self._server_url()
        return url.port or (443 if url.scheme == "https" else 80)

    # Hey future me - the server address IS the account state. Persisting it in extra_data
    # means a restart can rebuild the provider without prompting again.
    @property
    def extra_data_string(self) -> str:
        if not self._base_address:
            return ""
        return _TunezState(base_address=self._base_address).model_dump_json()

    @extra_data_string.setter
    def extra_data_string(self, value: str) -> None:
        if not value:
            self._reset_state()
            self.current_account = None
            return
        try:
            state = _TunezState.model_validate_json(value)
        except ValidationError as e:
            logger.warning("Ignoring unreadable Tunez state for client %s: %s", self.identifier, e)
            self._reset_state()
            self.current_account = None
            return
        self._set_address(state.base_address)

    async def _perform_authenticate(self) -> Account | None:
        # AuthenticationAbandoned from the prompt is absorbed by authenticate()
        address = await self._prompt.get_text_input(
            "Enter Tunez server address", self._default_address
        )
        self._set_address(address)
        return self.current_account

    def _set_address(self, address: str) -> None:
        try:
            url = httpx.URL(address.strip())
        except httpx.InvalidURL as e:
            raise ProviderOperationError(
                f"Invalid Tunez server address '{address}'",
                service=ServiceType.TUNEZ,
                provider_id=self.identifier,
                original_error=e,
            ) from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ProviderOperationError(
                f"Invalid Tunez server address '{address}'",
                service=ServiceType.TUNEZ,
                provider_id=self.identifier,
            )

        port = f":{url.port}" if url.port else ""
        self._base_address = f"{url.scheme}://{url.host}{port}/"
        self.current_account = Account(identifier=self.identifier, email=self._base_address)

    def _server_url(self) -> httpx.URL:
        if not self._base_address:
            raise InvalidStateException(f"Tunez client {self.identifier} has no server address")
        return httpx.URL(self._base_address)

    def _reset_state(self) -> None:
        self._base_address = ""
