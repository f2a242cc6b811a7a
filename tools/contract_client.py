"""HTTP client for the contract generation and persistence services.

Every call carries the session's bearer token. Failures are mapped onto the
composer's error taxonomy:

* transport faults (connection refused, timeouts) become ``NetworkError``
* 401/403 become ``AuthenticationError``
* any other non-2xx becomes ``ServiceError`` with the service's ``error``
  text passed through verbatim

Generation and save are never retried automatically; the user resubmits.
Only the idempotent listing call is retried on transport faults.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from composer.exceptions import AuthenticationError, NetworkError, ServiceError
from composer.models import (
    GenerationRequest,
    GenerationResponse,
    SaveAck,
    SaveContractRequest,
    SavedContractSummary,
)
from composer.session import SessionContext

logger = logging.getLogger("vibelegal.contract_client")

GENERATE_PATH = "/api/generate-contract"
SAVE_PATH = "/api/save-contract"
LIST_PATH = "/api/user-contracts"


class ContractServiceClient:
    """Async client for the three collaborator endpoints.

    Example:
        async with ContractServiceClient(session) as client:
            response = await client.generate_contract(request)
            print(response.contract)
    """

    def __init__(
        self,
        session: SessionContext,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        list_retry_attempts: int = 3,
        list_retry_wait_seconds: float = 0.5,
    ) -> None:
        """Initialise the client.

        Args:
            session: Session context with the base URL and bearer token.
            transport: Optional httpx transport, used to route calls to an
                in-process app or a mock.
            list_retry_attempts: Attempts for listing saved contracts.
            list_retry_wait_seconds: Base exponential backoff for those attempts.
        """
        self.session = session
        self.list_retry_attempts = max(1, list_retry_attempts)
        self.list_retry_wait_seconds = list_retry_wait_seconds
        self._http = httpx.AsyncClient(
            base_url=session.api_url,
            timeout=session.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> ContractServiceClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Send one authenticated request and return the decoded JSON body."""
        headers = self.session.auth_headers()
        logger.debug("%s: %s %s", operation, method, path)

        try:
            response = await self._http.request(method, path, json=payload, headers=headers)
        except httpx.TransportError as exc:
            logger.warning("%s failed to reach the service: %s", operation, exc)
            raise NetworkError(operation, str(exc)) from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_success:
            if data is None:
                raise ServiceError(
                    f"Malformed response from the service ({operation})",
                    status_code=response.status_code,
                )
            return data

        message = data.get("error") if isinstance(data, dict) else None
        logger.warning(
            "%s rejected with status %d: %s", operation, response.status_code, message
        )
        if response.status_code in (401, 403):
            raise AuthenticationError(message or "Authentication failed. Please log in again.")
        raise ServiceError(
            message or f"Failed to {operation.replace('_', ' ')}",
            status_code=response.status_code,
        )

    async def generate_contract(self, request: GenerationRequest) -> GenerationResponse:
        """Ask the generation service for a contract."""
        data = await self._request(
            "generate_contract", "POST", GENERATE_PATH, request.to_payload()
        )
        try:
            result = GenerationResponse.model_validate(data)
        except PydanticValidationError as exc:
            raise ServiceError("Malformed response from the generation service") from exc
        logger.info("Generated %s (%d chars)", result.contract_type, len(result.contract))
        return result

    async def save_contract(self, request: SaveContractRequest) -> SaveAck:
        """Persist a contract for the current user."""
        data = await self._request("save_contract", "POST", SAVE_PATH, request.to_payload())
        return SaveAck.model_validate(data if isinstance(data, dict) else {})

    async def list_user_contracts(self) -> list[SavedContractSummary]:
        """List the current user's saved contracts, newest as the service orders them.

        Retries on transport faults with exponential backoff.
        """
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(NetworkError),
            stop=stop_after_attempt(self.list_retry_attempts),
            wait=wait_exponential(multiplier=self.list_retry_wait_seconds, max=10),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                data = await self._request("fetch_contracts", "GET", LIST_PATH)

        try:
            return [
                SavedContractSummary.model_validate(item)
                for item in data.get("contracts", [])
            ]
        except (AttributeError, PydanticValidationError) as exc:
            raise ServiceError("Malformed response from the contracts service") from exc
