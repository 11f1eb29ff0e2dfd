"""Async client for the relay backend API.

Endpoints (all POST, JSON bodies):
- /owner-tokens                    {owner}                 -> {tokens}
- /wrap-info                       {chain}                 -> {wrappedAddress?}
- /create-transfer-request         {owner, chain, token, amount}
- /create-native-transfer-request  {owner, chain, amount}
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from relaysweep.contracts.backend import (
    NativeTransferResponse,
    OwnerTokensResponse,
    TransferRequestResponse,
    WrapInfo,
)
from relaysweep.errors import BackendError

logger = logging.getLogger(__name__)


class RelayBackendClient:
    """Thin wrapper around the relay backend endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client.

        Args:
            base_url: Backend root URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                return await client.post(
                    path,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.RequestError as e:
            raise BackendError(f"{path} request failed: {e}") from e

    @staticmethod
    def _json(response: httpx.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(
                f"{path} returned an invalid body (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _require_success(response: httpx.Response, path: str) -> None:
        if response.is_success:
            return
        raise BackendError(
            f"{path} failed with HTTP {response.status_code}",
            status_code=response.status_code,
        )

    async def owner_tokens(self, owner: str) -> OwnerTokensResponse:
        """List the tokens held by a wallet across chains."""
        response = await self._post("/owner-tokens", {"owner": owner})
        self._require_success(response, "/owner-tokens")
        data = self._json(response, "/owner-tokens")
        try:
            return OwnerTokensResponse.model_validate(data or {})
        except ValidationError as e:
            raise BackendError(f"/owner-tokens returned an unexpected payload: {e}") from e

    async def wrap_info(self, chain: int) -> WrapInfo:
        """Look up the wrapped counterpart of a chain's native asset."""
        response = await self._post("/wrap-info", {"chain": chain})
        self._require_success(response, "/wrap-info")
        data = self._json(response, "/wrap-info")
        try:
            return WrapInfo.model_validate(data or {})
        except ValidationError as e:
            raise BackendError(f"/wrap-info returned an unexpected payload: {e}") from e

    async def create_transfer_request(
        self, owner: str, chain: int, token: str, amount: str
    ) -> TransferRequestResponse:
        """Register a relay job that pulls a fungible token.

        Error statuses are not raised: the backend reports failures in the
        body as ``{ok: false, error}``.
        """
        path = "/create-transfer-request"
        response = await self._post(
            path,
            {"owner": owner, "chain": chain, "token": token, "amount": amount},
        )
        data = self._json(response, path)
        try:
            result = TransferRequestResponse.model_validate(data or {})
        except ValidationError as e:
            raise BackendError(f"{path} returned an unexpected payload: {e}") from e

        logger.info(f"Transfer request for {token} on chain {chain}: ok={result.ok} job={result.job_id}")
        return result

    async def create_native_transfer_request(
        self, owner: str, chain: int, amount: str
    ) -> NativeTransferResponse:
        """Register a relay job for native funds and get the relayer address."""
        path = "/create-native-transfer-request"
        response = await self._post(path, {"owner": owner, "chain": chain, "amount": amount})
        data = self._json(response, path)
        try:
            result = NativeTransferResponse.model_validate(data or {})
        except ValidationError as e:
            raise BackendError(f"{path} returned an unexpected payload: {e}") from e

        logger.info(f"Native transfer request on chain {chain}: ok={result.ok} job={result.job_id}")
        return result
