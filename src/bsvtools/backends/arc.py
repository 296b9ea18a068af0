"""
ARC (BSV transaction processor) client.

Broadcasts raw transactions and tracks them through the ARC lifecycle:
RECEIVED -> STORED -> ANNOUNCED_TO_NETWORK -> SEEN_ON_NETWORK -> MINED,
or a terminal REJECTED / DOUBLE_SPEND_ATTEMPTED.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from bsvtools.backends.base import BroadcastProvider, BroadcastResult, TransactionStatus
from bsvtools.errors import ProviderError

DEFAULT_ARC_TIMEOUT = 30.0


class ARCErrorResponse(BaseModel):
    status: int = 0
    code: int = 0
    error: str = ""


class ARCClient(BroadcastProvider):
    """Client for an ARC endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = DEFAULT_ARC_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self.client = httpx.AsyncClient(timeout=timeout, headers=headers, transport=transport)

    async def _request(
        self, method: str, path: str, ok_statuses: tuple[int, ...], **kwargs: Any
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"ARC request timed out: {method} {url} - {e}")
            raise ProviderError(f"ARC request timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"ARC request failed: {method} {url} - {e}")
            raise ProviderError(f"failed to send request: {e}") from e

        if response.status_code not in ok_statuses:
            raise self._error_from_response(response)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"failed to decode response: {e}") from e

    @staticmethod
    def _error_from_response(response: httpx.Response) -> ProviderError:
        status = response.status_code
        try:
            error = ARCErrorResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            return ProviderError(f"request failed with status {status}: {e}", status_code=status)

        if not error.error:
            return ProviderError(f"request failed with HTTP status {status}", status_code=status)

        return ProviderError(
            f"ARC error: {error.error} (HTTP {status}, code: {error.code})", status_code=status
        )

    async def broadcast_transaction(self, raw_tx: str) -> BroadcastResult:
        """
        Submit a raw transaction.

        Raises:
            ProviderError: On transport errors, non-success status or bad payload
        """
        data = await self._request("POST", "/v1/tx", (200, 201), json={"rawTx": raw_tx})
        try:
            return BroadcastResult.model_validate(data)
        except ValidationError as e:
            raise ProviderError(f"failed to decode response: {e}") from e

    async def get_transaction_status(self, txid: str) -> TransactionStatus:
        data = await self._request("GET", f"/v1/tx/{txid}", (200,))
        try:
            return TransactionStatus.model_validate(data)
        except ValidationError as e:
            raise ProviderError(f"failed to decode response: {e}") from e

    async def close(self) -> None:
        await self.client.aclose()


def reached(status: TransactionStatus, target: str | None = None) -> bool:
    return status.final or status.tx_status == target


async def watch_status(
    provider: BroadcastProvider,
    txid: str,
    interval: float,
    max_polls: int = 0,
    backoff_factor: float = 1.0,
    target: str | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> AsyncIterator[TransactionStatus]:
    """
    Poll a transaction's status until it reaches a final state, or target
    when one is given.

    The first check happens immediately and its errors propagate. Later
    failed checks are logged and polling continues. Each status is yielded
    as it is observed.

    Args:
        provider: ARC client
        txid: Transaction to watch
        interval: Seconds between checks
        max_polls: Stop after this many checks (0 = until final)
        backoff_factor: Interval multiplier applied after every check
        target: Extra status that also ends polling
        sleep: Awaitable sleep function
    """
    status = await provider.get_transaction_status(txid)
    yield status
    polls = 1

    while not reached(status, target) and (max_polls == 0 or polls < max_polls):
        await sleep(interval)
        interval *= backoff_factor
        polls += 1

        try:
            status = await provider.get_transaction_status(txid)
        except ProviderError as e:
            logger.warning(f"Error getting transaction status: {e}")
            continue

        yield status
