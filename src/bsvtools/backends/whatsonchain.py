"""
WhatsOnChain API backend for UTXO and raw transaction lookups.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bsvtools.backends.base import TransactionProvider, UTXOProvider, deduplicate_utxos
from bsvtools.errors import NoUTXOsAvailableError, ProviderError
from bsvtools.models import UTXO

DEFAULT_WOC_URL = "https://api.whatsonchain.com/v1/bsv"
DEFAULT_TIMEOUT = 30.0


class WOCUnspent(BaseModel):
    """A single UTXO from the /unspent/all endpoint"""

    model_config = ConfigDict(populate_by_name=True)

    height: int = 0
    tx_pos: int
    tx_hash: str
    value: int
    is_spent_in_mempool: bool = Field(default=False, alias="isSpentInMempoolTx")
    status: str = ""


class WOCUnspentAllResponse(BaseModel):
    address: str = ""
    script: str = ""
    result: list[WOCUnspent] = Field(default_factory=list)
    error: str = ""


def parse_unspent_response(payload: Any) -> list[UTXO]:
    """
    Convert an /unspent/all payload into UTXOs.

    Entries already spent by a mempool transaction are dropped.

    Raises:
        ProviderError: On an API error message or unexpected payload shape
    """
    try:
        response = WOCUnspentAllResponse.model_validate(payload)
    except ValidationError as e:
        raise ProviderError(f"failed to parse UTXOs: {e}") from e

    if response.error:
        raise ProviderError(f"API error: {response.error}")

    utxos: list[UTXO] = []
    for i, u in enumerate(response.result, 1):
        if u.is_spent_in_mempool:
            logger.debug(
                f"  UTXO {i}: {u.tx_hash}:{u.tx_pos} = {u.value} satoshis "
                "(skipped - spent in mempool)"
            )
            continue

        try:
            utxo = UTXO(txid=u.tx_hash, vout=u.tx_pos, value=u.value)
        except ValueError as e:
            raise ProviderError(f"invalid UTXO in response: {e}") from e

        logger.debug(f"  UTXO {i} ({u.status}): {utxo.outpoint} = {u.value} satoshis")
        utxos.append(utxo)

    return utxos


class WhatsOnChainBackend(UTXOProvider, TransactionProvider):
    """
    Read-only access to WhatsOnChain.

    UTXO lists are filtered (mempool-spent entries removed) and deduplicated
    here, so selection always receives a clean candidate set.
    """

    def __init__(
        self,
        testnet: bool = False,
        base_url: str = DEFAULT_WOC_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.network = "test" if testnet else "main"
        self.base_url = f"{base_url.rstrip('/')}/{self.network}"
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def _get(self, path: str) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"WhatsOnChain request failed: {url} - {e}")
            raise ProviderError(f"failed to fetch {url}: {e}") from e

        if response.status_code != 200:
            raise ProviderError(
                f"WhatsOnChain API error (status {response.status_code}): {response.text}",
                status_code=response.status_code,
            )
        return response

    async def get_utxos(self, address: str) -> list[UTXO]:
        """
        Fetch spendable UTXOs for an address.

        Raises:
            ProviderError: On transport, HTTP or payload errors
            NoUTXOsAvailableError: If nothing spendable remains
        """
        logger.debug(f"Fetching UTXOs from WhatsOnChain ({self.network} network)...")
        response = await self._get(f"/address/{address}/unspent/all")

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError(f"failed to parse UTXOs: {e}") from e

        utxos = parse_unspent_response(payload)
        if not utxos:
            raise NoUTXOsAvailableError(f"no UTXOs found for address {address}")

        deduped = deduplicate_utxos(utxos)
        if len(deduped) < len(utxos):
            logger.debug(f"Removed {len(utxos) - len(deduped)} duplicate UTXO(s)")

        return deduped

    async def get_raw_transaction(self, txid: str) -> str:
        logger.debug(f"Fetching raw transaction {txid} ({self.network} network)")
        response = await self._get(f"/tx/{txid}/hex")
        return response.text.strip()

    async def close(self) -> None:
        await self.client.aclose()
