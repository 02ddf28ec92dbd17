"""
Batched reverse ENS name resolution via the ReverseRecords contract.

One ``eth_call`` to getNames(address[]) returns one name per address in the
same order ("" when the address has no verified primary name).
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from nft_history.config.settings import Settings
from nft_history.core.exceptions import ResolutionError
from nft_history.ens.abi import decode_string_array, encode_get_names_call
from nft_history.history_logging import get_logger

logger = get_logger(__name__)

# JSON-RPC request id counter
_request_id = 0


def _next_id() -> int:
    global _request_id
    _request_id += 1
    return _request_id


def _build_eth_call_body(contract_address: str, calldata: str) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": _next_id(),
        "method": "eth_call",
        "params": [{"to": contract_address, "data": calldata}, "latest"],
    }


class ReverseRecordsResolver:
    """
    Name resolver backed by the ReverseRecords helper contract.

    Instances are callables: ``await resolver(addresses) -> list[str]``, so
    they can be handed straight to the timeline assembler.
    """

    def __init__(
        self,
        rpc_url: str,
        contract_address: str,
        *,
        request_timeout_sec: float = 30.0,
        max_retries: int = 3,
        min_retry_delay_sec: float = 0.5,
        max_retry_delay_sec: float = 8.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._rpc_url = rpc_url.rstrip("/")
        self._contract_address = contract_address
        self._request_timeout = request_timeout_sec
        self._max_retries = max_retries
        self._min_retry_delay = min_retry_delay_sec
        self._max_retry_delay = max_retry_delay_sec
        self._http_client = http_client

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> "ReverseRecordsResolver":
        return cls(
            settings.eth_rpc_url,
            settings.reverse_records_address,
            request_timeout_sec=settings.request_timeout_sec,
            max_retries=settings.max_retries,
            http_client=http_client,
        )

    async def __call__(self, addresses: list[str]) -> list[str]:
        return await self.get_names(addresses)

    async def get_names(self, addresses: list[str]) -> list[str]:
        """Resolve ``addresses`` in one call; result is aligned with the input."""
        if not addresses:
            return []
        try:
            calldata = encode_get_names_call(addresses)
        except ValueError as e:
            raise ResolutionError(str(e), address_count=len(addresses)) from e

        body = _build_eth_call_body(self._contract_address, calldata)
        if self._http_client is not None:
            result_hex = await self._call_with_retry(self._http_client, body)
        else:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self._request_timeout)) as client:
                result_hex = await self._call_with_retry(client, body)

        try:
            names = decode_string_array(result_hex)
        except ValueError as e:
            raise ResolutionError(f"Could not decode getNames result: {e}", address_count=len(addresses)) from e
        if len(names) != len(addresses):
            raise ResolutionError(
                f"getNames returned {len(names)} names for {len(addresses)} addresses",
                address_count=len(addresses),
            )
        logger.info(
            "reverse_names_resolved",
            address_count=len(addresses),
            resolved_count=sum(1 for n in names if n),
        )
        return names

    async def _call_with_retry(self, client: httpx.AsyncClient, body: dict[str, Any]) -> str:
        delay = self._min_retry_delay
        last_error: Exception | None = None

        for attempt in range(self._max_retries):
            try:
                return await self._rpc_eth_call(client, body)
            except (httpx.HTTPError, RuntimeError, ValueError) as e:
                last_error = e
                logger.warning(
                    "reverse_records_rpc_retry",
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                    error=str(e),
                )
                if attempt + 1 < self._max_retries:
                    await asyncio.sleep(delay)
                    delay = min(delay * 2, self._max_retry_delay)

        logger.error(
            "reverse_records_rpc_give_up",
            max_retries=self._max_retries,
            error=str(last_error),
        )
        raise ResolutionError(
            f"Reverse name lookup failed after {self._max_retries} attempts: {last_error}"
        ) from last_error

    async def _rpc_eth_call(self, client: httpx.AsyncClient, body: dict[str, Any]) -> str:
        """Perform the eth_call; raise on transport or RPC error."""
        resp = await client.post(self._rpc_url, json=body)
        resp.raise_for_status()
        data = resp.json()
        if "error" in data:
            err = data["error"]
            raise RuntimeError(
                f"Ethereum RPC error: {err.get('message', err)} (code={err.get('code')})"
            )
        result = data.get("result")
        if not isinstance(result, str):
            raise RuntimeError("Ethereum RPC returned no result")
        return result
