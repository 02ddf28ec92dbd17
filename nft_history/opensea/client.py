"""
Marketplace event fetcher — OpenSea v1 REST API.

Responsibilities:
- Answer whether an asset is semi-fungible (ERC-1155 style), which changes
  how its event history is queried.
- Fetch asset events for one event category (transfer or sale) and map
  them to RawEvent.
- Retry transport/HTTP failures with exponential backoff; raise FetchError
  after the last attempt.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from nft_history.config.settings import Settings
from nft_history.core.exceptions import FetchError
from nft_history.history_logging import get_logger
from nft_history.timeline.models import EventCategory, RawEvent

logger = get_logger(__name__)

SEMI_FUNGIBLE_CONTRACT_TYPE = "semi-fungible"


class OpenSeaClient:
    """
    Async client for the marketplace asset and events endpoints.

    One client may serve many requests; pass an ``httpx.AsyncClient`` to
    share a connection pool (or a mock transport in tests), otherwise a
    client is opened per call.
    """

    def __init__(
        self,
        base_url_template: str,
        *,
        api_key: str = "",
        events_limit: int = 299,
        request_timeout_sec: float = 30.0,
        max_retries: int = 3,
        min_retry_delay_sec: float = 0.5,
        max_retry_delay_sec: float = 8.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            base_url_template: API root with a ``{prefix}`` slot for the network
                prefix (e.g. https://{prefix}api.opensea.io/api/v1).
            api_key: Sent as X-API-KEY when non-empty.
            events_limit: Page size for /events (max 300).
            request_timeout_sec: HTTP timeout per request.
            max_retries: Attempts per request before giving up.
            min_retry_delay_sec: Initial backoff delay.
            max_retry_delay_sec: Cap for backoff delay.
            http_client: Optional shared client; caller owns its lifecycle.
        """
        if "{prefix}" not in base_url_template:
            raise ValueError("base_url_template must contain '{prefix}'")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._base_url_template = base_url_template.rstrip("/")
        self._api_key = api_key
        self._events_limit = events_limit
        self._request_timeout = request_timeout_sec
        self._max_retries = max_retries
        self._min_retry_delay = min_retry_delay_sec
        self._max_retry_delay = max_retry_delay_sec
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: Settings, http_client: httpx.AsyncClient | None = None) -> "OpenSeaClient":
        return cls(
            settings.opensea_api_url_template,
            api_key=settings.opensea_api_key,
            events_limit=settings.events_limit,
            request_timeout_sec=settings.request_timeout_sec,
            max_retries=settings.max_retries,
            http_client=http_client,
        )

    def _url(self, network_prefix: str, path: str) -> str:
        return self._base_url_template.format(prefix=network_prefix) + path

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["X-API-KEY"] = self._api_key
        return headers

    async def fetch_semi_fungibility(
        self,
        network_prefix: str,
        contract_address: str,
        token_id: str,
    ) -> bool:
        """True when the asset's contract is semi-fungible."""
        data = await self._get_json(
            self._url(network_prefix, f"/asset/{contract_address}/{token_id}/"),
            params={},
            context="semi_fungibility",
        )
        contract = data.get("asset_contract") or {}
        return contract.get("asset_contract_type") == SEMI_FUNGIBLE_CONTRACT_TYPE

    async def fetch_events(
        self,
        network_prefix: str,
        semi_fungible: bool,
        account_address: str,
        contract_address: str,
        token_id: str,
        event_category: EventCategory | str,
    ) -> list[RawEvent]:
        """
        Fetch raw events of one category for one token.

        Semi-fungible tokens share a token id across holders, so their history
        is narrowed to events involving ``account_address``.
        """
        category = event_category.value if isinstance(event_category, EventCategory) else str(event_category)
        params: dict[str, Any] = {
            "asset_contract_address": contract_address,
            "token_id": token_id,
            "event_type": category,
            "only_opensea": "false",
            "offset": 0,
            "limit": self._events_limit,
        }
        if semi_fungible and account_address:
            params["account_address"] = account_address

        data = await self._get_json(
            self._url(network_prefix, "/events"),
            params=params,
            context=category,
        )
        items = data.get("asset_events")
        if not isinstance(items, list):
            raise FetchError("Marketplace response has no asset_events list", event_category=category)

        events = [RawEvent.from_api_item(item) for item in items if isinstance(item, dict)]
        logger.info(
            "opensea_events_fetched",
            contract_address=contract_address,
            token_id=token_id,
            event_category=category,
            event_count=len(events),
        )
        return events

    async def _get_json(self, url: str, *, params: dict[str, Any], context: str) -> dict[str, Any]:
        if self._http_client is not None:
            return await self._get_json_with_retry(self._http_client, url, params, context)
        async with httpx.AsyncClient(timeout=httpx.Timeout(self._request_timeout)) as client:
            return await self._get_json_with_retry(client, url, params, context)

    async def _get_json_with_retry(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: dict[str, Any],
        context: str,
    ) -> dict[str, Any]:
        delay = self._min_retry_delay
        last_error: Exception | None = None

        for attempt in range(self._max_retries):
            try:
                resp = await client.get(url, params=params, headers=self._headers())
                resp.raise_for_status()
                data = resp.json()
                if not isinstance(data, dict):
                    raise ValueError(f"expected JSON object, got {type(data).__name__}")
                return data
            except (httpx.HTTPError, ValueError) as e:
                last_error = e
                logger.warning(
                    "opensea_request_retry",
                    context=context,
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                    error=str(e),
                )
                if attempt + 1 < self._max_retries:
                    await asyncio.sleep(delay)
                    delay = min(delay * 2, self._max_retry_delay)

        logger.error(
            "opensea_request_give_up",
            context=context,
            max_retries=self._max_retries,
            error=str(last_error),
        )
        raise FetchError(
            f"Marketplace request failed after {self._max_retries} attempts: {last_error}",
            event_category=context,
        ) from last_error
