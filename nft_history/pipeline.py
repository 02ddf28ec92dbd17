"""
Token history pipeline — fetch, assemble, publish.

One run per asset identifier:
1. Ask the marketplace whether the asset is semi-fungible.
2. Fetch transfer and sale events concurrently; both must succeed.
3. Assemble the timeline (classification, pairing, one batched name lookup).

TimelineLoader keys runs by asset identifier: a newer request cancels the
older run, and a result for a superseded identifier is never published.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol

from nft_history.config.settings import Settings
from nft_history.core.exceptions import FetchError, TokenHistoryError
from nft_history.ens import ReverseRecordsResolver
from nft_history.history_logging import bind_asset, get_logger
from nft_history.opensea import OpenSeaClient
from nft_history.timeline.assembler import ResolveNames, assemble
from nft_history.timeline.models import AssetId, EventCategory, RawEvent, Timeline

logger = get_logger(__name__)


class EventFetcher(Protocol):
    async def fetch_semi_fungibility(
        self, network_prefix: str, contract_address: str, token_id: str
    ) -> bool: ...

    async def fetch_events(
        self,
        network_prefix: str,
        semi_fungible: bool,
        account_address: str,
        contract_address: str,
        token_id: str,
        event_category: EventCategory | str,
    ) -> list[RawEvent]: ...


class TokenHistoryPipeline:
    """Fetch both event streams for an asset and assemble its timeline."""

    def __init__(
        self,
        fetcher: EventFetcher,
        resolve_names: ResolveNames,
        *,
        registry_address: str,
        network_prefix: str = "",
    ) -> None:
        self._fetcher = fetcher
        self._resolve_names = resolve_names
        self._registry_address = registry_address
        self._network_prefix = network_prefix

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenHistoryPipeline":
        return cls(
            OpenSeaClient.from_settings(settings),
            ReverseRecordsResolver.from_settings(settings),
            registry_address=settings.ens_registry_nft_address,
            network_prefix=settings.network_prefix,
        )

    async def fetch_raw_events(
        self, asset: AssetId, account_address: str
    ) -> tuple[list[RawEvent], list[RawEvent]]:
        """Return (transfers, sales). Any failure raises FetchError; no partial result."""
        try:
            semi_fungible = await self._fetcher.fetch_semi_fungibility(
                self._network_prefix, asset.contract_address, asset.token_id
            )
            transfers, sales = await asyncio.gather(
                *(
                    self._fetcher.fetch_events(
                        self._network_prefix,
                        semi_fungible,
                        account_address,
                        asset.contract_address,
                        asset.token_id,
                        category,
                    )
                    for category in (EventCategory.TRANSFER, EventCategory.SALE)
                )
            )
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(f"Event fetch failed for {asset}: {e}") from e
        return list(transfers), list(sales)

    async def run(self, asset: AssetId, account_address: str) -> Timeline:
        log = bind_asset(str(asset))
        transfers, sales = await self.fetch_raw_events(asset, account_address)
        log.info("history_events_fetched", transfer_count=len(transfers), sale_count=len(sales))
        return await assemble(
            transfers,
            sales,
            asset.contract_address,
            self._registry_address,
            self._resolve_names,
        )


class TimelineLoader:
    """
    Latest-wins loader for the timeline of the currently selected asset.

    ``timeline``/``asset`` hold the published state. ``on_timeline`` is called
    only for results whose run was not superseded.
    """

    def __init__(
        self,
        pipeline: TokenHistoryPipeline,
        account_address: str,
        *,
        on_timeline: Callable[[AssetId, Timeline], None] | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._account_address = account_address
        self._on_timeline = on_timeline
        self._task: asyncio.Task[Timeline] | None = None
        self.asset: AssetId | None = None
        self.timeline: Timeline | None = None

    def _supersede(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def load(self, contract_and_token: str) -> Timeline | None:
        """
        Run the pipeline for ``"<contract>/<tokenId>"`` and publish the result.

        Returns None when a newer load superseded this one. Pipeline errors
        for the current identifier propagate (FetchError / ResolutionError).
        """
        asset = AssetId.parse(contract_and_token)
        self._supersede()
        task = asyncio.create_task(self._pipeline.run(asset, self._account_address))
        self._task = task

        try:
            timeline = await task
        except (asyncio.CancelledError, TokenHistoryError):
            if self._task is not task:
                logger.info("timeline_run_superseded", asset_id=str(asset))
                return None
            raise

        if self._task is not task:
            logger.info("timeline_stale_discarded", asset_id=str(asset))
            return None

        self.asset = asset
        self.timeline = timeline
        if self._on_timeline is not None:
            self._on_timeline(asset, timeline)
        return timeline
