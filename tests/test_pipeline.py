"""
Tests for the fetch → assemble pipeline and the latest-wins TimelineLoader.
"""

from __future__ import annotations

import asyncio

import pytest

from nft_history.core.exceptions import FetchError, InvalidAssetIdError, ResolutionError
from nft_history.pipeline import TimelineLoader, TokenHistoryPipeline
from nft_history.timeline.models import AssetId, EntryKind, Timeline
from tests.factories import (
    ALICE,
    BOB,
    ENS_REGISTRY,
    NFT_CONTRACT,
    FakeFetcher,
    RecordingResolver,
    mint,
    sale,
    transfer,
)

ASSET = AssetId(NFT_CONTRACT, "42")


def _pipeline(fetcher, resolver=None, prefix="") -> TokenHistoryPipeline:
    return TokenHistoryPipeline(
        fetcher,
        resolver or RecordingResolver({ALICE: "alice.eth"}),
        registry_address=ENS_REGISTRY,
        network_prefix=prefix,
    )


class TestAssetId:
    def test_parse(self):
        assert AssetId.parse(f"{NFT_CONTRACT}/42") == ASSET
        assert str(ASSET) == f"{NFT_CONTRACT}/42"

    @pytest.mark.parametrize("raw", ["", NFT_CONTRACT, f"{NFT_CONTRACT}/", "/42", "a/b/c"])
    def test_parse_rejects_malformed(self, raw):
        with pytest.raises(InvalidAssetIdError):
            AssetId.parse(raw)


class TestPipeline:
    def test_end_to_end_mint_and_sale(self):
        fetcher = FakeFetcher([mint("2021-05-01T10:00:00", ALICE)], [sale("2021-05-02T10:00:00")])
        timeline = asyncio.run(_pipeline(fetcher).run(ASSET, BOB))
        assert [e.kind for e in timeline.entries] == [EntryKind.MINT, EntryKind.SALE]
        assert timeline.entries[0].counterparty_display_name == "alice.eth"
        assert timeline.is_short

    def test_fetches_both_categories_with_semi_fungible_flag(self):
        fetcher = FakeFetcher(semi_fungible=True)
        asyncio.run(_pipeline(fetcher, prefix="rinkeby-").run(ASSET, BOB))
        assert fetcher.calls[0] == ("semi_fungibility", "rinkeby-", NFT_CONTRACT, "42")
        event_calls = sorted(c for c in fetcher.calls if c[0] == "events")
        assert event_calls == [
            ("events", "rinkeby-", True, BOB, NFT_CONTRACT, "42", "successful"),
            ("events", "rinkeby-", True, BOB, NFT_CONTRACT, "42", "transfer"),
        ]

    @pytest.mark.parametrize("category", ["transfer", "successful"])
    def test_either_fetch_failure_rejects(self, category):
        resolver = RecordingResolver()
        fetcher = FakeFetcher([transfer("1", BOB)], [sale("2")], fail_on=category)
        with pytest.raises(FetchError, match="endpoint down"):
            asyncio.run(_pipeline(fetcher, resolver).run(ASSET, ALICE))
        assert resolver.calls == []

    def test_resolution_failure_rejects(self):
        resolver = RecordingResolver(error=ResolutionError("lookup failed"))
        fetcher = FakeFetcher([transfer("1", BOB)])
        with pytest.raises(ResolutionError):
            asyncio.run(_pipeline(fetcher, resolver).run(ASSET, ALICE))


class _GatedFetcher(FakeFetcher):
    """Blocks event fetches for ``gated_token`` until ``release`` is set."""

    def __init__(self, gated_token: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.gated_token = gated_token
        self.release: asyncio.Event | None = None
        self.started: asyncio.Event | None = None

    async def fetch_events(self, network_prefix, semi_fungible, account_address, contract_address, token_id, event_category):
        if token_id == self.gated_token:
            self.started.set()
            await self.release.wait()
        return await super().fetch_events(
            network_prefix, semi_fungible, account_address, contract_address, token_id, event_category
        )


class TestTimelineLoader:
    def test_publishes_result(self):
        published: list[tuple[AssetId, Timeline]] = []
        fetcher = FakeFetcher([transfer("1", BOB)])
        loader = TimelineLoader(_pipeline(fetcher), ALICE, on_timeline=lambda a, t: published.append((a, t)))

        timeline = asyncio.run(loader.load(f"{NFT_CONTRACT}/42"))

        assert timeline is not None
        assert loader.asset == ASSET
        assert loader.timeline is timeline
        assert published == [(ASSET, timeline)]

    def test_newer_request_supersedes_older(self):
        fetcher = _GatedFetcher("1", [transfer("1", BOB)])
        published: list[AssetId] = []
        loader = TimelineLoader(_pipeline(fetcher), ALICE, on_timeline=lambda a, t: published.append(a))

        async def scenario():
            fetcher.release = asyncio.Event()
            fetcher.started = asyncio.Event()
            first = asyncio.create_task(loader.load(f"{NFT_CONTRACT}/1"))
            await fetcher.started.wait()
            second = await loader.load(f"{NFT_CONTRACT}/2")
            fetcher.release.set()
            return await first, second

        first, second = asyncio.run(scenario())

        assert first is None
        assert second is not None
        assert loader.asset == AssetId(NFT_CONTRACT, "2")
        assert published == [AssetId(NFT_CONTRACT, "2")]

    def test_error_for_current_asset_propagates(self):
        loader = TimelineLoader(_pipeline(FakeFetcher(fail_on="transfer")), ALICE)
        with pytest.raises(FetchError):
            asyncio.run(loader.load(f"{NFT_CONTRACT}/42"))
        assert loader.timeline is None

    def test_invalid_identifier_rejected(self):
        loader = TimelineLoader(_pipeline(FakeFetcher()), ALICE)
        with pytest.raises(InvalidAssetIdError):
            asyncio.run(loader.load("not-an-asset"))
