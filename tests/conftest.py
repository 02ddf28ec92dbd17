"""
Pytest fixtures for token history tests.
"""

from __future__ import annotations

import pytest

from tests.factories import ALICE, RecordingResolver


@pytest.fixture
def resolver() -> RecordingResolver:
    return RecordingResolver({ALICE: "alice.eth"})


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every env var the config layer reads so defaults apply."""
    for name in (
        "NETWORK",
        "OPENSEA_API_KEY",
        "OPENSEA_API_URL_TEMPLATE",
        "ETH_RPC_URL",
        "ENS_REGISTRY_NFT_ADDRESS",
        "REVERSE_RECORDS_ADDRESS",
        "HISTORY_REQUEST_TIMEOUT_SEC",
        "HISTORY_MAX_RETRIES",
        "HISTORY_EVENTS_LIMIT",
        "API_HOST",
        "API_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
