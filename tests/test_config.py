"""
Tests for env-driven configuration (config.env, config.settings).
"""

from __future__ import annotations

from nft_history.config import get_settings
from nft_history.config import env


def test_defaults(clean_env):
    settings = get_settings()
    assert settings.network == "mainnet"
    assert settings.network_prefix == ""
    assert settings.opensea_base_url == "https://api.opensea.io/api/v1"
    assert settings.eth_rpc_url == env.DEFAULT_ETH_RPC_URL
    assert settings.ens_registry_nft_address == env.DEFAULT_ENS_REGISTRY_NFT_ADDRESS
    assert settings.reverse_records_address == env.DEFAULT_REVERSE_RECORDS_ADDRESS
    assert settings.events_limit == 299
    assert settings.max_retries == 3
    assert settings.opensea_api_key == ""


def test_testnet_prefix(clean_env):
    clean_env.setenv("NETWORK", "Rinkeby")
    settings = get_settings()
    assert settings.network == "rinkeby"
    assert settings.opensea_base_url == "https://rinkeby-api.opensea.io/api/v1"


def test_network_prefix():
    assert env.network_prefix("mainnet") == ""
    assert env.network_prefix("goerli") == "goerli-"


def test_overrides_and_bounds(clean_env):
    clean_env.setenv("OPENSEA_API_KEY", " key ")
    clean_env.setenv("HISTORY_EVENTS_LIMIT", "5000")
    clean_env.setenv("HISTORY_MAX_RETRIES", "0")
    clean_env.setenv("HISTORY_REQUEST_TIMEOUT_SEC", "not-a-number")
    clean_env.setenv("API_PORT", "9001")
    settings = get_settings()
    assert settings.opensea_api_key == "key"
    assert settings.events_limit == 300
    assert settings.max_retries == 1
    assert settings.request_timeout_sec == env.DEFAULT_REQUEST_TIMEOUT_SEC
    assert settings.api_port == 9001
