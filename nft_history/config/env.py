"""
Environment variable loading and validation for NFT Token History.

- NETWORK: mainnet | rinkeby | goerli ... (default: mainnet)
- OPENSEA_API_KEY: marketplace API key (sent as X-API-KEY when set)
- OPENSEA_API_URL_TEMPLATE: base URL with a {prefix} slot for the network prefix
- ETH_RPC_URL: JSON-RPC endpoint used for reverse name resolution
- ENS_REGISTRY_NFT_ADDRESS / REVERSE_RECORDS_ADDRESS: contract overrides
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is nft_history/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

MAINNET = "mainnet"

# ENS base registrar (ERC-721 token for .eth names)
DEFAULT_ENS_REGISTRY_NFT_ADDRESS = "0x57f1887a8bf19b14fc0df6fd9b2acc9af147ea85"
# ENS ReverseRecords helper contract (batched getNames)
DEFAULT_REVERSE_RECORDS_ADDRESS = "0x3671aE578E63FdF66ad4F3E12CC0c0d71Ac7510C"

DEFAULT_OPENSEA_API_URL_TEMPLATE = "https://{prefix}api.opensea.io/api/v1"
DEFAULT_ETH_RPC_URL = "https://cloudflare-eth.com"

DEFAULT_REQUEST_TIMEOUT_SEC = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_EVENTS_LIMIT = 299


def load_history_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    load_dotenv(_ENV_PATH)


def get_network() -> str:
    """Return NETWORK from env, lowercased. Default: mainnet."""
    load_history_env()
    raw = (os.getenv("NETWORK") or MAINNET).strip().lower()
    return raw or MAINNET


def network_prefix(network: str) -> str:
    """
    Marketplace host prefix for a network: "" for mainnet, "<network>-" otherwise.

    >>> network_prefix("rinkeby")
    'rinkeby-'
    """
    return "" if network == MAINNET else f"{network}-"


def get_opensea_api_key() -> str:
    load_history_env()
    return (os.getenv("OPENSEA_API_KEY") or "").strip()


def get_opensea_api_url_template() -> str:
    load_history_env()
    return (os.getenv("OPENSEA_API_URL_TEMPLATE") or DEFAULT_OPENSEA_API_URL_TEMPLATE).strip()


def get_eth_rpc_url() -> str:
    """Resolve the JSON-RPC URL. Order: ETH_RPC_URL > public default."""
    load_history_env()
    url = (os.getenv("ETH_RPC_URL") or "").strip()
    return url or DEFAULT_ETH_RPC_URL


def get_ens_registry_nft_address() -> str:
    load_history_env()
    return (os.getenv("ENS_REGISTRY_NFT_ADDRESS") or DEFAULT_ENS_REGISTRY_NFT_ADDRESS).strip()


def get_reverse_records_address() -> str:
    load_history_env()
    return (os.getenv("REVERSE_RECORDS_ADDRESS") or DEFAULT_REVERSE_RECORDS_ADDRESS).strip()


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_request_timeout_sec() -> float:
    load_history_env()
    return max(1.0, _float_env("HISTORY_REQUEST_TIMEOUT_SEC", DEFAULT_REQUEST_TIMEOUT_SEC))


def get_max_retries() -> int:
    load_history_env()
    return max(1, _int_env("HISTORY_MAX_RETRIES", DEFAULT_MAX_RETRIES))


def get_events_limit() -> int:
    """Page size for the events endpoint (marketplace caps it at 300)."""
    load_history_env()
    return min(300, max(1, _int_env("HISTORY_EVENTS_LIMIT", DEFAULT_EVENTS_LIMIT)))


def get_api_host() -> str:
    load_history_env()
    return (os.getenv("API_HOST") or "0.0.0.0").strip()


def get_api_port() -> int:
    load_history_env()
    return _int_env("API_PORT", 8000)
