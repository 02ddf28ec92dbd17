"""
Marketplace event fetcher (OpenSea v1 REST API).
"""

from nft_history.opensea.client import SEMI_FUNGIBLE_CONTRACT_TYPE, OpenSeaClient

__all__ = ["OpenSeaClient", "SEMI_FUNGIBLE_CONTRACT_TYPE"]
