"""
Core utilities — exceptions and cross-cutting helpers shared by the
fetcher, resolver, timeline assembler and API server.
"""

from nft_history.core.exceptions import (
    FetchError,
    InvalidAssetIdError,
    ResolutionError,
    TokenHistoryError,
)

__all__ = [
    "FetchError",
    "InvalidAssetIdError",
    "ResolutionError",
    "TokenHistoryError",
]
