"""
Application-level exceptions.

Batch-level failures (fetch, name resolution) are fatal to one pipeline
invocation and surface to the caller. Per-record field gaps never raise.
"""

from __future__ import annotations


class TokenHistoryError(Exception):
    """Base class for all token history failures."""


class InvalidAssetIdError(TokenHistoryError, ValueError):
    """Asset identifier is not of the form ``<contract>/<tokenId>``."""


class FetchError(TokenHistoryError):
    """A raw event (or semi-fungibility) fetch failed."""

    def __init__(self, message: str, *, event_category: str | None = None) -> None:
        super().__init__(message)
        self.event_category = event_category


class ResolutionError(TokenHistoryError):
    """The batched reverse name lookup failed or returned a misaligned result."""

    def __init__(self, message: str, *, address_count: int | None = None) -> None:
        super().__init__(message)
        self.address_count = address_count
