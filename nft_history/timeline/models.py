"""
Data models for the token history timeline.

RawEvent mirrors one marketplace asset event; TimelineEntry is the
kind-discriminated output unit handed to the presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from nft_history.core.exceptions import InvalidAssetIdError

# All-zero address used by token standards as "no prior owner"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

WRAPPED_NATIVE_SYMBOL = "WETH"
NATIVE_SYMBOL = "ETH"
DEFAULT_PAYMENT_DECIMALS = 18


class EventCategory(str, Enum):
    """Raw event categories requested from the marketplace."""

    TRANSFER = "transfer"
    SALE = "successful"


class EntryKind(str, Enum):
    """Timeline entry kinds. REGISTRATION and MINT are derived from transfers."""

    REGISTRATION = "ens"
    MINT = "mint"
    SALE = "successful"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class AssetId:
    """Contract address + token id pair identifying one collectible."""

    contract_address: str
    token_id: str

    @classmethod
    def parse(cls, contract_and_token: str) -> "AssetId":
        """Parse ``"<contract>/<tokenId>"``; raise InvalidAssetIdError otherwise."""
        parts = (contract_and_token or "").strip().split("/")
        if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
            raise InvalidAssetIdError(
                f"Expected '<contract>/<tokenId>', got {contract_and_token!r}"
            )
        return cls(contract_address=parts[0].strip(), token_id=parts[1].strip())

    def __str__(self) -> str:
        return f"{self.contract_address}/{self.token_id}"


@dataclass(frozen=True)
class RawEvent:
    """
    One asset event as returned by the marketplace events endpoint.

    Transient: consumed once by the classifier.
    """

    event_category: str
    """Raw category string ("transfer", "successful", or anything newer)."""
    created_at: str
    """ISO-like timestamp; lexicographic order equals chronological order."""
    from_address: str | None = None
    to_address: str | None = None
    payment_symbol: str | None = None
    """Payment token symbol; sales only."""
    payment_decimals: int = DEFAULT_PAYMENT_DECIMALS
    total_price: str | None = None
    """Integer-as-string amount in the payment token's minor units; sales only."""

    @classmethod
    def from_api_item(cls, item: dict[str, Any]) -> "RawEvent":
        """Build from a single ``asset_events`` item; missing nested objects become None."""
        from_account = item.get("from_account") or {}
        to_account = item.get("to_account") or {}
        payment_token = item.get("payment_token") or {}
        decimals = payment_token.get("decimals")
        try:
            payment_decimals = int(decimals) if decimals is not None else DEFAULT_PAYMENT_DECIMALS
        except (TypeError, ValueError):
            payment_decimals = DEFAULT_PAYMENT_DECIMALS
        total_price = item.get("total_price")
        return cls(
            event_category=str(item.get("event_type") or ""),
            created_at=str(item.get("created_date") or ""),
            from_address=from_account.get("address"),
            to_address=to_account.get("address"),
            payment_symbol=payment_token.get("symbol"),
            payment_decimals=payment_decimals,
            total_price=str(total_price) if total_price is not None else None,
        )


@dataclass(frozen=True)
class TimelineEntry:
    """
    One render-ready timeline row.

    Sale fields exist only on SALE entries; a display name exists only
    alongside a counterparty address. Violations raise ValueError at
    construction so downstream code never checks optional chains.
    """

    created_at: str
    kind: EntryKind | str
    """EntryKind for known categories; the raw category string otherwise."""
    counterparty_address: str | None = None
    """Address that gained custody (transfer-derived kinds only)."""
    counterparty_display_name: str | None = None
    sale_amount: str | None = None
    payment_token: str | None = None

    def __post_init__(self) -> None:
        if self.kind != EntryKind.SALE and (
            self.sale_amount is not None or self.payment_token is not None
        ):
            raise ValueError(f"sale fields set on a {self.kind!s} entry")
        if self.counterparty_display_name is not None and not self.counterparty_address:
            raise ValueError("counterparty_display_name requires counterparty_address")

    @property
    def is_known_kind(self) -> bool:
        return isinstance(self.kind, EntryKind)

    def with_display_name(self, display_name: str) -> "TimelineEntry":
        return replace(self, counterparty_display_name=display_name)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dict."""
        return {
            "created_at": self.created_at,
            "kind": self.kind.value if isinstance(self.kind, EntryKind) else self.kind,
            "counterparty_address": self.counterparty_address,
            "counterparty_display_name": self.counterparty_display_name,
            "sale_amount": self.sale_amount,
            "payment_token": self.payment_token,
        }


@dataclass(frozen=True)
class Timeline:
    """Assembled, ordered entries plus the "short" layout hint."""

    entries: tuple[TimelineEntry, ...] = field(default_factory=tuple)

    @property
    def is_short(self) -> bool:
        return len(self.entries) <= 2

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)
