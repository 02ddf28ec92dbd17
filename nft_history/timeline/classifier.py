"""
Event classifier — one raw marketplace event to one timeline entry.

Pure and idempotent: the same record always yields the same entry and the
same resolution address. Unknown categories pass through inertly.
"""

from __future__ import annotations

from typing import NamedTuple

from nft_history.timeline.formatting import format_sale_amount
from nft_history.timeline.models import (
    NATIVE_SYMBOL,
    WRAPPED_NATIVE_SYMBOL,
    ZERO_ADDRESS,
    EntryKind,
    EventCategory,
    RawEvent,
    TimelineEntry,
)


class ClassifiedEvent(NamedTuple):
    entry: TimelineEntry
    address_to_resolve: str | None


def _same_address(a: str | None, b: str | None) -> bool:
    return bool(a) and bool(b) and a.lower() == b.lower()


def normalize_payment_token(symbol: str | None) -> str | None:
    """WETH is shown as ETH; every other symbol passes through."""
    return NATIVE_SYMBOL if symbol == WRAPPED_NATIVE_SYMBOL else symbol


def transfer_kind(raw: RawEvent, contract_address: str, registry_address: str) -> EntryKind:
    """TRANSFER, or REGISTRATION/MINT for transfers out of the zero address."""
    if raw.from_address != ZERO_ADDRESS:
        return EntryKind.TRANSFER
    if _same_address(contract_address, registry_address):
        return EntryKind.REGISTRATION
    return EntryKind.MINT


def classify(raw: RawEvent, contract_address: str, registry_address: str) -> ClassifiedEvent:
    """
    Classify one raw event.

    Returns the entry and, for transfer-derived kinds with a recipient, the
    address to send to the reverse name lookup.
    """
    if raw.event_category == EventCategory.TRANSFER:
        counterparty = raw.to_address or None
        entry = TimelineEntry(
            created_at=raw.created_at,
            kind=transfer_kind(raw, contract_address, registry_address),
            counterparty_address=counterparty,
        )
        return ClassifiedEvent(entry, counterparty)

    if raw.event_category == EventCategory.SALE:
        payment_token = normalize_payment_token(raw.payment_symbol)
        entry = TimelineEntry(
            created_at=raw.created_at,
            kind=EntryKind.SALE,
            sale_amount=format_sale_amount(raw.total_price, raw.payment_decimals),
            payment_token=payment_token,
        )
        return ClassifiedEvent(entry, None)

    return ClassifiedEvent(TimelineEntry(created_at=raw.created_at, kind=raw.event_category), None)
