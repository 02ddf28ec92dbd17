"""
Timeline assembler — merge, sort, classify, pair and name-resolve.

Steps (per asset, once per pipeline run):
1. Concatenate transfer then sale records.
2. Stable sort by created_at, newest first.
3. Classify each record; remember SALE positions and resolution addresses.
4. Swap every SALE with its successor (indices captured before swapping).
5. Resolve all collected addresses in one batched call.
6. Attach display names (resolved name or abbreviated address).
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Sequence
from typing import Union

from nft_history.core.exceptions import ResolutionError
from nft_history.history_logging import get_logger
from nft_history.timeline.classifier import classify
from nft_history.timeline.formatting import counterparty_display_name
from nft_history.timeline.models import EntryKind, RawEvent, Timeline, TimelineEntry

logger = get_logger(__name__)

ResolveNames = Callable[[list[str]], Union[Awaitable[list[str]], list[str]]]


def sort_events(raw_events: Sequence[RawEvent]) -> list[RawEvent]:
    """Newest first; equal timestamps keep their input order."""
    return sorted(raw_events, key=lambda ev: ev.created_at, reverse=True)


def pair_sales(entries: Sequence[TimelineEntry], sale_indices: Sequence[int]) -> list[TimelineEntry]:
    """
    Move each sale one slot later so its transfer shows first.

    Every index in ``sale_indices`` refers to the order before any swap; a
    sale in the last slot stays where it is. Returns a new list.
    """
    paired = list(entries)
    last = len(paired) - 1
    for i in sale_indices:
        if i < last:
            paired[i], paired[i + 1] = paired[i + 1], paired[i]
    return paired


def classify_all(
    raw_events: Sequence[RawEvent],
    contract_address: str,
    registry_address: str,
) -> tuple[list[TimelineEntry], list[int], list[str]]:
    """Classify in order; return (entries, sale indices, addresses to resolve)."""
    entries: list[TimelineEntry] = []
    sale_indices: list[int] = []
    addresses: list[str] = []
    for index, raw in enumerate(raw_events):
        entry, address = classify(raw, contract_address, registry_address)
        if entry.kind == EntryKind.SALE:
            sale_indices.append(index)
        if address:
            addresses.append(address)
        entries.append(entry)
    return entries, sale_indices, addresses


def merge_names(
    entries: Sequence[TimelineEntry],
    addresses: Sequence[str],
    names: Sequence[str],
) -> list[TimelineEntry]:
    """
    Attach display names to every entry with a counterparty.

    ``names`` is aligned position-for-position with ``addresses``; duplicate
    addresses map to the name of their last slot.
    """
    name_by_address = dict(zip(addresses, names))
    merged: list[TimelineEntry] = []
    for entry in entries:
        address = entry.counterparty_address
        if address:
            entry = entry.with_display_name(
                counterparty_display_name(address, name_by_address.get(address))
            )
        merged.append(entry)
    return merged


async def _call_resolver(resolve_names: ResolveNames, addresses: list[str]) -> list[str]:
    try:
        result = resolve_names(list(addresses))
        if inspect.isawaitable(result):
            result = await result
    except ResolutionError:
        raise
    except Exception as e:
        raise ResolutionError(
            f"Name resolution failed: {e}", address_count=len(addresses)
        ) from e
    names = list(result or [])
    if len(names) != len(addresses):
        raise ResolutionError(
            f"Name resolution returned {len(names)} names for {len(addresses)} addresses",
            address_count=len(addresses),
        )
    return ["" if name is None else str(name) for name in names]


async def assemble(
    raw_transfers: Sequence[RawEvent],
    raw_sales: Sequence[RawEvent],
    contract_address: str,
    registry_address: str,
    resolve_names: ResolveNames,
) -> Timeline:
    """
    Build the ordered timeline for one asset.

    Raises ResolutionError if the batched lookup fails; no partially named
    timeline is ever returned.
    """
    raw_events = sort_events([*raw_transfers, *raw_sales])
    entries, sale_indices, addresses = classify_all(raw_events, contract_address, registry_address)
    entries = pair_sales(entries, sale_indices)

    names = await _call_resolver(resolve_names, addresses)
    resolved_count = sum(1 for name in names if name)
    entries = merge_names(entries, addresses, names)

    timeline = Timeline(entries=tuple(entries))
    logger.info(
        "timeline_assembled",
        contract_address=contract_address,
        event_count=len(timeline),
        sale_count=len(sale_indices),
        address_count=len(addresses),
        resolved_count=resolved_count,
        is_short=timeline.is_short,
    )
    return timeline
