"""
Presentation adapter — timeline entry to label, icon, date and clickability.

REGISTRATION and SALE rows are never interactive. MINT and TRANSFER rows
link to the counterparty's showcase unless the counterparty is the viewer.
Unknown kinds render inertly with an empty label.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from nft_history.timeline.models import EntryKind, Timeline, TimelineEntry

ICONS: dict[EntryKind, str] = {
    EntryKind.REGISTRATION: "✦",
    EntryKind.MINT: "★",
    EntryKind.SALE: "◆",
    EntryKind.TRANSFER: "➤",
}

CLICKABLE_SUFFIX = " ›"


@dataclass(frozen=True)
class EntryPresentation:
    label: str
    icon: str
    is_clickable: bool
    date_label: str
    is_first: bool
    target_address: str | None = None

    @property
    def text(self) -> str:
        suffix = CLICKABLE_SUFFIX if self.is_clickable else ""
        return f"{self.icon} {self.label}{suffix}".strip()


def parse_created_at(created_at: str) -> datetime | None:
    """Parse the ISO-like timestamp; naive values are UTC. None when unparseable."""
    if not created_at:
        return None
    text = created_at.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def human_readable_date(created_at: str, now: datetime | None = None) -> str:
    """Short date: "Mar 3" within the current year, "Mar 3, 2021" otherwise; "" if unparseable."""
    dt = parse_created_at(created_at)
    if dt is None:
        return ""
    now = now or datetime.now(timezone.utc)
    if dt.year == now.year:
        return f"{dt:%b} {dt.day}"
    return f"{dt:%b} {dt.day}, {dt.year}"


def is_clickable(entry: TimelineEntry, account_address: str | None) -> bool:
    if not entry.is_known_kind or entry.kind not in (EntryKind.MINT, EntryKind.TRANSFER):
        return False
    if not entry.counterparty_address:
        return False
    return (account_address or "").lower() != entry.counterparty_address.lower()


def label_for(entry: TimelineEntry) -> str:
    if not entry.is_known_kind:
        return ""
    name = entry.counterparty_display_name or ""
    if entry.kind == EntryKind.REGISTRATION:
        return "Registered"
    if entry.kind == EntryKind.MINT:
        return f"Minted by {name}"
    if entry.kind == EntryKind.SALE:
        return f"Sold for {entry.sale_amount or ''} {entry.payment_token or ''}".strip()
    if entry.kind == EntryKind.TRANSFER:
        return f"Sent to {name}"
    return ""


def present_entry(
    entry: TimelineEntry,
    account_address: str | None,
    *,
    index: int = 0,
    now: datetime | None = None,
) -> EntryPresentation:
    clickable = is_clickable(entry, account_address)
    return EntryPresentation(
        label=label_for(entry),
        icon=ICONS.get(entry.kind, "") if entry.is_known_kind else "",
        is_clickable=clickable,
        date_label=human_readable_date(entry.created_at, now=now),
        is_first=index == 0,
        target_address=entry.counterparty_address if clickable else None,
    )


def present_timeline(
    timeline: Timeline,
    account_address: str | None,
    *,
    now: datetime | None = None,
) -> list[EntryPresentation]:
    return [
        present_entry(entry, account_address, index=i, now=now)
        for i, entry in enumerate(timeline.entries)
    ]
