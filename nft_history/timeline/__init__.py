"""
Token history timeline: classification, assembly and presentation.

Turns raw transfer/sale events for one collectible into an ordered,
name-resolved sequence of timeline entries.
"""

from nft_history.timeline.assembler import assemble, pair_sales, sort_events
from nft_history.timeline.classifier import ClassifiedEvent, classify
from nft_history.timeline.models import (
    AssetId,
    EntryKind,
    EventCategory,
    RawEvent,
    Timeline,
    TimelineEntry,
)
from nft_history.timeline.presentation import EntryPresentation, present_entry, present_timeline

__all__ = [
    "AssetId",
    "ClassifiedEvent",
    "EntryKind",
    "EntryPresentation",
    "EventCategory",
    "RawEvent",
    "Timeline",
    "TimelineEntry",
    "assemble",
    "classify",
    "pair_sales",
    "present_entry",
    "present_timeline",
    "sort_events",
]
