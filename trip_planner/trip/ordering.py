"""Order-index bookkeeping for itinerary entries.

Transportation, lodging and activity entries of one trip share a single
order space. Every operation here returns a new list whose orders are
unique and contiguous from 0.
"""
from dataclasses import replace
from typing import List, Optional, Sequence

from .errors import ItineraryItemNotFound
from .value_objects import ItineraryEntry


def renumber(entries: Sequence[ItineraryEntry]) -> List[ItineraryEntry]:
    ordered = sorted(entries, key=lambda e: e.order)
    return [e if e.order == i else replace(e, order=i) for i, e in enumerate(ordered)]


def insert_at(
    entries: Sequence[ItineraryEntry],
    entry: ItineraryEntry,
    position: Optional[int] = None,
) -> List[ItineraryEntry]:
    """Insert ``entry`` at ``position``, shifting entries at or after it by one.

    ``None`` or a position past the end appends.
    """
    ordered = renumber(entries)
    if position is None or position > len(ordered):
        position = len(ordered)
    if position < 0:
        raise ValueError("Position cannot be negative")

    ordered.insert(position, entry)
    return [e if e.order == i else replace(e, order=i) for i, e in enumerate(ordered)]


def remove(entries: Sequence[ItineraryEntry], entry_id: str) -> List[ItineraryEntry]:
    remaining = [e for e in entries if e.entry_id != entry_id]
    if len(remaining) == len(entries):
        raise ItineraryItemNotFound(f"Itinerary item {entry_id} not found")
    return renumber(remaining)


def move(entries: Sequence[ItineraryEntry], entry_id: str, position: int) -> List[ItineraryEntry]:
    target = next((e for e in entries if e.entry_id == entry_id), None)
    if target is None:
        raise ItineraryItemNotFound(f"Itinerary item {entry_id} not found")
    if position < 0:
        raise ValueError("Position cannot be negative")
    return insert_at(remove(entries, entry_id), target, position)
