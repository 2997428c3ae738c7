from dataclasses import replace
from datetime import date, timedelta
from typing import Any, Iterable, List, Optional
from uuid import uuid4

from . import ordering
from .date_sequencer import compute_destination_dates, get_days_between
from .errors import ItineraryItemNotFound
from .itinerary_generator import generate_itinerary
from .validation import normalize_destinations, require_name, validate_date_range, validate_stay_span
from .value_objects import Destination, DestinationWithDates, ItineraryEntry

# Fields an entry update may not touch; order changes go through move_entry
PROTECTED_ENTRY_FIELDS = {"order", "entry_id"}


class Trip:
    def __init__(
        self,
        trip_id: str,
        user_id: str,
        title: str,
        start_date: date,
        end_date: date,
        home_city: str,
        destinations: Iterable[Any],
        description: Optional[str] = None,
        itinerary: Optional[List[ItineraryEntry]] = None,
    ):
        validate_date_range(start_date, end_date)

        self.trip_id = trip_id
        self.user_id = user_id
        self.title = require_name(title, "Title")
        self.home_city = require_name(home_city, "Home city")
        self.description = description.strip() if description and description.strip() else None
        self.start_date = start_date
        self.end_date = end_date
        self._destinations: List[Destination] = normalize_destinations(destinations)
        validate_stay_span(start_date, self._destinations)
        self._itinerary: List[ItineraryEntry] = ordering.renumber(itinerary or [])

    @classmethod
    def plan(
        cls,
        trip_id: str,
        user_id: str,
        title: str,
        start_date: date,
        end_date: date,
        home_city: str,
        destinations: Iterable[Any],
        description: Optional[str] = None,
    ) -> "Trip":
        """Create a trip and derive its skeleton itinerary from the destinations."""
        trip = cls(trip_id, user_id, title, start_date, end_date, home_city, destinations, description)
        generated = generate_itinerary(trip.home_city, trip._destinations, trip.start_date, trip.end_date)
        trip._itinerary = [replace(entry, entry_id=str(uuid4())) for entry in generated]
        return trip

    # ==========================================
    # TRIP DETAILS
    # ==========================================

    def update_details(
        self,
        title: Optional[str] = None,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> None:
        new_start = start_date or self.start_date
        new_end = end_date or self.end_date
        validate_date_range(new_start, new_end)
        validate_stay_span(new_start, self._destinations)
        new_title = require_name(title, "Title") if title is not None else self.title

        self.title = new_title
        self.start_date = new_start
        self.end_date = new_end
        if description is not None:
            self.description = description.strip() or None

    def replace_destinations(self, destinations: Iterable[Any]) -> None:
        # Manual edit; the itinerary is left as the user shaped it
        normalized = normalize_destinations(destinations)
        validate_stay_span(self.start_date, normalized)
        self._destinations = normalized

    def get_destinations(self) -> List[Destination]:
        return self._destinations.copy()

    def destination_dates(self) -> List[DestinationWithDates]:
        """Stay windows for display.

        A terminal destination has no stay length of its own, so it is shown
        as lasting until the trip end date (at least one day).
        """
        booked_days = sum(d.days_to_stay for d in self._destinations if d.days_to_stay is not None)
        cursor = self.start_date + timedelta(days=booked_days)
        display = [
            d if d.days_to_stay is not None
            else replace(d, days_to_stay=max((self.end_date - cursor).days, 1))
            for d in self._destinations
        ]
        windows = compute_destination_dates(self.start_date, display)
        # keep the terminal marker visible to callers
        terminal_orders = {d.order for d in self._destinations if d.is_terminal()}
        return [replace(w, days_to_stay=None) if w.order in terminal_orders else w for w in windows]

    def total_days(self) -> int:
        return get_days_between(self.start_date, self.end_date)

    # ==========================================
    # ITINERARY
    # ==========================================

    def get_itinerary(self) -> List[ItineraryEntry]:
        return self._itinerary.copy()

    def get_entry(self, entry_id: str) -> ItineraryEntry:
        for entry in self._itinerary:
            if entry.entry_id == entry_id:
                return entry
        raise ItineraryItemNotFound(f"Itinerary item {entry_id} not found")

    def add_entry(self, entry: ItineraryEntry, position: Optional[int] = None) -> ItineraryEntry:
        if entry.entry_id is None:
            entry = replace(entry, entry_id=str(uuid4()))
        self._itinerary = ordering.insert_at(self._itinerary, entry, position)
        return self.get_entry(entry.entry_id)

    def update_entry(self, entry_id: str, **changes) -> ItineraryEntry:
        entry = self.get_entry(entry_id)

        protected = PROTECTED_ENTRY_FIELDS.intersection(changes)
        if protected:
            raise ValueError(f"Cannot update {', '.join(sorted(protected))} directly")
        unknown = set(changes) - entry.field_names()
        if unknown:
            raise ValueError(
                f"Fields {', '.join(sorted(unknown))} do not apply to {entry.item_type.value.lower()} items"
            )

        updated = replace(entry, **changes)
        self._itinerary = [updated if e.entry_id == entry_id else e for e in self._itinerary]
        return updated

    def move_entry(self, entry_id: str, position: int) -> ItineraryEntry:
        self._itinerary = ordering.move(self._itinerary, entry_id, position)
        return self.get_entry(entry_id)

    def remove_entry(self, entry_id: str) -> None:
        self._itinerary = ordering.remove(self._itinerary, entry_id)
