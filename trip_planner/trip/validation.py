"""Input checks run before the itinerary generator is invoked."""
from datetime import date
from typing import Any, Iterable, List, Optional

from .errors import EmptyDestinationList, EmptyOrBlankName, InvalidDateRange, InvalidStayLength
from .value_objects import Destination


def require_name(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise EmptyOrBlankName(f"{field} cannot be empty")
    return value.strip()


def validate_date_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise InvalidDateRange("Start date must be before end date")


def validate_stay_span(start_date: date, destinations: Iterable[Destination]) -> None:
    """Reject stay lengths that would run the schedule past the last representable date.

    One spare day is kept for the terminal destination, which is always shown
    as lasting at least a day.
    """
    days_left = date.max.toordinal() - start_date.toordinal()
    booked = 0
    for destination in destinations:
        if destination.days_to_stay is None:
            continue
        booked += destination.days_to_stay
        if booked >= days_left:
            raise InvalidStayLength(f"Days to stay for {destination.city} run past the supported calendar")


def _read(raw: Any, key: str):
    if isinstance(raw, dict):
        return raw.get(key)
    return getattr(raw, key, None)


def normalize_destinations(raw_destinations: Iterable[Any]) -> List[Destination]:
    """Turn request destinations into ordered ``Destination`` values.

    Order is taken from list position. Only the last destination may leave
    ``days_to_stay`` unset; any stay length given must be at least 1.
    """
    raw_list = list(raw_destinations or [])
    if not raw_list:
        raise EmptyDestinationList("At least one destination is required")

    last_index = len(raw_list) - 1
    destinations = []
    for index, raw in enumerate(raw_list):
        city = require_name(_read(raw, "city"), "Destination city")
        days_to_stay = _read(raw, "days_to_stay")

        if days_to_stay is None and index != last_index:
            raise InvalidStayLength(f"Days to stay is required for {city}")
        if days_to_stay is not None and days_to_stay < 1:
            raise InvalidStayLength(f"Days to stay for {city} must be at least 1")

        destinations.append(Destination(city=city, days_to_stay=days_to_stay, order=index))
    return destinations
