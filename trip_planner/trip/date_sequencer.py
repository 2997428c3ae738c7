"""Per-destination stay windows and date display helpers.

A destination staying ``n`` days occupies ``n`` nights: it starts on the
running cursor date and ends ``n`` days later. The next destination starts on
that same end date (the overlap day, used for the transfer between cities).
"""
import math
from datetime import date, timedelta
from typing import Iterable, List

from .value_objects import DestinationWithDates

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def compute_destination_dates(trip_start_date: date, destinations: Iterable) -> List[DestinationWithDates]:
    """Annotate destinations with start/end dates, walking them in ``order``.

    Every destination must carry a concrete ``days_to_stay``; callers
    substitute a display value for a terminal destination before calling.
    """
    ordered = sorted(destinations, key=lambda d: d.order)

    cursor = trip_start_date
    result = []
    for destination in ordered:
        if destination.days_to_stay is None:
            raise ValueError(f"Destination {destination.city} has no stay length")

        start_date = cursor
        end_date = start_date + timedelta(days=destination.days_to_stay)
        cursor = end_date

        result.append(DestinationWithDates(
            city=destination.city,
            days_to_stay=destination.days_to_stay,
            order=destination.order,
            start_date=start_date,
            end_date=end_date,
        ))
    return result


def format_date_range(start_date: date, end_date: date) -> str:
    start = f"{MONTH_ABBREVIATIONS[start_date.month - 1]} {start_date.day}"

    if start_date.month == end_date.month and start_date.year == end_date.year:
        return f"{start}-{end_date.day}, {end_date.year}"

    end = f"{MONTH_ABBREVIATIONS[end_date.month - 1]} {end_date.day}"
    return f"{start} - {end}, {end_date.year}"


def get_days_between(start_date: date, end_date: date) -> int:
    """Inclusive day count, so the same date on both ends counts as one day."""
    delta = abs(end_date - start_date)
    return math.ceil(delta.total_seconds() / 86400) + 1
