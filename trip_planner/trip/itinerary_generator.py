"""Skeleton itinerary generation.

Runs once when a trip is created. Produces one inbound transportation leg per
destination, a lodging stay for every non-terminal destination, and a final
return leg home timed off the trip end date.
"""
import logging
import random
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Sequence

from .errors import ItineraryContractError
from .value_objects import Destination, ItineraryEntry, LodgingEntry, TransportationEntry

logger = logging.getLogger(__name__)

DEFAULT_TRANSPORTATION_TYPE = "flight"

# Placeholder hours; no real schedule lookup happens here
DEPART_HOUR = 8
ARRIVE_HOUR = 12
CHECKIN_HOUR = 15
CHECKOUT_HOUR = 11
RETURN_DEPART_HOUR = 10
RETURN_ARRIVE_HOUR = 14

LODGING_PREFIXES = ("Grand", "Central", "Royal", "Plaza", "Downtown", "Luxury")
LODGING_SUFFIXES = ("Hotel", "Inn", "Suites", "Resort")
ACTIVITY_NAMES = (
    "City Tour",
    "Museum Visit",
    "Local Restaurant",
    "Shopping District",
    "Cultural Experience",
    "Sightseeing",
    "Guided Tour",
    "Local Cuisine Tasting",
)


def _at(day: date, hour: int) -> datetime:
    return datetime.combine(day, time(hour=hour))


def _check_destinations(destinations: Sequence[Destination]) -> None:
    last_index = len(destinations) - 1
    for index, destination in enumerate(destinations):
        if destination.days_to_stay is None and index != last_index:
            raise ItineraryContractError(
                f"Only the last destination may omit its stay length ({destination.city} at position {index})"
            )
        if destination.days_to_stay is not None and destination.days_to_stay < 0:
            raise ItineraryContractError(
                f"Stay length for {destination.city} cannot be negative"
            )


def generate_itinerary(
    home_city: str,
    destinations: Sequence[Destination],
    start_date: date,
    end_date: date,
) -> List[ItineraryEntry]:
    """Build the ordered transportation and lodging entries for a trip.

    ``destinations`` must already be in travel order; it is not re-sorted.
    """
    _check_destinations(destinations)

    items: List[ItineraryEntry] = []
    order_counter = 0
    current_date = start_date
    last_index = len(destinations) - 1

    for index, destination in enumerate(destinations):
        depart_city = home_city if index == 0 else destinations[index - 1].city

        items.append(TransportationEntry(
            order=order_counter,
            transportation_type=DEFAULT_TRANSPORTATION_TYPE,
            depart_city=depart_city,
            arrive_city=destination.city,
            depart_time=_at(current_date, DEPART_HOUR),
            arrive_time=_at(current_date, ARRIVE_HOUR),
            description=f"Transportation from {depart_city} to {destination.city}",
        ))
        order_counter += 1

        if index != last_index and destination.days_to_stay:
            checkout_date = current_date + timedelta(days=destination.days_to_stay)
            items.append(LodgingEntry(
                order=order_counter,
                lodging_name=f"Hotel in {destination.city}",
                lodging_address=destination.city,
                checkin_time=_at(current_date, CHECKIN_HOUR),
                checkout_time=_at(checkout_date, CHECKOUT_HOUR),
                description=f"Accommodation in {destination.city}",
            ))
            order_counter += 1
            # overlap day: the next leg departs on checkout day
            current_date = checkout_date

    if destinations:
        last_city = destinations[-1].city
        items.append(TransportationEntry(
            order=order_counter,
            transportation_type=DEFAULT_TRANSPORTATION_TYPE,
            depart_city=last_city,
            arrive_city=home_city,
            depart_time=_at(end_date, RETURN_DEPART_HOUR),
            arrive_time=_at(end_date, RETURN_ARRIVE_HOUR),
            description=f"Return transportation from {last_city} to {home_city}",
        ))

    logger.debug("Generated %d itinerary items for %d destinations", len(items), len(destinations))
    return items


def generate_lodging_name(city: str, rng: Optional[random.Random] = None) -> str:
    rng = rng or random.SystemRandom()
    prefix = rng.choice(LODGING_PREFIXES)
    suffix = rng.choice(LODGING_SUFFIXES)
    return f"{prefix} {city} {suffix}"


def generate_activity_name(rng: Optional[random.Random] = None) -> str:
    rng = rng or random.SystemRandom()
    return rng.choice(ACTIVITY_NAMES)
