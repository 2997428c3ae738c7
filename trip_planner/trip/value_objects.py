from dataclasses import dataclass, fields
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional


class ItineraryType(Enum):
    TRANSPORTATION = "TRANSPORTATION"
    LODGING = "LODGING"
    ACTIVITY = "ACTIVITY"


@dataclass(frozen=True)
class Destination:
    city: str
    days_to_stay: Optional[int]
    order: int = 0

    def __post_init__(self):
        if not self.city or not self.city.strip():
            raise ValueError("Destination city cannot be empty")
        if self.order < 0:
            raise ValueError("Destination order cannot be negative")

    def is_terminal(self) -> bool:
        return self.days_to_stay is None


@dataclass(frozen=True)
class DestinationWithDates:
    city: str
    days_to_stay: Optional[int]
    order: int
    start_date: date
    end_date: date

    def nights(self) -> int:
        return (self.end_date - self.start_date).days


# ==========================================
# ITINERARY ENTRIES
# ==========================================

@dataclass(frozen=True)
class ItineraryEntry:
    order: int
    entry_id: Optional[str] = None
    description: Optional[str] = None
    cost: Optional[float] = None
    confirmation_email_link: Optional[str] = None

    item_type: ClassVar[ItineraryType]

    def __post_init__(self):
        if self.order < 0:
            raise ValueError("Order cannot be negative")
        if self.cost is not None and self.cost < 0:
            raise ValueError("Cost cannot be negative")

    @classmethod
    def field_names(cls) -> set:
        return {f.name for f in fields(cls)}


@dataclass(frozen=True)
class TransportationEntry(ItineraryEntry):
    transportation_type: Optional[str] = None
    depart_city: Optional[str] = None
    arrive_city: Optional[str] = None
    depart_time: Optional[datetime] = None
    arrive_time: Optional[datetime] = None

    item_type: ClassVar[ItineraryType] = ItineraryType.TRANSPORTATION

    def __post_init__(self):
        super().__post_init__()
        if self.depart_time and self.arrive_time and self.arrive_time < self.depart_time:
            raise ValueError("Arrival time must be after departure time")


@dataclass(frozen=True)
class LodgingEntry(ItineraryEntry):
    lodging_name: Optional[str] = None
    lodging_address: Optional[str] = None
    checkin_time: Optional[datetime] = None
    checkout_time: Optional[datetime] = None

    item_type: ClassVar[ItineraryType] = ItineraryType.LODGING

    def __post_init__(self):
        super().__post_init__()
        if self.checkin_time and self.checkout_time and self.checkout_time < self.checkin_time:
            raise ValueError("Check-out time must be after check-in time")


@dataclass(frozen=True)
class ActivityEntry(ItineraryEntry):
    activity_name: Optional[str] = None
    activity_address: Optional[str] = None
    start_time: Optional[datetime] = None
    duration: Optional[int] = None  # minutes
    activity_description: Optional[str] = None

    item_type: ClassVar[ItineraryType] = ItineraryType.ACTIVITY

    def __post_init__(self):
        super().__post_init__()
        if self.duration is not None and self.duration <= 0:
            raise ValueError("Activity duration must be greater than zero")


ENTRY_CLASSES = {
    ItineraryType.TRANSPORTATION: TransportationEntry,
    ItineraryType.LODGING: LodgingEntry,
    ItineraryType.ACTIVITY: ActivityEntry,
}


def entry_from_fields(item_type: ItineraryType, **values) -> ItineraryEntry:
    """Build the entry variant for ``item_type``, ignoring fields of other kinds.

    Fields that are ``None`` are dropped so the dataclass defaults apply.
    """
    cls = ENTRY_CLASSES[ItineraryType(item_type)]
    allowed = cls.field_names()
    return cls(**{k: v for k, v in values.items() if k in allowed and v is not None})
