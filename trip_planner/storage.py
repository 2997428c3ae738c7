from dataclasses import fields
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from trip_planner.database import DestinationModel, ItineraryItemModel, TripModel
from trip_planner.trip.aggregate_root import Trip
from trip_planner.trip.value_objects import Destination, ItineraryEntry, ItineraryType, entry_from_fields

ITEM_COLUMNS = (
    "description", "confirmation_email_link", "cost",
    "transportation_type", "depart_time", "arrive_time", "depart_city", "arrive_city",
    "lodging_name", "checkin_time", "checkout_time", "lodging_address",
    "activity_name", "start_time", "duration", "activity_address", "activity_description",
)


# ============================================================================
# MAPPING
# ============================================================================

def _apply_entry(model: ItineraryItemModel, entry: ItineraryEntry) -> None:
    model.type = entry.item_type.value
    model.order = entry.order
    values = {f.name: getattr(entry, f.name) for f in fields(entry)}
    # columns of other kinds are cleared
    for column in ITEM_COLUMNS:
        setattr(model, column, values.get(column))


def _entry_from_model(model: ItineraryItemModel) -> ItineraryEntry:
    values = {column: getattr(model, column) for column in ITEM_COLUMNS}
    return entry_from_fields(ItineraryType(model.type), order=model.order, entry_id=model.id, **values)


def _trip_from_model(model: TripModel) -> Trip:
    destinations = [
        Destination(city=d.city, days_to_stay=d.days_to_stay, order=d.order)
        for d in sorted(model.destinations, key=lambda d: d.order)
    ]
    return Trip(
        trip_id=model.trip_id,
        user_id=model.user_id,
        title=model.title,
        start_date=model.start_date,
        end_date=model.end_date,
        home_city=model.home_city,
        destinations=destinations,
        description=model.description,
        itinerary=[_entry_from_model(m) for m in model.itinerary_items],
    )


# ============================================================================
# STORAGE
# ============================================================================

class TripStorage:
    def __init__(self, session: Session):
        self.session = session

    def save(self, trip: Trip) -> None:
        """Write the trip, its destinations and its itinerary in one commit."""
        model = self.session.get(TripModel, trip.trip_id)
        if model is None:
            model = TripModel(trip_id=trip.trip_id)
            self.session.add(model)

        model.user_id = trip.user_id
        model.title = trip.title
        model.description = trip.description
        model.start_date = trip.start_date
        model.end_date = trip.end_date
        model.home_city = trip.home_city

        # Destinations are replaced wholesale
        model.destinations = [
            DestinationModel(city=d.city, days_to_stay=d.days_to_stay, order=d.order)
            for d in trip.get_destinations()
        ]

        existing = {item.id: item for item in model.itinerary_items}
        items = []
        for entry in trip.get_itinerary():
            item = existing.pop(entry.entry_id, None) or ItineraryItemModel(id=entry.entry_id)
            _apply_entry(item, entry)
            items.append(item)
        model.itinerary_items = items

        self.session.commit()

    def find_by_id(self, trip_id: str) -> Optional[Trip]:
        model = self.session.get(TripModel, trip_id)
        return _trip_from_model(model) if model else None

    def find_by_user(self, user_id: str) -> List[Trip]:
        stmt = (
            select(TripModel)
            .where(TripModel.user_id == user_id)
            .order_by(TripModel.start_date.desc())
        )
        return [_trip_from_model(m) for m in self.session.scalars(stmt)]

    def delete(self, trip_id: str) -> bool:
        model = self.session.get(TripModel, trip_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True


class ItineraryItemStorage:
    def __init__(self, session: Session):
        self.session = session

    def find_trip_id(self, item_id: str) -> Optional[str]:
        model = self.session.get(ItineraryItemModel, item_id)
        return model.trip_id if model else None

    def list_by_trip(self, trip_id: str) -> List[ItineraryEntry]:
        stmt = (
            select(ItineraryItemModel)
            .where(ItineraryItemModel.trip_id == trip_id)
            .order_by(ItineraryItemModel.order.asc())
        )
        return [_entry_from_model(m) for m in self.session.scalars(stmt)]
