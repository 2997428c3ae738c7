import logging
from dataclasses import fields
from datetime import date, datetime
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, HTTPException, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .aggregate_root import Trip
from .date_sequencer import format_date_range
from .value_objects import ItineraryEntry
from trip_planner.auth import get_current_user, AuthenticatedUser
from trip_planner.database import get_db
from trip_planner.storage import TripStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["Trips"])

# ==========================================
# HELPER FUNCTIONS
# ==========================================

def _get_trip(storage: TripStorage, trip_id: str) -> Trip:
    """Load a trip or raise 404."""
    trip = storage.find_by_id(trip_id)
    if not trip:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Trip {trip_id} not found"
        )
    return trip


def _ensure_ownership(trip: Trip, user: AuthenticatedUser):
    if trip.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this trip"
        )


def get_owned_trip(storage: TripStorage, trip_id: str, user: AuthenticatedUser) -> Trip:
    trip = _get_trip(storage, trip_id)
    _ensure_ownership(trip, user)
    return trip


def _to_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None

# Request/Response Models
class DestinationRequest(BaseModel):
    city: str
    days_to_stay: Optional[int] = None


class CreateTripRequest(BaseModel):
    title: str
    description: Optional[str] = None
    start_date: datetime
    end_date: datetime
    home_city: str
    destinations: List[DestinationRequest]


class UpdateTripRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    destinations: Optional[List[DestinationRequest]] = None


class DestinationResponse(BaseModel):
    city: str
    days_to_stay: Optional[int]
    order: int
    start_date: date
    end_date: date
    date_range: str


class ItineraryItemResponse(BaseModel):
    item_id: str
    type: str
    order: int
    description: Optional[str] = None
    confirmation_email_link: Optional[str] = None
    cost: Optional[float] = None

    transportation_type: Optional[str] = None
    depart_city: Optional[str] = None
    arrive_city: Optional[str] = None
    depart_time: Optional[datetime] = None
    arrive_time: Optional[datetime] = None

    lodging_name: Optional[str] = None
    lodging_address: Optional[str] = None
    checkin_time: Optional[datetime] = None
    checkout_time: Optional[datetime] = None

    activity_name: Optional[str] = None
    activity_address: Optional[str] = None
    start_time: Optional[datetime] = None
    duration: Optional[int] = None
    activity_description: Optional[str] = None


class TripSummaryResponse(BaseModel):
    trip_id: str
    title: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    home_city: str
    date_range: str
    total_days: int


class TripResponse(TripSummaryResponse):
    destinations: List[DestinationResponse] = []
    itinerary: List[ItineraryItemResponse] = []


def item_response(entry: ItineraryEntry) -> ItineraryItemResponse:
    values = {f.name: getattr(entry, f.name) for f in fields(entry)}
    values["item_id"] = values.pop("entry_id")
    return ItineraryItemResponse(type=entry.item_type.value, **values)


def _summary_fields(trip: Trip) -> dict:
    return {
        "trip_id": trip.trip_id,
        "title": trip.title,
        "description": trip.description,
        "start_date": trip.start_date,
        "end_date": trip.end_date,
        "home_city": trip.home_city,
        "date_range": format_date_range(trip.start_date, trip.end_date),
        "total_days": trip.total_days(),
    }


def trip_response(trip: Trip) -> TripResponse:
    destinations = [
        DestinationResponse(
            city=d.city,
            days_to_stay=d.days_to_stay,
            order=d.order,
            start_date=d.start_date,
            end_date=d.end_date,
            date_range=format_date_range(d.start_date, d.end_date),
        )
        for d in trip.destination_dates()
    ]
    return TripResponse(
        **_summary_fields(trip),
        destinations=destinations,
        itinerary=[item_response(e) for e in trip.get_itinerary()],
    )

# ==========================================
# ENDPOINTS
# ==========================================

@router.post("/", status_code=status.HTTP_201_CREATED, response_model=TripResponse)
def create_trip(
    request: CreateTripRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a trip and generate its skeleton itinerary."""
    try:
        trip = Trip.plan(
            trip_id=str(uuid4()),
            user_id=current_user.id,
            title=request.title,
            start_date=request.start_date.date(),
            end_date=request.end_date.date(),
            home_city=request.home_city,
            destinations=request.destinations,
            description=request.description,
        )
    except ValueError as e:
        logger.warning("Rejected trip for user %s: %s", current_user.id, e)
        raise HTTPException(status_code=400, detail=str(e))

    TripStorage(db).save(trip)
    logger.info(
        "Created trip %s with %d destinations and %d itinerary items",
        trip.trip_id, len(trip.get_destinations()), len(trip.get_itinerary()),
    )
    return trip_response(trip)


@router.get("/", response_model=List[TripSummaryResponse])
def get_my_trips(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    trips = TripStorage(db).find_by_user(current_user.id)
    return [TripSummaryResponse(**_summary_fields(t)) for t in trips]


@router.get("/{trip_id}", response_model=TripResponse)
def get_trip(
    trip_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    trip = get_owned_trip(TripStorage(db), trip_id, current_user)
    return trip_response(trip)


@router.patch("/{trip_id}", response_model=TripResponse)
def update_trip(
    trip_id: str,
    request: UpdateTripRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Edit trip fields. The itinerary is not regenerated."""
    storage = TripStorage(db)
    trip = get_owned_trip(storage, trip_id, current_user)

    try:
        trip.update_details(
            title=request.title,
            description=request.description,
            start_date=_to_date(request.start_date),
            end_date=_to_date(request.end_date),
        )
        if request.destinations is not None:
            trip.replace_destinations(request.destinations)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    # built before saving so a trip that cannot be rendered is never committed
    response = trip_response(trip)
    storage.save(trip)
    logger.info("Updated trip %s", trip_id)
    return response


@router.delete("/{trip_id}")
def delete_trip(
    trip_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    storage = TripStorage(db)
    get_owned_trip(storage, trip_id, current_user)
    storage.delete(trip_id)
    logger.info("Deleted trip %s", trip_id)
    return {"message": "Trip deleted successfully"}
