import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from .errors import ItineraryItemNotFound
from .itinerary_generator import generate_activity_name, generate_lodging_name
from .trip_api import ItineraryItemResponse, get_owned_trip, item_response
from .value_objects import ItineraryType, entry_from_fields
from trip_planner.auth import get_current_user, AuthenticatedUser
from trip_planner.database import get_db
from trip_planner.storage import ItineraryItemStorage, TripStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/itinerary-items", tags=["Itinerary"])

DATETIME_FIELDS = ("depart_time", "arrive_time", "checkin_time", "checkout_time", "start_time")


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # stored timestamps carry no zone
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _item_fields(request: BaseModel) -> dict:
    values = request.model_dump(exclude_unset=True)
    for name in DATETIME_FIELDS:
        if name in values:
            values[name] = _naive_utc(values[name])
    return values


def _find_trip_for_item(db: Session, item_id: str, user: AuthenticatedUser):
    trip_id = ItineraryItemStorage(db).find_trip_id(item_id)
    if trip_id is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Itinerary item not found"
        )
    storage = TripStorage(db)
    return storage, get_owned_trip(storage, trip_id, user)

# Request/Response Models
class ItineraryItemFields(BaseModel):
    description: Optional[str] = None
    confirmation_email_link: Optional[str] = None
    cost: Optional[float] = None

    transportation_type: Optional[str] = None
    depart_time: Optional[datetime] = None
    arrive_time: Optional[datetime] = None
    depart_city: Optional[str] = None
    arrive_city: Optional[str] = None

    lodging_name: Optional[str] = None
    checkin_time: Optional[datetime] = None
    checkout_time: Optional[datetime] = None
    lodging_address: Optional[str] = None

    activity_name: Optional[str] = None
    start_time: Optional[datetime] = None
    duration: Optional[int] = None
    activity_address: Optional[str] = None
    activity_description: Optional[str] = None


class CreateItineraryItemRequest(ItineraryItemFields):
    trip_id: str
    type: ItineraryType
    # insert position; appended when omitted
    order: Optional[int] = Field(default=None, ge=0)


class MoveItineraryItemRequest(BaseModel):
    position: int = Field(ge=0)


class SuggestionResponse(BaseModel):
    lodging_name: Optional[str] = None
    activity_name: str

# ==========================================
# ENDPOINTS
# ==========================================

@router.get("/suggestions", response_model=SuggestionResponse)
def suggest_names(city: Optional[str] = None, current_user: AuthenticatedUser = Depends(get_current_user)):
    """Placeholder names for a new lodging or activity."""
    return SuggestionResponse(
        lodging_name=generate_lodging_name(city.strip()) if city and city.strip() else None,
        activity_name=generate_activity_name(),
    )


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=ItineraryItemResponse)
def create_item(
    request: CreateItineraryItemRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    storage = TripStorage(db)
    trip = get_owned_trip(storage, request.trip_id, current_user)

    values = _item_fields(request)
    for key in ("trip_id", "type", "order"):
        values.pop(key, None)

    try:
        # order is a placeholder until insert_at assigns the real position
        entry = entry_from_fields(request.type, order=0, **values)
        entry = trip.add_entry(entry, position=request.order)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    storage.save(trip)
    logger.info("Added %s item %s to trip %s", request.type.value, entry.entry_id, trip.trip_id)
    return item_response(entry)


@router.patch("/{item_id}", response_model=ItineraryItemResponse)
def update_item(
    item_id: str,
    request: ItineraryItemFields,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    storage, trip = _find_trip_for_item(db, item_id, current_user)
    try:
        entry = trip.update_entry(item_id, **_item_fields(request))
    except ItineraryItemNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    storage.save(trip)
    return item_response(entry)


@router.post("/{item_id}/move", response_model=ItineraryItemResponse)
def move_item(
    item_id: str,
    request: MoveItineraryItemRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    storage, trip = _find_trip_for_item(db, item_id, current_user)
    try:
        entry = trip.move_entry(item_id, request.position)
    except ItineraryItemNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    storage.save(trip)
    logger.info("Moved item %s to position %d", item_id, entry.order)
    return item_response(entry)


@router.delete("/{item_id}")
def delete_item(
    item_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    storage, trip = _find_trip_for_item(db, item_id, current_user)
    try:
        trip.remove_entry(item_id)
    except ItineraryItemNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    storage.save(trip)
    logger.info("Removed item %s from trip %s", item_id, trip.trip_id)
    return {"message": "Itinerary item deleted successfully"}
