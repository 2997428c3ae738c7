from datetime import datetime, timezone

from fastapi import Request
from sqlalchemy import (
    create_engine, Column, String, Integer, Boolean, Date,
    Text, Numeric, DateTime, ForeignKey, event
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, relationship
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)

# ============================================================================
# ORM MODELS
# ============================================================================

class UserModel(Base):
    __tablename__ = "users"

    user_id = Column(String, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    email = Column(String, unique=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


class TripModel(Base):
    __tablename__ = "trips"

    trip_id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    home_city = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    destinations = relationship(
        "DestinationModel", back_populates="trip",
        cascade="all, delete-orphan", order_by="DestinationModel.order",
    )
    itinerary_items = relationship(
        "ItineraryItemModel", back_populates="trip",
        cascade="all, delete-orphan", order_by="ItineraryItemModel.order",
    )


class DestinationModel(Base):
    __tablename__ = "destinations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    trip_id = Column(String, ForeignKey("trips.trip_id", ondelete="CASCADE"), nullable=False)
    city = Column(String, nullable=False)
    # NULL marks the terminal destination
    days_to_stay = Column(Integer, nullable=True)
    order = Column(Integer, nullable=False)

    trip = relationship("TripModel", back_populates="destinations")


class ItineraryItemModel(Base):
    __tablename__ = "itinerary_items"

    id = Column(String, primary_key=True)
    trip_id = Column(String, ForeignKey("trips.trip_id", ondelete="CASCADE"), nullable=False)
    type = Column(String(20), nullable=False)
    order = Column(Integer, nullable=False)

    description = Column(Text, nullable=True)
    confirmation_email_link = Column(String, nullable=True)
    cost = Column(Numeric(precision=12, scale=2, asdecimal=False), nullable=True)

    # Transportation
    transportation_type = Column(String(50), nullable=True)
    depart_time = Column(DateTime, nullable=True)
    arrive_time = Column(DateTime, nullable=True)
    depart_city = Column(String, nullable=True)
    arrive_city = Column(String, nullable=True)

    # Lodging
    lodging_name = Column(String, nullable=True)
    checkin_time = Column(DateTime, nullable=True)
    checkout_time = Column(DateTime, nullable=True)
    lodging_address = Column(String, nullable=True)

    # Activity
    activity_name = Column(String, nullable=True)
    start_time = Column(DateTime, nullable=True)
    duration = Column(Integer, nullable=True)
    activity_address = Column(String, nullable=True)
    activity_description = Column(Text, nullable=True)

    trip = relationship("TripModel", back_populates="itinerary_items")


# ============================================================================
# HELPERS
# ============================================================================

def init_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # in-memory databases only live as long as their single connection
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, echo=echo, **kwargs)

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


def drop_tables(engine: Engine) -> None:
    """Drop all tables (use with caution)."""
    Base.metadata.drop_all(bind=engine)


# One session per request
def get_db(request: Request):
    session_factory = request.app.state.session_factory
    with session_factory() as session:
        yield session
