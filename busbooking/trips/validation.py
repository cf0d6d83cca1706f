import math
from datetime import datetime, timezone
from zoneinfo import ZoneInfo
from sqlalchemy.orm import Session
from busbooking.config import settings
from busbooking.exceptions import ValidationError
from busbooking.models import Company, Route, Station, TransportType

# (field, model, label) checked before a trip is written
REFERENCES = (
    ("route_id", Route, "Route"),
    ("company_id", Company, "Company"),
    ("transport_type_id", TransportType, "Transport type"),
    ("departure_station_id", Station, "Departure station"),
    ("arrival_station_id", Station, "Arrival station"),
)

def to_utc(value: datetime) -> datetime:
    """The instant a timestamp denotes; naive values are wall-clock time in ``settings.TIMEZONE``"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo(settings.TIMEZONE))
    return value.astimezone(timezone.utc)

def to_local_naive(value: datetime) -> datetime:
    """Trips are stored as naive wall-clock time in ``settings.TIMEZONE``"""
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(settings.TIMEZONE)).replace(tzinfo=None)

def derive_duration_minutes(departure_time: datetime, arrival_time: datetime) -> int:
    """Whole minutes between departure and arrival, halves rounded up"""
    minutes = (to_utc(arrival_time) - to_utc(departure_time)).total_seconds() / 60
    return math.floor(minutes + 0.5)

def check_time_order(departure_time: datetime, arrival_time: datetime):
    if departure_time is None:
        raise ValidationError("departure_time is required", field="departure_time")
    if arrival_time is None:
        raise ValidationError("arrival_time is required", field="arrival_time")
    if to_utc(arrival_time) <= to_utc(departure_time):
        raise ValidationError("arrival must be after departure", field="arrival_time")

def check_references(db: Session, values: dict):
    for field, model, label in REFERENCES:
        ref_id = values.get(field)
        if ref_id is None:
            continue
        if not db.query(model.id).filter(model.id == ref_id).first():
            raise ValidationError(f"{label} with ID {ref_id} not found", field=field)
