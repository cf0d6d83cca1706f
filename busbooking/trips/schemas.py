from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime, date, time
from decimal import Decimal
from enum import Enum

from busbooking.fares.schemas import Fare
from busbooking.routes.schemas import RouteOut

class ExportFormat(str, Enum):
    CSV = "csv"
    EXCEL = "excel"

class ExportLanguage(str, Enum):
    EN = "en"
    DE = "de"
    AR = "ar"

def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v

class TripCreate(BaseModel):
    """Admin payload for a new trip.

    The route is given either as ``route_id`` or as a ``from_city``/``to_city``
    name pair, which is resolved to a route (created if missing).
    """
    route_id: Optional[int] = Field(None, gt=0)
    from_city: Optional[str] = None
    to_city: Optional[str] = None
    company_id: int = Field(..., gt=0)
    transport_type_id: int = Field(..., gt=0)
    departure_station_id: int = Field(..., gt=0)
    arrival_station_id: int = Field(..., gt=0)
    departure_time: datetime
    arrival_time: datetime
    duration_minutes: Optional[int] = Field(None, ge=0)
    seats_total: int = Field(..., gt=0)
    price: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    status: str = Field("scheduled", max_length=50)
    bus_number: Optional[str] = Field(None, max_length=50)
    driver_name: Optional[str] = Field(None, max_length=255)
    equipment: Optional[str] = None
    cancellation_policy: Optional[str] = None
    extra_info: Optional[str] = None
    is_active: bool = True

    class Config:
        extra = "forbid"

    @validator('price', 'currency', 'from_city', 'to_city', pre=True)
    def blank_is_absent(cls, v):
        return _blank_to_none(v)

class TripUpdate(BaseModel):
    """Partial update; only the fields sent are changed"""
    route_id: Optional[int] = Field(None, gt=0)
    from_city: Optional[str] = None
    to_city: Optional[str] = None
    company_id: Optional[int] = Field(None, gt=0)
    transport_type_id: Optional[int] = Field(None, gt=0)
    departure_station_id: Optional[int] = Field(None, gt=0)
    arrival_station_id: Optional[int] = Field(None, gt=0)
    departure_time: Optional[datetime] = None
    arrival_time: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(None, ge=0)
    seats_total: Optional[int] = Field(None, gt=0)
    price: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    status: Optional[str] = Field(None, max_length=50)
    bus_number: Optional[str] = Field(None, max_length=50)
    driver_name: Optional[str] = Field(None, max_length=255)
    equipment: Optional[str] = None
    cancellation_policy: Optional[str] = None
    extra_info: Optional[str] = None
    is_active: Optional[bool] = None

    class Config:
        extra = "forbid"

    @validator('price', 'currency', 'from_city', 'to_city', pre=True)
    def blank_is_absent(cls, v):
        return _blank_to_none(v)

class Trip(BaseModel):
    id: int
    route_id: int
    company_id: int
    transport_type_id: int
    departure_station_id: int
    arrival_station_id: int
    departure_time: datetime
    arrival_time: datetime
    duration_minutes: Optional[int] = None
    seats_total: int
    seats_available: int
    status: Optional[str] = None
    bus_number: Optional[str] = None
    driver_name: Optional[str] = None
    equipment: Optional[str] = None
    cancellation_policy: Optional[str] = None
    extra_info: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class TripListItem(Trip):
    """Trip row as shown in the admin table"""
    from_city: Optional[str] = None
    to_city: Optional[str] = None
    company_name: str = "Unknown"

class TripDetail(TripListItem):
    """Single trip with its route and primary fare; price is empty when no fare exists"""
    route: Optional[RouteOut] = None
    fare: Optional[Fare] = None
    price: Optional[Decimal] = None
    currency: Optional[str] = None

class TripFilters(BaseModel):
    """Admin table filters. Dates and times are inclusive; text filters are case-insensitive substrings."""
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    time_from: Optional[time] = None
    time_to: Optional[time] = None
    city_contains: Optional[str] = None
    company_contains: Optional[str] = None

    @validator('*', pre=True)
    def blank_is_absent(cls, v):
        return _blank_to_none(v)

    def is_empty(self) -> bool:
        return not any(value for value in self.model_dump().values())
