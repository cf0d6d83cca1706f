"""
Admin trip table filters.

``filter_trips`` works on already-loaded rows; ``apply_trip_filters`` adds the
same predicates to a SQLAlchemy query so large tables are filtered in the
database. Both treat the date and time bounds as inclusive and match text
case-insensitively anywhere in the value.
"""

from datetime import datetime, time
from typing import Iterable, List, Optional, TypeVar
from sqlalchemy import extract, func, or_
from busbooking.models import Trip
from busbooking.trips.schemas import TripFilters

T = TypeVar("T")

def _minute_of_day(value) -> int:
    return value.hour * 60 + value.minute

def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()

def trip_matches(trip, filters: TripFilters) -> bool:
    """Check one row exposing departure_time, from_city, to_city and company_name"""
    departure = trip.departure_time
    if filters.date_from or filters.date_to or filters.time_from or filters.time_to:
        if departure is None:
            return False

    if filters.date_from and departure.date() < filters.date_from:
        return False
    if filters.date_to and departure.date() > filters.date_to:
        return False

    if filters.time_from and _minute_of_day(departure) < _minute_of_day(filters.time_from):
        return False
    if filters.time_to and _minute_of_day(departure) > _minute_of_day(filters.time_to):
        return False

    if filters.city_contains:
        if not (_contains(trip.from_city, filters.city_contains)
                or _contains(trip.to_city, filters.city_contains)):
            return False

    if filters.company_contains and not _contains(trip.company_name, filters.company_contains):
        return False

    return True

def filter_trips(trips: Iterable[T], filters: Optional[TripFilters]) -> List[T]:
    """Return the trips matching every active filter, in input order"""
    trips = list(trips)
    if filters is None or filters.is_empty():
        return trips
    return [trip for trip in trips if trip_matches(trip, filters)]

def apply_trip_filters(query, filters: TripFilters, from_city_name, to_city_name, company_name):
    """Add the filter predicates to a query already joined to both cities and the company.

    The column arguments are the (aliased) expressions the query selects,
    so the caller decides how cities and the company are joined.
    """
    if filters.date_from:
        query = query.filter(Trip.departure_time >= datetime.combine(filters.date_from, time.min))
    if filters.date_to:
        query = query.filter(Trip.departure_time <= datetime.combine(filters.date_to, time.max))

    if filters.time_from or filters.time_to:
        minute_of_day = extract("hour", Trip.departure_time) * 60 + extract("minute", Trip.departure_time)
        if filters.time_from:
            query = query.filter(minute_of_day >= _minute_of_day(filters.time_from))
        if filters.time_to:
            query = query.filter(minute_of_day <= _minute_of_day(filters.time_to))

    if filters.city_contains:
        needle = filters.city_contains.lower()
        query = query.filter(or_(
            func.lower(from_city_name).contains(needle, autoescape=True),
            func.lower(to_city_name).contains(needle, autoescape=True),
        ))

    if filters.company_contains:
        needle = filters.company_contains.lower()
        query = query.filter(func.lower(company_name).contains(needle, autoescape=True))

    return query
