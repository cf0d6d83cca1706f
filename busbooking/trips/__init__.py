"""
Trip/Fare Manager and Admin Trip Listing

Create and edit trips with their route and single fare in one transaction,
deactivate or permanently delete them, and list/filter/export them for the
admin table.
"""

from .router import router, public_router
from .service import TripService
from .schemas import TripCreate, TripUpdate, TripDetail, TripListItem, TripFilters
from .filtering import filter_trips, apply_trip_filters
from .export import export_trips_csv, export_trips_excel
from .validation import derive_duration_minutes, to_local_naive

__all__ = [
    "router",
    "public_router",
    "TripService",
    "TripCreate",
    "TripUpdate",
    "TripDetail",
    "TripListItem",
    "TripFilters",
    "filter_trips",
    "apply_trip_filters",
    "export_trips_csv",
    "export_trips_excel",
    "derive_duration_minutes",
    "to_local_naive",
]
