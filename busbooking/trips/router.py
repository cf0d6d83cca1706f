import io
from datetime import date
from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import StreamingResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from typing import List, Optional

from busbooking.auth.dependencies import require_staff
from busbooking.database import get_db
from busbooking.exceptions import ValidationError
from busbooking.trips.export import export_trips_csv, export_trips_excel
from busbooking.trips.schemas import (
    ExportFormat, ExportLanguage, TripCreate, TripDetail, TripFilters, TripListItem, TripUpdate
)
from busbooking.trips.service import TripService

router = APIRouter(dependencies=[Depends(require_staff)])

def get_trip_filters(
    date_from: Optional[str] = Query(None, description="Earliest departure date, YYYY-MM-DD"),
    date_to: Optional[str] = Query(None, description="Latest departure date, inclusive"),
    time_from: Optional[str] = Query(None, description="Earliest departure time of day, HH:MM"),
    time_to: Optional[str] = Query(None, description="Latest departure time of day, inclusive"),
    city: Optional[str] = Query(None, description="Substring of the from or to city"),
    company: Optional[str] = Query(None, description="Substring of the company name"),
) -> TripFilters:
    try:
        return TripFilters(
            date_from=date_from,
            date_to=date_to,
            time_from=time_from,
            time_to=time_to,
            city_contains=city,
            company_contains=company,
        )
    except PydanticValidationError as e:
        error = e.errors()[0]
        raise ValidationError(error["msg"], field=str(error["loc"][0]) if error["loc"] else None)

@router.get("", response_model=List[TripListItem])
def get_trips(
    include_inactive: bool = Query(False, alias="showAll"),
    filters: TripFilters = Depends(get_trip_filters),
    db: Session = Depends(get_db)
):
    """Get trips for the admin table, newest first"""
    return TripService(db).list_trips(include_inactive=include_inactive, filters=filters)

@router.get("/export")
def export_trips(
    format: ExportFormat = Query(ExportFormat.CSV),
    lang: ExportLanguage = Query(ExportLanguage.EN),
    include_inactive: bool = Query(False, alias="showAll"),
    filters: TripFilters = Depends(get_trip_filters),
    db: Session = Depends(get_db)
):
    """Export the filtered trip table to CSV/Excel"""
    trips = TripService(db).list_trips(include_inactive=include_inactive, filters=filters)
    stamp = date.today().isoformat()

    if format == ExportFormat.CSV:
        return StreamingResponse(
            io.BytesIO(export_trips_csv(trips, lang)),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f"attachment; filename=trips_{stamp}.csv"}
        )
    return StreamingResponse(
        io.BytesIO(export_trips_excel(trips, lang)),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=trips_{stamp}.xlsx"}
    )

@router.post("", response_model=TripDetail, status_code=status.HTTP_201_CREATED)
def create_trip(trip_data: TripCreate, db: Session = Depends(get_db)):
    """Create a trip, resolving its route and saving its fare"""
    return TripService(db).create_or_update_trip(trip_data)

@router.get("/{trip_id}", response_model=TripDetail)
def get_trip(trip_id: int, db: Session = Depends(get_db)):
    """Get trip details with route and fare"""
    return TripService(db).get_trip_by_id(trip_id)

@router.patch("/{trip_id}", response_model=TripDetail)
def update_trip(trip_id: int, trip_data: TripUpdate, db: Session = Depends(get_db)):
    """Update the fields that were sent"""
    return TripService(db).create_or_update_trip(trip_data, existing_trip_id=trip_id)

@router.patch("/{trip_id}/deactivate", response_model=TripDetail)
def deactivate_trip(trip_id: int, db: Session = Depends(get_db)):
    """Hide a trip without deleting it"""
    return TripService(db).deactivate_trip(trip_id)

@router.patch("/{trip_id}/activate", response_model=TripDetail)
def activate_trip(trip_id: int, db: Session = Depends(get_db)):
    return TripService(db).activate_trip(trip_id)

@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trip(trip_id: int, db: Session = Depends(get_db)):
    """Permanently delete a trip and its fares"""
    TripService(db).delete_trip_permanently(trip_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# Public search, no staff role required
public_router = APIRouter()

@public_router.get("/search", response_model=List[TripListItem])
def search_trips(
    from_city: Optional[str] = Query(None, description="Departure city name"),
    to_city: Optional[str] = Query(None, description="Arrival city name"),
    departure_date: Optional[date] = Query(None, alias="date", description="Departure day, YYYY-MM-DD"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """Search active trips by route and day, earliest departure first"""
    return TripService(db).search_trips(
        from_city=from_city,
        to_city=to_city,
        departure_date=departure_date,
        limit=limit,
        offset=offset,
    )
