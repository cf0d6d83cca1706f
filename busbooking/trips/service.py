import logging
from datetime import date
from typing import List, Optional, Union
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased, joinedload
from busbooking.cities.service import CityService
from busbooking.exceptions import AppError, NotFoundError, StorageError, ValidationError
from busbooking.fares.schemas import Fare as FareOut
from busbooking.fares.service import FareService
from busbooking.models import City, Company, Fare, Route, Trip
from busbooking.routes.service import RouteResolver
from busbooking.trips.filtering import apply_trip_filters
from busbooking.trips.schemas import TripCreate, TripDetail, TripFilters, TripListItem, TripUpdate, Trip as TripOut
from busbooking.trips.validation import (
    check_references, check_time_order, derive_duration_minutes, to_local_naive
)

logger = logging.getLogger(__name__)

# Columns a PATCH cannot null out
REQUIRED_FIELDS = {
    "company_id", "transport_type_id", "departure_station_id", "arrival_station_id",
    "departure_time", "arrival_time", "seats_total", "status", "is_active",
}

# Payload keys that are not Trip columns
NON_COLUMN_FIELDS = {"route_id", "from_city", "to_city", "price", "currency"}

class TripService:
    """Admin trip workflow: validate, resolve the route, persist trip and fare together"""

    def __init__(self, db: Session):
        self.db = db
        self.routes = RouteResolver(db)
        self.fares = FareService(db)

    def create_or_update_trip(
        self,
        data: Union[TripCreate, TripUpdate],
        existing_trip_id: Optional[int] = None
    ) -> TripDetail:
        """Create a trip, or update ``existing_trip_id`` with the fields that were sent.

        Every check runs before the first write. The route (when it has to be
        created), the trip and its fare are committed in one transaction, so a
        failure leaves nothing behind.
        """
        trip = None
        if existing_trip_id is not None:
            trip = self._get_trip(existing_trip_id)

        values = self._merge_values(trip, data)
        check_time_order(values.get("departure_time"), values.get("arrival_time"))

        route_id = data.route_id
        city_pair = None
        if route_id is None:
            city_pair = self._city_pair(data, required=trip is None)
        check_references(self.db, {**values, "route_id": route_id})

        # a currency alone can only re-label an existing fare
        update_fare = data.price is not None or (
            data.currency is not None and trip is not None
            and self.fares.get_primary_fare(trip.id) is not None
        )

        values["duration_minutes"] = derive_duration_minutes(
            values["departure_time"], values["arrival_time"]
        )
        for field in ("departure_time", "arrival_time"):
            values[field] = to_local_naive(values[field])

        try:
            if city_pair is not None:
                route_id = self.routes.resolve_or_create_route(*city_pair).id
            if route_id is not None:
                values["route_id"] = route_id

            if trip is None:
                values["seats_available"] = values["seats_total"]
                trip = Trip(**values)
                self.db.add(trip)
            else:
                # seats_available is owned by booking; only keep it within capacity
                if trip.seats_available is not None and trip.seats_available > values["seats_total"]:
                    values["seats_available"] = values["seats_total"]
                for field, value in values.items():
                    setattr(trip, field, value)
            self.db.flush()

            if update_fare:
                self.fares.upsert_fare(trip.id, data.price, data.currency)

            self.db.commit()
        except AppError:
            self.db.rollback()
            raise
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Trip save failed", extra={"operation": "save_trip", "trip_id": existing_trip_id})
            raise StorageError("save_trip")

        logger.info(
            "Trip %s", "updated" if existing_trip_id else "created",
            extra={"trip_id": trip.id, "route_id": trip.route_id}
        )
        return self.get_trip_by_id(trip.id)

    def _merge_values(self, trip: Optional[Trip], data: Union[TripCreate, TripUpdate]) -> dict:
        if trip is None:
            values = data.model_dump(exclude=NON_COLUMN_FIELDS)
        else:
            values = {
                "departure_time": trip.departure_time,
                "arrival_time": trip.arrival_time,
                "seats_total": trip.seats_total,
            }
            for field, value in data.model_dump(exclude_unset=True, exclude=NON_COLUMN_FIELDS).items():
                if value is None and field in REQUIRED_FIELDS:
                    continue
                values[field] = value

        # derived on save
        values.pop("duration_minutes", None)
        return values

    def _city_pair(self, data: Union[TripCreate, TripUpdate], required: bool):
        """Look up the city names sent instead of a route_id"""
        if data.from_city is None and data.to_city is None:
            if required:
                raise ValidationError("route_id or from_city and to_city are required", field="route_id")
            return None

        ids = []
        for field in ("from_city", "to_city"):
            name = getattr(data, field)
            if name is None:
                raise ValidationError(f"{field} is required", field=field)
            city = CityService.get_city_by_name(self.db, name)
            if city is None:
                raise ValidationError(f"City '{name}' not found", field=field)
            ids.append(city.id)

        if ids[0] == ids[1]:
            raise ValidationError("departure and arrival city must differ", field="to_city")
        return ids[0], ids[1]

    def _get_trip(self, trip_id: int) -> Trip:
        trip = self.db.query(Trip).filter(Trip.id == trip_id).first()
        if not trip:
            raise NotFoundError(f"Trip with ID {trip_id} not found")
        return trip

    def get_trip_by_id(self, trip_id: int) -> TripDetail:
        trip = self.db.query(Trip).options(
            joinedload(Trip.route).joinedload(Route.from_city),
            joinedload(Trip.route).joinedload(Route.to_city),
            joinedload(Trip.company),
        ).filter(Trip.id == trip_id).first()
        if not trip:
            raise NotFoundError(f"Trip with ID {trip_id} not found")

        fare = self.fares.get_primary_fare(trip.id)
        route = trip.route
        return TripDetail(
            **TripOut.model_validate(trip).model_dump(),
            from_city=route.from_city.name if route and route.from_city else None,
            to_city=route.to_city.name if route and route.to_city else None,
            company_name=trip.company.name if trip.company else "Unknown",
            route=RouteResolver.to_out(route) if route else None,
            fare=FareOut.model_validate(fare) if fare else None,
            price=fare.price if fare else None,
            currency=fare.currency if fare else None,
        )

    def _listing_query(self, filters: Optional[TripFilters] = None):
        """Trips joined to both route cities and the company, with the filters applied"""
        from_city = aliased(City)
        to_city = aliased(City)
        company_name = func.coalesce(Company.name, "Unknown")

        query = self.db.query(Trip, from_city.name, to_city.name, company_name).join(
            Route, Route.id == Trip.route_id
        ).join(
            from_city, from_city.id == Route.from_city_id
        ).join(
            to_city, to_city.id == Route.to_city_id
        ).outerjoin(
            Company, Company.id == Trip.company_id
        )

        if filters is not None and not filters.is_empty():
            query = apply_trip_filters(query, filters, from_city.name, to_city.name, company_name)
        return query

    @staticmethod
    def _to_list_items(rows) -> List[TripListItem]:
        return [
            TripListItem(
                **TripOut.model_validate(trip).model_dump(),
                from_city=from_name,
                to_city=to_name,
                company_name=company,
            )
            for trip, from_name, to_name, company in rows
        ]

    def list_trips(self, include_inactive: bool = False, filters: Optional[TripFilters] = None) -> List[TripListItem]:
        """Trips for the admin table, newest first"""
        query = self._listing_query(filters)
        if not include_inactive:
            query = query.filter(Trip.is_active == True)
        return self._to_list_items(query.order_by(Trip.id.desc()).all())

    def search_trips(
        self,
        from_city: Optional[str] = None,
        to_city: Optional[str] = None,
        departure_date: Optional[date] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[TripListItem]:
        """Public search: active trips on a route and day, earliest departure first.

        City names are matched whole, ignoring case; an unknown name yields no trips.
        """
        filters = TripFilters(date_from=departure_date, date_to=departure_date)
        query = self._listing_query(filters).filter(Trip.is_active == True)

        for name, column in ((from_city, Route.from_city_id), (to_city, Route.to_city_id)):
            if not name:
                continue
            city = CityService.get_city_by_name(self.db, name)
            if city is None:
                return []
            query = query.filter(column == city.id)

        rows = query.order_by(Trip.departure_time, Trip.id).offset(offset).limit(limit).all()
        return self._to_list_items(rows)

    def set_trip_active(self, trip_id: int, is_active: bool) -> TripDetail:
        trip = self._get_trip(trip_id)
        trip.is_active = is_active
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Trip status change failed", extra={"operation": "set_trip_active", "trip_id": trip_id})
            raise StorageError("set_trip_active")
        logger.info("Trip %s", "activated" if is_active else "deactivated", extra={"trip_id": trip_id})
        return self.get_trip_by_id(trip_id)

    def deactivate_trip(self, trip_id: int) -> TripDetail:
        """Hide a trip from listings; the row and its fare are kept"""
        return self.set_trip_active(trip_id, False)

    def activate_trip(self, trip_id: int) -> TripDetail:
        return self.set_trip_active(trip_id, True)

    def delete_trip_permanently(self, trip_id: int):
        """Delete the trip and its fares in one transaction; the route stays"""
        self._get_trip(trip_id)
        try:
            self.db.query(Fare).filter(Fare.trip_id == trip_id).delete(synchronize_session=False)
            self.db.query(Trip).filter(Trip.id == trip_id).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Trip delete failed", extra={"operation": "delete_trip", "trip_id": trip_id})
            raise StorageError("delete_trip")
        logger.info("Trip deleted", extra={"trip_id": trip_id})
