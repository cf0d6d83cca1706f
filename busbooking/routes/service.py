import logging
from typing import List, Tuple
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from busbooking.database import dialect_insert
from busbooking.exceptions import ConflictError, NotFoundError, StorageError, ValidationError
from busbooking.models import City, Route
from busbooking.routes.schemas import RouteOut

logger = logging.getLogger(__name__)


class RouteResolver:
    """Find-or-create routes, keyed by the ordered (from_city_id, to_city_id) pair.

    Uniqueness is enforced by the ``uq_routes_city_pair`` constraint, so two
    requests racing on a new pair both end up with the same row: the loser's
    insert is a no-op (or a caught IntegrityError on dialects without
    ON CONFLICT) and it reads the winner's row back.

    Methods only flush; committing is the caller's job so a route created for
    a trip shares the trip's transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def resolve_or_create_route(self, from_city_id: int, to_city_id: int) -> Route:
        route, _ = self.resolve(from_city_id, to_city_id)
        return route

    def resolve(self, from_city_id: int, to_city_id: int) -> Tuple[Route, bool]:
        """Return the route for the pair and whether this call created it"""
        self._validate_pair(from_city_id, to_city_id)

        try:
            created = self._insert_if_absent(from_city_id, to_city_id)
        except ConflictError:
            logger.info(
                "Route created concurrently, using existing row",
                extra={"from_city_id": from_city_id, "to_city_id": to_city_id},
            )
            created = False
        except SQLAlchemyError:
            logger.exception(
                "Route resolution failed",
                extra={"operation": "resolve_route", "from_city_id": from_city_id, "to_city_id": to_city_id},
            )
            raise StorageError("resolve_route")

        route = self._find(from_city_id, to_city_id)
        if route is None:
            raise StorageError("resolve_route")
        if created:
            logger.info("Route created", extra={"route_id": route.id, "from_city_id": from_city_id, "to_city_id": to_city_id})
        return route, created

    def _validate_pair(self, from_city_id: int, to_city_id: int):
        if from_city_id == to_city_id:
            raise ValidationError("departure and arrival city must differ", field="to_city_id")

        for field, city_id in (("from_city_id", from_city_id), ("to_city_id", to_city_id)):
            if not self.db.query(City.id).filter(City.id == city_id).first():
                raise NotFoundError(f"City with ID {city_id} not found", field=field)

    def _insert_if_absent(self, from_city_id: int, to_city_id: int) -> bool:
        insert = dialect_insert(self.db)
        if insert is not None:
            stmt = insert(Route).values(
                from_city_id=from_city_id, to_city_id=to_city_id
            ).on_conflict_do_nothing(index_elements=["from_city_id", "to_city_id"])
            return self.db.execute(stmt).rowcount == 1

        try:
            with self.db.begin_nested():
                self.db.add(Route(from_city_id=from_city_id, to_city_id=to_city_id))
        except IntegrityError:
            raise ConflictError("Route already exists", field="to_city_id")
        return True

    def _find(self, from_city_id: int, to_city_id: int) -> Route:
        return self.db.query(Route).filter(
            Route.from_city_id == from_city_id,
            Route.to_city_id == to_city_id
        ).populate_existing().first()

    def get_route(self, route_id: int) -> Route:
        route = self.db.query(Route).options(
            joinedload(Route.from_city), joinedload(Route.to_city)
        ).filter(Route.id == route_id).first()
        if not route:
            raise NotFoundError(f"Route with ID {route_id} not found")
        return route

    def list_routes(self) -> List[RouteOut]:
        routes = self.db.query(Route).options(
            joinedload(Route.from_city), joinedload(Route.to_city)
        ).order_by(Route.id).all()
        return [self.to_out(route) for route in routes]

    @staticmethod
    def to_out(route: Route) -> RouteOut:
        return RouteOut(
            id=route.id,
            from_city_id=route.from_city_id,
            to_city_id=route.to_city_id,
            from_city=route.from_city.name if route.from_city else None,
            to_city=route.to_city.name if route.to_city else None,
            created_at=route.created_at
        )
