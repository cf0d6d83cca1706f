import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List

from busbooking.auth.dependencies import require_staff
from busbooking.database import get_db
from busbooking.exceptions import StorageError
from busbooking.routes.schemas import RouteCreate, RouteOut
from busbooking.routes.service import RouteResolver

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_staff)])

@router.get("", response_model=List[RouteOut])
def get_routes(db: Session = Depends(get_db)):
    """Get all routes with their city names"""
    return RouteResolver(db).list_routes()

@router.post("", response_model=RouteOut, status_code=status.HTTP_201_CREATED)
def create_route(
    route_data: RouteCreate,
    response: Response,
    db: Session = Depends(get_db)
):
    """Resolve the route for a city pair, creating it on first use"""
    resolver = RouteResolver(db)
    try:
        route, created = resolver.resolve(route_data.from_city_id, route_data.to_city_id)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Route commit failed", extra={"operation": "create_route"})
        raise StorageError("create_route")
    except Exception:
        db.rollback()
        raise

    if not created:
        response.status_code = status.HTTP_200_OK
    return resolver.to_out(resolver.get_route(route.id))

@router.get("/{route_id}", response_model=RouteOut)
def get_route(route_id: int, db: Session = Depends(get_db)):
    """Get route details by ID"""
    resolver = RouteResolver(db)
    return resolver.to_out(resolver.get_route(route_id))
