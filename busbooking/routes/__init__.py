"""
Route Resolver

A route is the ordered pair (from_city_id, to_city_id); at most one row exists
per pair and routes are directional. Routes are created lazily the first time a
trip needs a pair and are never deleted by the trip workflow.
"""

from .router import router
from .service import RouteResolver
from .schemas import RouteCreate, RouteOut

__all__ = [
    "router",
    "RouteResolver",
    "RouteCreate",
    "RouteOut",
]
