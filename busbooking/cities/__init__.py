"""
City Registry

Read-only reference data: listing, exact name lookup, and prefix autocomplete
that understands Arabic city names through a fixed alias table.
"""

from .router import router
from .service import CityService
from .schemas import City
from .aliases import ARABIC_TO_ENGLISH, ENGLISH_TO_ARABIC, arabic_name, english_name, city_matches_input

__all__ = [
    "router",
    "CityService",
    "City",
    "ARABIC_TO_ENGLISH",
    "ENGLISH_TO_ARABIC",
    "arabic_name",
    "english_name",
    "city_matches_input",
]
