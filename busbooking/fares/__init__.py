from .router import router
from .service import FareService
from .schemas import Fare

__all__ = [
    "router",
    "FareService",
    "Fare",
]
