from .router import router
from .service import CatalogService
from .schemas import Company, CompanyCreate, CompanyUpdate, Station, StationCreate, TransportType

__all__ = [
    "router",
    "CatalogService",
    "Company",
    "CompanyCreate",
    "CompanyUpdate",
    "Station",
    "StationCreate",
    "TransportType",
]
