from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from busbooking.auth.dependencies import require_staff
from busbooking.database import get_db
from busbooking.catalog.schemas import (
    Company, CompanyCreate, CompanyUpdate, Station, StationCreate, TransportType
)
from busbooking.catalog.service import CatalogService

router = APIRouter(dependencies=[Depends(require_staff)])

# Companies
@router.get("/companies", response_model=List[Company])
def get_companies(
    include_inactive: bool = Query(False, alias="showAll"),
    db: Session = Depends(get_db)
):
    """Get transport companies"""
    return CatalogService.list_companies(db, include_inactive=include_inactive)

@router.post("/companies", response_model=Company, status_code=status.HTTP_201_CREATED)
def create_company(company: CompanyCreate, db: Session = Depends(get_db)):
    """Create a transport company"""
    return CatalogService.create_company(db, company)

@router.get("/companies/{company_id}", response_model=Company)
def get_company(company_id: int, db: Session = Depends(get_db)):
    return CatalogService.get_company(db, company_id)

@router.patch("/companies/{company_id}", response_model=Company)
def update_company(company_id: int, company: CompanyUpdate, db: Session = Depends(get_db)):
    """Update company details"""
    return CatalogService.update_company(db, company_id, company)

@router.delete("/companies/{company_id}", response_model=Company)
def deactivate_company(company_id: int, db: Session = Depends(get_db)):
    """Soft-delete a company; its trips stay untouched"""
    return CatalogService.deactivate_company(db, company_id)

@router.patch("/companies/{company_id}/restore", response_model=Company)
def restore_company(company_id: int, db: Session = Depends(get_db)):
    return CatalogService.restore_company(db, company_id)

# Stations
@router.get("/stations", response_model=List[Station])
def get_stations(
    city_id: Optional[int] = Query(None, gt=0, description="Filter by city"),
    db: Session = Depends(get_db)
):
    """Get stations, optionally for one city"""
    return CatalogService.list_stations(db, city_id=city_id)

@router.post("/stations", response_model=Station, status_code=status.HTTP_201_CREATED)
def create_station(station: StationCreate, db: Session = Depends(get_db)):
    return CatalogService.create_station(db, station)

# Transport types
@router.get("/transport-types", response_model=List[TransportType])
def get_transport_types(db: Session = Depends(get_db)):
    return CatalogService.list_transport_types(db)
