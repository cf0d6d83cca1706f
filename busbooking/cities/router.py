from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from busbooking.database import get_db
from busbooking.cities.schemas import City
from busbooking.cities.service import CityService

router = APIRouter()

@router.get("", response_model=List[City])
def get_cities(
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum number of cities"),
    db: Session = Depends(get_db)
):
    """Get all cities"""
    return CityService.list_cities(db, limit=limit)

@router.get("/search", response_model=List[City])
def search_cities(
    q: str = Query("", description="City name prefix, English or Arabic"),
    limit: int = Query(20, ge=1, le=100, description="Maximum number of results"),
    db: Session = Depends(get_db)
):
    """Autocomplete cities by name prefix"""
    return CityService.match_city(db, q, limit=limit)

@router.get("/{city_id}", response_model=City)
def get_city(city_id: int, db: Session = Depends(get_db)):
    """Get city by ID"""
    return CityService.get_city(db, city_id)
