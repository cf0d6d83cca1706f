from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from busbooking.auth.dependencies import require_staff
from busbooking.database import get_db
from busbooking.fares.schemas import Fare
from busbooking.fares.service import FareService

router = APIRouter(dependencies=[Depends(require_staff)])

@router.get("", response_model=List[Fare])
def get_fares(
    trip_id: Optional[int] = Query(None, gt=0, description="Only fares of this trip"),
    db: Session = Depends(get_db)
):
    """Get fares, zero or one per trip"""
    return FareService(db).get_fares(trip_id=trip_id)
