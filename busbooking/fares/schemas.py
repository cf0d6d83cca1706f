from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from decimal import Decimal

class Fare(BaseModel):
    id: int
    trip_id: int
    price: Decimal
    currency: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
