from pydantic import BaseModel
from typing import Optional
from decimal import Decimal

class City(BaseModel):
    id: int
    name: str
    country_code: Optional[str] = "SY"
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None

    class Config:
        from_attributes = True
