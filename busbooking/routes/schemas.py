from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class RouteCreate(BaseModel):
    """Request schema for resolving a route between two cities"""
    from_city_id: int = Field(..., gt=0)
    to_city_id: int = Field(..., gt=0)

    class Config:
        extra = "forbid"

class RouteOut(BaseModel):
    """Route with city names for display"""
    id: int
    from_city_id: int
    to_city_id: int
    from_city: Optional[str] = None
    to_city: Optional[str] = None
    created_at: Optional[datetime] = None
