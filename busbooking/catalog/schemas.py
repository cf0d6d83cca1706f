from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

class CompanyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)

class CompanyCreate(CompanyBase):
    class Config:
        extra = "forbid"

class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)

    class Config:
        extra = "forbid"

class Company(CompanyBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class StationCreate(BaseModel):
    city_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = None

    class Config:
        extra = "forbid"

class Station(BaseModel):
    id: int
    city_id: int
    name: str
    address: Optional[str] = None
    city_name: Optional[str] = None

class TransportType(BaseModel):
    id: int
    code: str
    name: str

    class Config:
        from_attributes = True
