"""
Master Data Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from decimal import Decimal

from freightline.models import DriverStatus

class WarehouseCreate(BaseModel):
    code: str = Field(..., max_length=50)
    name: str
    address: str
    location: str
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    capacity: int = Field(0, ge=0)

class WarehouseResponse(WarehouseCreate):
    id: UUID
    is_active: bool

    class Config:
        from_attributes = True

class ProductCreate(BaseModel):
    sku: str = Field(..., max_length=100)
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    unit_price: Decimal = Field(..., ge=0)
    unit: str = "pcs"
    low_stock_threshold: int = Field(0, ge=0)

class ProductResponse(ProductCreate):
    id: UUID
    is_active: bool

    class Config:
        from_attributes = True

class DriverCreate(BaseModel):
    first_name: str
    last_name: str
    license_number: str = Field(..., max_length=50)
    phone_number: str
    email: Optional[str] = None
    vehicle_type: Optional[str] = None
    vehicle_number: Optional[str] = None

class DriverResponse(DriverCreate):
    id: UUID
    status: str
    balance: Decimal
    is_active: bool

    class Config:
        from_attributes = True

class DriverStatusUpdate(BaseModel):
    status: DriverStatus
