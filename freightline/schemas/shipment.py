"""
Shipment Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from decimal import Decimal

from freightline.models import ShipmentStatus, LegStatus

class ShipmentItemCreate(BaseModel):
    product_id: UUID
    quantity: int = Field(..., ge=1)

class ShipmentLegCreate(BaseModel):
    from_warehouse_id: UUID
    to_warehouse_id: UUID
    sequence: int
    scheduled_departure_date: Optional[datetime] = None
    scheduled_arrival_date: Optional[datetime] = None
    distance: Optional[Decimal] = None

class ShipmentCreate(BaseModel):
    origin_warehouse_id: UUID
    destination_warehouse_id: Optional[UUID] = None
    driver_id: Optional[UUID] = None
    
    destination_address: Optional[str] = None
    recipient_name: Optional[str] = None
    recipient_phone: Optional[str] = None
    
    items: List[ShipmentItemCreate]
    legs: Optional[List[ShipmentLegCreate]] = None
    
    scheduled_pickup_date: Optional[datetime] = None
    scheduled_delivery_date: Optional[datetime] = None
    is_multi_leg: Optional[bool] = None

class ShipmentStatusUpdate(BaseModel):
    status: ShipmentStatus

class LegStatusUpdate(BaseModel):
    status: LegStatus

class DriverAssign(BaseModel):
    driver_id: UUID

class UnloadRequest(BaseModel):
    warehouse_id: UUID

class ShipmentItemResponse(BaseModel):
    id: UUID
    product_id: UUID
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    class Config:
        from_attributes = True

class ShipmentLegResponse(BaseModel):
    id: UUID
    sequence: int
    from_warehouse_id: UUID
    to_warehouse_id: UUID
    status: str
    scheduled_departure_date: Optional[datetime] = None
    actual_departure_date: Optional[datetime] = None
    scheduled_arrival_date: Optional[datetime] = None
    actual_arrival_date: Optional[datetime] = None
    unloaded_date: Optional[datetime] = None
    distance: Optional[Decimal] = None

    class Config:
        from_attributes = True

class ShipmentResponse(BaseModel):
    id: UUID
    tracking_number: str
    origin_warehouse_id: UUID
    destination_warehouse_id: Optional[UUID] = None
    driver_id: Optional[UUID] = None
    status: str
    destination_address: Optional[str] = None
    recipient_name: Optional[str] = None
    recipient_phone: Optional[str] = None
    total_weight: Decimal
    total_value: Decimal
    driver_payment: Optional[Decimal] = None
    fuel_cost: Optional[Decimal] = None
    other_expenses: Optional[Decimal] = None
    company_profit: Optional[Decimal] = None
    scheduled_pickup_date: Optional[datetime] = None
    actual_pickup_date: Optional[datetime] = None
    scheduled_delivery_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None
    is_multi_leg: bool
    items: List[ShipmentItemResponse] = []
    legs: List[ShipmentLegResponse] = []

    class Config:
        from_attributes = True
