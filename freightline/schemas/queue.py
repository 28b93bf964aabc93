"""
Dock Queue Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

class QueueEntryCreate(BaseModel):
    warehouse_id: UUID
    shipment_id: UUID
    driver_id: UUID
    priority: int = 0
    estimated_loading_minutes: Optional[int] = Field(None, ge=0)

class PriorityUpdate(BaseModel):
    priority: int

class QueueEntryResponse(BaseModel):
    id: UUID
    warehouse_id: UUID
    shipment_id: UUID
    driver_id: UUID
    status: str
    priority: int
    arrival_time: datetime
    start_loading_time: Optional[datetime] = None
    finish_loading_time: Optional[datetime] = None
    estimated_loading_minutes: int

    class Config:
        from_attributes = True

class QueueStatistics(BaseModel):
    waiting: int
    loading: int
    completed: int
    average_wait_time: float
    average_loading_time: float
