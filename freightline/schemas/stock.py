"""
Stock Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID

class StockQuantityChange(BaseModel):
    product_id: UUID
    warehouse_id: UUID
    quantity: int = Field(..., ge=1)

class StockUpdate(BaseModel):
    product_id: UUID
    warehouse_id: UUID
    quantity: int = Field(..., ge=0)
    reason: Optional[str] = None

class StockResponse(BaseModel):
    id: UUID
    product_id: UUID
    warehouse_id: UUID
    quantity: int
    reserved_quantity: int
    available_quantity: int

    class Config:
        from_attributes = True
