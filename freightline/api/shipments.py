"""
Shipments API
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional, List
from uuid import UUID

from freightline.core import get_db
from freightline.models import ShipmentStatus
from freightline.schemas.shipment import (
    ShipmentCreate, ShipmentResponse, ShipmentStatusUpdate, LegStatusUpdate,
    ShipmentLegResponse, DriverAssign, UnloadRequest
)
from freightline.services import ShipmentService

shipments_router = APIRouter(prefix="/shipments", tags=["Shipments"])


@shipments_router.post("", response_model=ShipmentResponse, status_code=201)
def create_shipment(data: ShipmentCreate, db: Session = Depends(get_db)):
    shipment = ShipmentService.create_shipment(db, data)
    return ShipmentResponse.model_validate(shipment)


@shipments_router.get("", response_model=List[ShipmentResponse])
def list_shipments(
    status: Optional[ShipmentStatus] = Query(None),
    driver_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db)
):
    shipments = ShipmentService.get_shipments(db, status.value if status else None, driver_id)
    return [ShipmentResponse.model_validate(s) for s in shipments]


@shipments_router.get("/tracking/{tracking_number}", response_model=ShipmentResponse)
def get_shipment_by_tracking(tracking_number: str, db: Session = Depends(get_db)):
    shipment = ShipmentService.get_shipment_by_tracking_number(db, tracking_number)
    return ShipmentResponse.model_validate(shipment)


@shipments_router.get("/{shipment_id}", response_model=ShipmentResponse)
def get_shipment(shipment_id: UUID, db: Session = Depends(get_db)):
    shipment = ShipmentService.get_shipment_by_id(db, shipment_id)
    return ShipmentResponse.model_validate(shipment)


@shipments_router.put("/{shipment_id}/status", response_model=ShipmentResponse)
def update_status(shipment_id: UUID, data: ShipmentStatusUpdate, db: Session = Depends(get_db)):
    shipment = ShipmentService.update_status(db, shipment_id, data.status.value)
    return ShipmentResponse.model_validate(shipment)


@shipments_router.put("/{shipment_id}/status/override", response_model=ShipmentResponse)
def override_status(shipment_id: UUID, data: ShipmentStatusUpdate, db: Session = Depends(get_db)):
    """Force a status without transition checks (operator correction)"""
    shipment = ShipmentService.override_status(db, shipment_id, data.status.value)
    return ShipmentResponse.model_validate(shipment)


@shipments_router.put("/{shipment_id}/assign-driver", response_model=ShipmentResponse)
def assign_driver(shipment_id: UUID, data: DriverAssign, db: Session = Depends(get_db)):
    shipment = ShipmentService.assign_driver(db, shipment_id, data.driver_id)
    return ShipmentResponse.model_validate(shipment)


@shipments_router.put("/{shipment_id}/legs/{sequence}/status", response_model=ShipmentLegResponse)
def update_leg_status(shipment_id: UUID, sequence: int, data: LegStatusUpdate, db: Session = Depends(get_db)):
    leg = ShipmentService.update_leg_status(db, shipment_id, sequence, data.status.value)
    return ShipmentLegResponse.model_validate(leg)


@shipments_router.post("/{shipment_id}/unload", response_model=ShipmentResponse)
def unload_at_warehouse(shipment_id: UUID, data: UnloadRequest, db: Session = Depends(get_db)):
    shipment = ShipmentService.unload_at_warehouse(db, shipment_id, data.warehouse_id)
    return ShipmentResponse.model_validate(shipment)
