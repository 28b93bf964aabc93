"""
Dock Queue API
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional, List
from uuid import UUID

from freightline.core import get_db
from freightline.models import QueueStatus
from freightline.schemas.queue import (
    QueueEntryCreate, PriorityUpdate, QueueEntryResponse, QueueStatistics
)
from freightline.services import QueueService

queue_router = APIRouter(prefix="/queue", tags=["Dock Queue"])


@queue_router.post("", response_model=QueueEntryResponse, status_code=201)
def add_to_queue(data: QueueEntryCreate, db: Session = Depends(get_db)):
    entry = QueueService.enqueue(
        db,
        data.warehouse_id,
        data.shipment_id,
        data.driver_id,
        priority=data.priority,
        estimated_loading_minutes=data.estimated_loading_minutes
    )
    return QueueEntryResponse.model_validate(entry)


@queue_router.get("/warehouse/{warehouse_id}", response_model=List[QueueEntryResponse])
def get_queue(
    warehouse_id: UUID,
    status: Optional[QueueStatus] = Query(None),
    db: Session = Depends(get_db)
):
    entries = QueueService.get_queue_by_warehouse(db, warehouse_id, status.value if status else None)
    return [QueueEntryResponse.model_validate(e) for e in entries]


@queue_router.get("/warehouse/{warehouse_id}/next", response_model=Optional[QueueEntryResponse])
def get_next(warehouse_id: UUID, db: Session = Depends(get_db)):
    entry = QueueService.select_next(db, warehouse_id)
    return QueueEntryResponse.model_validate(entry) if entry else None


@queue_router.get("/warehouse/{warehouse_id}/statistics", response_model=QueueStatistics)
def get_statistics(warehouse_id: UUID, db: Session = Depends(get_db)):
    return QueueService.get_statistics(db, warehouse_id)


@queue_router.put("/{entry_id}/start-loading", response_model=QueueEntryResponse)
def start_loading(entry_id: UUID, db: Session = Depends(get_db)):
    return QueueEntryResponse.model_validate(QueueService.start_loading(db, entry_id))


@queue_router.put("/{entry_id}/finish-loading", response_model=QueueEntryResponse)
def finish_loading(entry_id: UUID, db: Session = Depends(get_db)):
    return QueueEntryResponse.model_validate(QueueService.finish_loading(db, entry_id))


@queue_router.put("/{entry_id}/cancel", response_model=QueueEntryResponse)
def cancel_entry(entry_id: UUID, db: Session = Depends(get_db)):
    return QueueEntryResponse.model_validate(QueueService.cancel(db, entry_id))


@queue_router.put("/{entry_id}/priority", response_model=QueueEntryResponse)
def update_priority(entry_id: UUID, data: PriorityUpdate, db: Session = Depends(get_db)):
    return QueueEntryResponse.model_validate(QueueService.reprioritize(db, entry_id, data.priority))
