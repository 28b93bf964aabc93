"""
Dock Queue Service - Orders shipments for loading at a warehouse dock

Entries are served by priority (higher first), then by arrival time.
Loading a shipment moves it, its queue entry and its driver together.
"""
import logging
from sqlalchemy.orm import Session
from typing import List, Optional, Dict
from uuid import UUID
from datetime import datetime

from freightline.core import atomic, settings
from freightline.core.exceptions import NotFound, InvalidState, DuplicateEntry
from freightline.models import (
    QueueEntry, QueueStatus, Warehouse, Shipment, ShipmentStatus, Driver, DriverStatus
)
from .shipment_service import ShipmentService

logger = logging.getLogger(__name__)

class QueueService:
    """Loading dock queue business logic"""

    # Valid status transitions
    STATUS_TRANSITIONS = {
        QueueStatus.WAITING.value: [QueueStatus.LOADING.value, QueueStatus.CANCELLED.value],
        QueueStatus.LOADING.value: [QueueStatus.COMPLETED.value, QueueStatus.CANCELLED.value],
        QueueStatus.COMPLETED.value: [],
        QueueStatus.CANCELLED.value: [],
    }

    @staticmethod
    def _get_entry(db: Session, entry_id: UUID) -> QueueEntry:
        entry = db.query(QueueEntry).filter(QueueEntry.id == entry_id).with_for_update().first()
        if not entry:
            raise NotFound("Queue entry", entry_id)
        return entry

    @staticmethod
    def _check_transition(entry: QueueEntry, status: str):
        if status not in QueueService.STATUS_TRANSITIONS.get(entry.status, []):
            raise InvalidState(
                f"Queue entry {entry.id} cannot move from {entry.status} to {status}. "
                f"Current status: {entry.status}"
            )

    @staticmethod
    def enqueue(
        db: Session,
        warehouse_id: UUID,
        shipment_id: UUID,
        driver_id: UUID,
        priority: int = 0,
        estimated_loading_minutes: Optional[int] = None
    ) -> QueueEntry:
        """Add a shipment to a warehouse's dock queue"""
        if estimated_loading_minutes is None:
            estimated_loading_minutes = settings.DEFAULT_LOADING_MINUTES

        with atomic(db):
            if not db.get(Warehouse, warehouse_id):
                raise NotFound("Warehouse", warehouse_id)

            shipment = ShipmentService.get_shipment_by_id(db, shipment_id, for_update=True)

            if not db.get(Driver, driver_id):
                raise NotFound("Driver", driver_id)

            existing = db.query(QueueEntry).filter(
                QueueEntry.warehouse_id == warehouse_id,
                QueueEntry.shipment_id == shipment_id,
                QueueEntry.status == QueueStatus.WAITING.value
            ).first()
            if existing:
                raise DuplicateEntry(
                    f"Shipment {shipment_id} is already in queue for warehouse {warehouse_id}"
                )

            ShipmentService.transition(db, shipment, ShipmentStatus.QUEUED.value)

            entry = QueueEntry(
                warehouse_id=warehouse_id,
                shipment_id=shipment_id,
                driver_id=driver_id,
                status=QueueStatus.WAITING.value,
                priority=priority,
                arrival_time=datetime.now(),
                estimated_loading_minutes=estimated_loading_minutes
            )
            db.add(entry)

        db.refresh(entry)
        logger.info(
            f"Queued shipment {shipment.tracking_number} at warehouse {warehouse_id} "
            f"(priority={priority})"
        )
        return entry

    @staticmethod
    def get_queue_by_warehouse(db: Session, warehouse_id: UUID, status: Optional[str] = None) -> List[QueueEntry]:
        """Queue entries in service order"""
        query = db.query(QueueEntry).filter(QueueEntry.warehouse_id == warehouse_id)

        if status:
            query = query.filter(QueueEntry.status == status)

        return query.order_by(QueueEntry.priority.desc(), QueueEntry.arrival_time.asc()).all()

    @staticmethod
    def select_next(db: Session, warehouse_id: UUID) -> Optional[QueueEntry]:
        """The WAITING entry that should load next. Read-only."""
        return db.query(QueueEntry).filter(
            QueueEntry.warehouse_id == warehouse_id,
            QueueEntry.status == QueueStatus.WAITING.value
        ).order_by(
            QueueEntry.priority.desc(),
            QueueEntry.arrival_time.asc()
        ).first()

    @staticmethod
    def start_loading(db: Session, entry_id: UUID) -> QueueEntry:
        with atomic(db):
            entry = QueueService._get_entry(db, entry_id)
            QueueService._check_transition(entry, QueueStatus.LOADING.value)

            now = datetime.now()
            entry.status = QueueStatus.LOADING.value
            entry.start_loading_time = now

            shipment = ShipmentService.get_shipment_by_id(db, entry.shipment_id, for_update=True)
            ShipmentService.transition(db, shipment, ShipmentStatus.LOADING.value, now)

        db.refresh(entry)
        logger.info(f"Started loading queue entry {entry.id} (shipment {entry.shipment_id})")
        return entry

    @staticmethod
    def finish_loading(db: Session, entry_id: UUID) -> QueueEntry:
        with atomic(db):
            entry = QueueService._get_entry(db, entry_id)
            QueueService._check_transition(entry, QueueStatus.COMPLETED.value)

            now = datetime.now()
            entry.status = QueueStatus.COMPLETED.value
            entry.finish_loading_time = now

            shipment = ShipmentService.get_shipment_by_id(db, entry.shipment_id, for_update=True)
            ShipmentService.transition(db, shipment, ShipmentStatus.IN_TRANSIT.value, now)
            shipment.actual_pickup_date = now

            driver = db.query(Driver).filter(Driver.id == entry.driver_id).with_for_update().first()
            if driver:
                driver.status = DriverStatus.ON_ROUTE.value

        db.refresh(entry)
        logger.info(f"Finished loading queue entry {entry.id}; shipment {entry.shipment_id} in transit")
        return entry

    @staticmethod
    def cancel(db: Session, entry_id: UUID) -> QueueEntry:
        with atomic(db):
            entry = QueueService._get_entry(db, entry_id)
            if entry.status in (QueueStatus.COMPLETED.value, QueueStatus.CANCELLED.value):
                raise InvalidState(f"Cannot cancel queue entry with status {entry.status}")

            entry.status = QueueStatus.CANCELLED.value

            shipment = db.get(Shipment, entry.shipment_id)
            if shipment and shipment.status == ShipmentStatus.QUEUED.value:
                ShipmentService.transition(db, shipment, ShipmentStatus.PENDING.value)

        db.refresh(entry)
        logger.info(f"Cancelled queue entry {entry.id}")
        return entry

    @staticmethod
    def reprioritize(db: Session, entry_id: UUID, priority: int) -> QueueEntry:
        with atomic(db):
            entry = QueueService._get_entry(db, entry_id)
            entry.priority = priority

        db.refresh(entry)
        return entry

    @staticmethod
    def get_statistics(db: Session, warehouse_id: UUID) -> Dict:
        """Counts per state and average wait/loading minutes of completed entries"""
        entries = db.query(QueueEntry).filter(QueueEntry.warehouse_id == warehouse_id).all()

        waiting = len([e for e in entries if e.status == QueueStatus.WAITING.value])
        loading = len([e for e in entries if e.status == QueueStatus.LOADING.value])
        completed = len([e for e in entries if e.status == QueueStatus.COMPLETED.value])

        timed = [
            e for e in entries
            if e.status == QueueStatus.COMPLETED.value
            and e.arrival_time and e.start_loading_time and e.finish_loading_time
        ]

        total_wait = sum((e.start_loading_time - e.arrival_time).total_seconds() / 60 for e in timed)
        total_loading = sum((e.finish_loading_time - e.start_loading_time).total_seconds() / 60 for e in timed)

        return {
            "waiting": waiting,
            "loading": loading,
            "completed": completed,
            "average_wait_time": round(total_wait / len(timed), 2) if timed else 0,
            "average_loading_time": round(total_loading / len(timed), 2) if timed else 0,
        }
