"""
Dock Queue Model - one shipment's claim on one warehouse's loading dock
"""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Uuid, Index, text
from sqlalchemy.orm import relationship
import enum

from freightline.core import Base
from .base import UUIDMixin, TimestampMixin


class QueueStatus(str, enum.Enum):
    WAITING = "waiting"
    LOADING = "loading"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class QueueEntry(Base, UUIDMixin, TimestampMixin):
    """Loading dock queue entry"""
    __tablename__ = "queue_entry"
    
    warehouse_id = Column(Uuid(as_uuid=True), ForeignKey("warehouse.id"), nullable=False)
    shipment_id = Column(Uuid(as_uuid=True), ForeignKey("shipment.id"), nullable=False, index=True)
    driver_id = Column(Uuid(as_uuid=True), ForeignKey("driver.id"), nullable=False, index=True)
    
    status = Column(String(20), default=QueueStatus.WAITING.value, nullable=False)
    priority = Column(Integer, default=0, nullable=False)  # Higher is served first
    arrival_time = Column(DateTime(timezone=True), nullable=False)  # FIFO tie-break
    start_loading_time = Column(DateTime(timezone=True))
    finish_loading_time = Column(DateTime(timezone=True))
    estimated_loading_minutes = Column(Integer, default=0)
    
    # Relationships
    warehouse = relationship("Warehouse", back_populates="queue_entries")
    shipment = relationship("Shipment")
    driver = relationship("Driver")
    
    __table_args__ = (
        Index("ix_queue_warehouse_status_priority", warehouse_id, status, priority),
        # Only one WAITING claim per (warehouse, shipment)
        Index(
            "uq_queue_waiting_shipment",
            warehouse_id,
            shipment_id,
            unique=True,
            postgresql_where=text("status = 'waiting'"),
            sqlite_where=text("status = 'waiting'"),
        ),
    )
