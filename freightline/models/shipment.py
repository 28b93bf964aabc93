"""
Shipment Models: Shipment, ShipmentItem, ShipmentLeg
"""
from sqlalchemy import Column, String, Numeric, Integer, Boolean, DateTime, ForeignKey, Uuid, Index, UniqueConstraint
from sqlalchemy.orm import relationship
import enum

from freightline.core import Base
from .base import UUIDMixin, TimestampMixin


class ShipmentStatus(str, enum.Enum):
    PENDING = "pending"
    QUEUED = "queued"
    LOADING = "loading"
    IN_TRANSIT = "in_transit"
    AT_WAREHOUSE = "at_warehouse"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class LegStatus(str, enum.Enum):
    PENDING = "pending"
    IN_TRANSIT = "in_transit"
    ARRIVED = "arrived"
    UNLOADED = "unloaded"
    COMPLETED = "completed"


class Shipment(Base, UUIDMixin, TimestampMixin):
    """Shipment Header"""
    __tablename__ = "shipment"
    
    tracking_number = Column(String(50), unique=True, nullable=False)
    
    # Route
    origin_warehouse_id = Column(Uuid(as_uuid=True), ForeignKey("warehouse.id"), nullable=False, index=True)
    destination_warehouse_id = Column(Uuid(as_uuid=True), ForeignKey("warehouse.id"), index=True)
    driver_id = Column(Uuid(as_uuid=True), ForeignKey("driver.id"))
    
    status = Column(String(20), default=ShipmentStatus.PENDING.value, nullable=False, index=True)
    
    # Recipient (address-only deliveries)
    destination_address = Column(String(500))
    recipient_name = Column(String(255))
    recipient_phone = Column(String(20))
    
    # Totals (1 unit == 1 weight unit)
    total_weight = Column(Numeric(10, 2), default=0)
    total_value = Column(Numeric(10, 2), default=0)
    
    # Settlement - null until settled
    driver_payment = Column(Numeric(10, 2))
    fuel_cost = Column(Numeric(10, 2))
    other_expenses = Column(Numeric(10, 2))
    company_profit = Column(Numeric(10, 2))
    
    # Schedule
    scheduled_pickup_date = Column(DateTime(timezone=True))
    actual_pickup_date = Column(DateTime(timezone=True))
    scheduled_delivery_date = Column(DateTime(timezone=True))
    actual_delivery_date = Column(DateTime(timezone=True))
    
    is_multi_leg = Column(Boolean, default=False)
    
    # Relationships
    origin_warehouse = relationship("Warehouse", foreign_keys=[origin_warehouse_id])
    destination_warehouse = relationship("Warehouse", foreign_keys=[destination_warehouse_id])
    driver = relationship("Driver", back_populates="shipments")
    items = relationship("ShipmentItem", back_populates="shipment", cascade="all, delete-orphan")
    legs = relationship("ShipmentLeg", back_populates="shipment", cascade="all, delete-orphan",
                        order_by="ShipmentLeg.sequence")
    transactions = relationship("Transaction", back_populates="shipment")
    
    __table_args__ = (
        Index("ix_shipment_driver_status", driver_id, status),
    )


class ShipmentItem(Base, UUIDMixin, TimestampMixin):
    """Shipment Line - unit price is a snapshot taken at creation"""
    __tablename__ = "shipment_item"
    
    shipment_id = Column(Uuid(as_uuid=True), ForeignKey("shipment.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("product.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    
    # Relationships
    shipment = relationship("Shipment", back_populates="items")
    product = relationship("Product")
    
    __table_args__ = (
        Index("ix_shipment_item_shipment_product", shipment_id, product_id),
    )


class ShipmentLeg(Base, UUIDMixin, TimestampMixin):
    """One point-to-point segment of a multi-warehouse route"""
    __tablename__ = "shipment_leg"
    
    shipment_id = Column(Uuid(as_uuid=True), ForeignKey("shipment.id", ondelete="CASCADE"), nullable=False)
    sequence = Column(Integer, nullable=False)  # 1-based order
    from_warehouse_id = Column(Uuid(as_uuid=True), ForeignKey("warehouse.id"), nullable=False)
    to_warehouse_id = Column(Uuid(as_uuid=True), ForeignKey("warehouse.id"), nullable=False)
    status = Column(String(20), default=LegStatus.PENDING.value, nullable=False, index=True)
    
    scheduled_departure_date = Column(DateTime(timezone=True))
    actual_departure_date = Column(DateTime(timezone=True))
    scheduled_arrival_date = Column(DateTime(timezone=True))
    actual_arrival_date = Column(DateTime(timezone=True))
    unloaded_date = Column(DateTime(timezone=True))
    distance = Column(Numeric(10, 2))
    
    # Relationships
    shipment = relationship("Shipment", back_populates="legs")
    from_warehouse = relationship("Warehouse", foreign_keys=[from_warehouse_id])
    to_warehouse = relationship("Warehouse", foreign_keys=[to_warehouse_id])
    
    __table_args__ = (
        UniqueConstraint("shipment_id", "sequence", name="uq_shipment_leg_sequence"),
    )
