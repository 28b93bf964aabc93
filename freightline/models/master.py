"""
Master Tables: Warehouse, Product, Driver
"""
from sqlalchemy import Column, String, Boolean, Integer, Numeric, Text
from sqlalchemy.orm import relationship
import enum

from freightline.core import Base
from .base import UUIDMixin, TimestampMixin


class DriverStatus(str, enum.Enum):
    AVAILABLE = "available"
    ON_ROUTE = "on_route"
    LOADING = "loading"
    UNLOADING = "unloading"
    OFF_DUTY = "off_duty"


class Warehouse(Base, UUIDMixin, TimestampMixin):
    """Warehouse / Loading Dock Site"""
    __tablename__ = "warehouse"
    
    code = Column(String(50), unique=True, nullable=False)
    name = Column(String(255), nullable=False, index=True)
    address = Column(String(500), nullable=False)
    location = Column(String(100), nullable=False, index=True)
    latitude = Column(Numeric(10, 6))
    longitude = Column(Numeric(10, 6))
    capacity = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    
    # Relationships
    stocks = relationship("Stock", back_populates="warehouse")
    queue_entries = relationship("QueueEntry", back_populates="warehouse")


class Product(Base, UUIDMixin, TimestampMixin):
    """Product Master"""
    __tablename__ = "product"
    
    sku = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    category = Column(String(50))
    unit_price = Column(Numeric(10, 2), nullable=False)
    unit = Column(String(20), default="pcs")
    low_stock_threshold = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    
    # Relationships
    stocks = relationship("Stock", back_populates="product")


class Driver(Base, UUIDMixin, TimestampMixin):
    """Driver - balance is the running total of the driver's ledger"""
    __tablename__ = "driver"
    
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    license_number = Column(String(50), unique=True, nullable=False)
    phone_number = Column(String(20), nullable=False, index=True)
    email = Column(String(255))
    vehicle_type = Column(String(50))
    vehicle_number = Column(String(20))
    status = Column(String(20), default=DriverStatus.AVAILABLE.value, nullable=False, index=True)
    balance = Column(Numeric(12, 2), default=0, nullable=False)
    is_active = Column(Boolean, default=True)
    
    # Relationships
    shipments = relationship("Shipment", back_populates="driver")
    transactions = relationship("Transaction", back_populates="driver")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
