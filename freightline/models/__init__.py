from .base import TimestampMixin, UUIDMixin
from .master import Warehouse, Product, Driver, DriverStatus
from .stock import Stock
from .shipment import Shipment, ShipmentItem, ShipmentLeg, ShipmentStatus, LegStatus
from .queue import QueueEntry, QueueStatus
from .finance import Transaction, TransactionType, TransactionStatus

__all__ = [
    # Base
    "TimestampMixin", "UUIDMixin",
    # Master
    "Warehouse", "Product", "Driver", "DriverStatus",
    # Stock
    "Stock",
    # Shipment
    "Shipment", "ShipmentItem", "ShipmentLeg", "ShipmentStatus", "LegStatus",
    # Dock queue
    "QueueEntry", "QueueStatus",
    # Finance
    "Transaction", "TransactionType", "TransactionStatus",
]
