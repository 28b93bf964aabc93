# Services Package
from .stock_service import StockService
from .shipment_service import ShipmentService
from .queue_service import QueueService
from .finance_service import FinanceService
from .master_service import MasterService

__all__ = [
    "StockService",
    "ShipmentService",
    "QueueService",
    "FinanceService",
    "MasterService",
]
