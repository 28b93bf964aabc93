# Pydantic Schemas Package
from .master import (
    WarehouseCreate, WarehouseResponse, ProductCreate, ProductResponse,
    DriverCreate, DriverResponse, DriverStatusUpdate
)
from .stock import StockQuantityChange, StockUpdate, StockResponse
from .shipment import (
    ShipmentCreate, ShipmentItemCreate, ShipmentLegCreate, ShipmentResponse,
    ShipmentStatusUpdate, LegStatusUpdate, ShipmentLegResponse, DriverAssign, UnloadRequest
)
from .queue import QueueEntryCreate, PriorityUpdate, QueueEntryResponse, QueueStatistics
from .finance import (
    SettlementRequest, TransactionCreate, TransactionResponse,
    DriverBalance, BalanceReconciliation, FinancialReport
)

__all__ = [
    "WarehouseCreate", "WarehouseResponse", "ProductCreate", "ProductResponse",
    "DriverCreate", "DriverResponse", "DriverStatusUpdate",
    "StockQuantityChange", "StockUpdate", "StockResponse",
    "ShipmentCreate", "ShipmentItemCreate", "ShipmentLegCreate", "ShipmentResponse",
    "ShipmentStatusUpdate", "LegStatusUpdate", "ShipmentLegResponse", "DriverAssign", "UnloadRequest",
    "QueueEntryCreate", "PriorityUpdate", "QueueEntryResponse", "QueueStatistics",
    "SettlementRequest", "TransactionCreate", "TransactionResponse",
    "DriverBalance", "BalanceReconciliation", "FinancialReport",
]
