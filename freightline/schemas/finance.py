"""
Finance Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID
from decimal import Decimal

from freightline.models import TransactionType

class SettlementRequest(BaseModel):
    fuel_cost: Decimal = Field(..., ge=0)
    other_expenses: Decimal = Field(Decimal("0"), ge=0)

class TransactionCreate(BaseModel):
    driver_id: UUID
    type: TransactionType
    amount: Decimal
    description: Optional[str] = None
    shipment_id: Optional[UUID] = None

class TransactionResponse(BaseModel):
    id: UUID
    driver_id: UUID
    sequence: int
    shipment_id: Optional[UUID] = None
    type: str
    status: str
    amount: Decimal
    balance_before: Optional[Decimal] = None
    balance_after: Optional[Decimal] = None
    description: Optional[str] = None
    reference: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class DriverBalance(BaseModel):
    driver_id: UUID
    balance: Decimal
    total_earnings: Decimal
    total_expenses: Decimal
    transaction_count: int

class BalanceReconciliation(BaseModel):
    driver_id: UUID
    stored_balance: Decimal
    ledger_balance: Decimal
    drift: Decimal
    is_consistent: bool

class FinancialReport(BaseModel):
    total_revenue: Decimal
    total_driver_payments: Decimal
    total_expenses: Decimal
    total_profit: Decimal
    shipment_count: int
