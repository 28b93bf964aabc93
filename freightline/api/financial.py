"""
Financial API - Settlement, driver ledger and company report
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from freightline.core import get_db
from freightline.models import TransactionType
from freightline.schemas.shipment import ShipmentResponse
from freightline.schemas.finance import (
    SettlementRequest, TransactionCreate, TransactionResponse,
    DriverBalance, BalanceReconciliation, FinancialReport
)
from freightline.services import FinanceService

financial_router = APIRouter(prefix="/financial", tags=["Financial"])


@financial_router.post("/settle/{shipment_id}")
def settle_shipment(shipment_id: UUID, data: SettlementRequest, db: Session = Depends(get_db)):
    result = FinanceService.settle_shipment(db, shipment_id, data.fuel_cost, data.other_expenses)
    expense = result["expense_transaction"]
    return {
        "shipment": ShipmentResponse.model_validate(result["shipment"]),
        "transaction": TransactionResponse.model_validate(result["transaction"]),
        "expense_transaction": TransactionResponse.model_validate(expense) if expense else None,
    }


@financial_router.post("/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(data: TransactionCreate, db: Session = Depends(get_db)):
    transaction = FinanceService.create_transaction(
        db,
        data.driver_id,
        data.type.value,
        data.amount,
        description=data.description,
        shipment_id=data.shipment_id
    )
    return TransactionResponse.model_validate(transaction)


@financial_router.get("/drivers/{driver_id}/transactions", response_model=List[TransactionResponse])
def get_driver_transactions(
    driver_id: UUID,
    type: Optional[TransactionType] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db)
):
    transactions = FinanceService.get_driver_transactions(db, driver_id, type.value if type else None, limit)
    return [TransactionResponse.model_validate(t) for t in transactions]


@financial_router.get("/drivers/{driver_id}/balance", response_model=DriverBalance)
def get_driver_balance(driver_id: UUID, db: Session = Depends(get_db)):
    result = FinanceService.get_driver_balance(db, driver_id)
    return DriverBalance(
        driver_id=result["driver"].id,
        balance=result["balance"],
        total_earnings=result["total_earnings"],
        total_expenses=result["total_expenses"],
        transaction_count=result["transaction_count"],
    )


@financial_router.get("/drivers/{driver_id}/reconcile", response_model=BalanceReconciliation)
def reconcile_driver_balance(driver_id: UUID, db: Session = Depends(get_db)):
    return FinanceService.reconcile_driver_balance(db, driver_id)


@financial_router.get("/report", response_model=FinancialReport)
def company_report(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    db: Session = Depends(get_db)
):
    return FinanceService.get_company_financial_report(db, start_date, end_date)
