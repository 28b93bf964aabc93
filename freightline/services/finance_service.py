"""
Finance Service - Driver ledger and shipment settlement

Driver.balance is the running total of the driver's ledger. Every change to
it is made in the same unit of work as the Transaction row that explains it,
and every Transaction records balance_before / balance_after such that
balance_after - balance_before == amount.
"""
import logging
import random
import string
from sqlalchemy import func
from sqlalchemy.orm import Session
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, List, Optional, Union
from uuid import UUID

from freightline.core import atomic, settings
from freightline.core.exceptions import (
    NotFound, InvalidState, InsufficientBalance, MissingDriver, DuplicateEntry
)
from freightline.models import (
    Driver, Shipment, ShipmentStatus, Transaction, TransactionType, TransactionStatus
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
REFERENCE_ATTEMPTS = 5

Number = Union[Decimal, int, float, str]

def to_money(value: Optional[Number]) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)

class FinanceService:
    """Finance specific business logic"""

    @staticmethod
    def _lock_driver(db: Session, driver_id: UUID) -> Driver:
        driver = db.query(Driver).filter(Driver.id == driver_id).with_for_update().first()
        if not driver:
            raise NotFound("Driver", driver_id)
        return driver

    @staticmethod
    def generate_reference(db: Session) -> str:
        """TXN-{epoch ms}-{9 random chars}, re-rolled on collision"""
        alphabet = string.ascii_lowercase + string.digits
        for _ in range(REFERENCE_ATTEMPTS):
            millis = int(datetime.now().timestamp() * 1000)
            suffix = "".join(random.choices(alphabet, k=9))
            reference = f"TXN-{millis}-{suffix}"
            exists = db.query(Transaction.id).filter(Transaction.reference == reference).first()
            if not exists:
                return reference
        raise DuplicateEntry(f"Could not generate a unique transaction reference after {REFERENCE_ATTEMPTS} attempts")

    @staticmethod
    def post(
        db: Session,
        driver: Driver,
        type: str,
        amount: Decimal,
        reference: str,
        description: Optional[str] = None,
        shipment_id: Optional[UUID] = None
    ) -> Transaction:
        """
        Append a completed entry to the driver's ledger and move the running
        balance to match. Does not commit.
        """
        balance_before = to_money(driver.balance)
        balance_after = balance_before + amount
        last_sequence = db.query(func.max(Transaction.sequence)).filter(
            Transaction.driver_id == driver.id
        ).scalar() or 0

        transaction = Transaction(
            driver_id=driver.id,
            sequence=last_sequence + 1,
            shipment_id=shipment_id,
            type=type,
            status=TransactionStatus.COMPLETED.value,
            amount=amount,
            balance_before=balance_before,
            balance_after=balance_after,
            description=description,
            reference=reference
        )
        db.add(transaction)
        driver.balance = balance_after
        # Later postings in the same unit of work read this sequence
        db.flush()
        return transaction

    # ===================== Settlement =====================

    @staticmethod
    def settle_shipment(
        db: Session,
        shipment_id: UUID,
        fuel_cost: Number,
        other_expenses: Number = 0
    ) -> Dict[str, Any]:
        """
        Pay the driver their share of a delivered shipment and book the
        company's profit. Posts a payment credit and, when there are costs,
        an expense debit chained off the post-payment balance.
        """
        fuel_cost = to_money(fuel_cost)
        other_expenses = to_money(other_expenses)

        with atomic(db):
            shipment = db.query(Shipment).filter(Shipment.id == shipment_id).with_for_update().first()
            if not shipment:
                raise NotFound("Shipment", shipment_id)

            if shipment.status != ShipmentStatus.DELIVERED.value:
                raise InvalidState(
                    f"Shipment must be delivered before settlement. Current status: {shipment.status}"
                )

            if not shipment.driver_id:
                raise MissingDriver(f"Shipment {shipment.tracking_number} has no assigned driver")

            if shipment.driver_payment is not None:
                raise InvalidState(f"Shipment {shipment.tracking_number} is already settled")

            driver = FinanceService._lock_driver(db, shipment.driver_id)

            total_value = to_money(shipment.total_value)
            rate = Decimal(str(settings.DRIVER_PAYMENT_RATE))
            driver_payment = to_money(total_value * rate)
            company_profit = total_value - (driver_payment + fuel_cost + other_expenses)

            shipment.driver_payment = driver_payment
            shipment.fuel_cost = fuel_cost
            shipment.other_expenses = other_expenses
            shipment.company_profit = company_profit

            payment = FinanceService.post(
                db, driver,
                type=TransactionType.PAYMENT.value,
                amount=driver_payment,
                reference=f"PAY-{shipment.tracking_number}",
                description=f"Payment for shipment {shipment.tracking_number}",
                shipment_id=shipment.id
            )

            expense = None
            total_costs = fuel_cost + other_expenses
            if total_costs > 0:
                expense = FinanceService.post(
                    db, driver,
                    type=TransactionType.EXPENSE.value,
                    amount=-total_costs,
                    reference=f"EXP-{shipment.tracking_number}",
                    description=(
                        f"Expenses for shipment {shipment.tracking_number}: "
                        f"Fuel: {fuel_cost}, Other: {other_expenses}"
                    ),
                    shipment_id=shipment.id
                )

        db.refresh(shipment)
        db.refresh(payment)
        if expense is not None:
            db.refresh(expense)

        logger.info(
            f"Settled shipment {shipment.tracking_number}: value={total_value} "
            f"driver_payment={driver_payment} costs={total_costs} profit={company_profit}"
        )
        return {"shipment": shipment, "transaction": payment, "expense_transaction": expense}

    # ===================== Ledger =====================

    @staticmethod
    def create_transaction(
        db: Session,
        driver_id: UUID,
        type: str,
        amount: Number,
        description: Optional[str] = None,
        shipment_id: Optional[UUID] = None
    ) -> Transaction:
        """
        Post a manual ledger entry. Payments and refunds are never blocked;
        expenses and adjustments may not take the balance below zero.
        """
        type = TransactionType(type).value
        amount = to_money(amount)

        with atomic(db):
            driver = FinanceService._lock_driver(db, driver_id)

            if shipment_id and not db.get(Shipment, shipment_id):
                raise NotFound("Shipment", shipment_id)

            balance_before = to_money(driver.balance)
            balance_after = balance_before + amount
            if balance_after < 0 and type in (TransactionType.EXPENSE.value, TransactionType.ADJUSTMENT.value):
                raise InsufficientBalance(
                    f"Insufficient balance. Current: {balance_before}, Required: {abs(amount)}",
                    balance=balance_before,
                    amount=amount
                )

            transaction = FinanceService.post(
                db, driver,
                type=type,
                amount=amount,
                reference=FinanceService.generate_reference(db),
                description=description,
                shipment_id=shipment_id
            )

        db.refresh(transaction)
        logger.info(
            f"Posted {type} {amount} for driver {driver_id}: "
            f"{transaction.balance_before} -> {transaction.balance_after}"
        )
        return transaction

    @staticmethod
    def get_driver_transactions(
        db: Session,
        driver_id: UUID,
        type: Optional[str] = None,
        limit: int = 50
    ) -> List[Transaction]:
        query = db.query(Transaction).filter(Transaction.driver_id == driver_id)

        if type:
            query = query.filter(Transaction.type == type)

        return query.order_by(Transaction.sequence.desc()).limit(limit).all()

    @staticmethod
    def get_driver_balance(db: Session, driver_id: UUID) -> Dict[str, Any]:
        """Stored balance alongside earnings/expenses recomputed from history"""
        driver = db.get(Driver, driver_id)
        if not driver:
            raise NotFound("Driver", driver_id)

        transactions = db.query(Transaction).filter(
            Transaction.driver_id == driver_id,
            Transaction.status == TransactionStatus.COMPLETED.value
        ).all()

        total_earnings = sum(
            (to_money(t.amount) for t in transactions
             if t.type in (TransactionType.PAYMENT.value, TransactionType.REFUND.value) and t.amount > 0),
            Decimal("0.00")
        )
        total_expenses = abs(sum(
            (to_money(t.amount) for t in transactions
             if t.type == TransactionType.EXPENSE.value and t.amount < 0),
            Decimal("0.00")
        ))

        return {
            "driver": driver,
            "balance": to_money(driver.balance),
            "total_earnings": total_earnings,
            "total_expenses": total_expenses,
            "transaction_count": len(transactions),
        }

    @staticmethod
    def reconcile_driver_balance(db: Session, driver_id: UUID) -> Dict[str, Any]:
        """
        Recompute the balance from completed ledger entries and compare it
        with the stored running total.
        """
        driver = db.get(Driver, driver_id)
        if not driver:
            raise NotFound("Driver", driver_id)

        amounts = db.query(Transaction.amount).filter(
            Transaction.driver_id == driver_id,
            Transaction.status == TransactionStatus.COMPLETED.value
        ).all()

        ledger_balance = sum((to_money(a) for (a,) in amounts), Decimal("0.00"))
        stored_balance = to_money(driver.balance)
        drift = stored_balance - ledger_balance

        if drift != 0:
            logger.warning(
                f"Balance drift for driver {driver_id}: stored={stored_balance} ledger={ledger_balance}"
            )

        return {
            "driver_id": driver.id,
            "stored_balance": stored_balance,
            "ledger_balance": ledger_balance,
            "drift": drift,
            "is_consistent": drift == 0,
        }

    # ===================== Reporting =====================

    @staticmethod
    def get_company_financial_report(
        db: Session,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Revenue, payouts, expenses and profit over delivered shipments"""
        query = db.query(Shipment).filter(Shipment.status == ShipmentStatus.DELIVERED.value)

        if start_date:
            query = query.filter(Shipment.actual_delivery_date >= start_date)

        if end_date:
            query = query.filter(Shipment.actual_delivery_date <= end_date)

        shipments = query.all()

        return {
            "total_revenue": sum((to_money(s.total_value) for s in shipments), Decimal("0.00")),
            "total_driver_payments": sum((to_money(s.driver_payment) for s in shipments), Decimal("0.00")),
            "total_expenses": sum(
                (to_money(s.fuel_cost) + to_money(s.other_expenses) for s in shipments),
                Decimal("0.00")
            ),
            "total_profit": sum((to_money(s.company_profit) for s in shipments), Decimal("0.00")),
            "shipment_count": len(shipments),
        }
