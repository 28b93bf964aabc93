"""
Driver Ledger Model
"""
from sqlalchemy import Column, String, Integer, Numeric, ForeignKey, Uuid, Index, UniqueConstraint
from sqlalchemy.orm import relationship
import enum

from freightline.core import Base
from .base import UUIDMixin, TimestampMixin


class TransactionType(str, enum.Enum):
    PAYMENT = "payment"
    EXPENSE = "expense"
    REFUND = "refund"
    ADJUSTMENT = "adjustment"


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class Transaction(Base, UUIDMixin, TimestampMixin):
    """
    Driver Ledger Entry (append-only)
    amount is signed: positive credits the driver, negative debits.
    balance_after - balance_before == amount
    """
    __tablename__ = "ledger_transaction"
    
    driver_id = Column(Uuid(as_uuid=True), ForeignKey("driver.id"), nullable=False)
    shipment_id = Column(Uuid(as_uuid=True), ForeignKey("shipment.id"), index=True)
    sequence = Column(Integer, nullable=False)  # Per-driver posting order, 1-based
    
    type = Column(String(20), nullable=False)
    status = Column(String(20), default=TransactionStatus.PENDING.value, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    balance_before = Column(Numeric(12, 2))
    balance_after = Column(Numeric(12, 2))
    
    description = Column(String(500))
    reference = Column(String(100), unique=True)
    
    # Relationships
    driver = relationship("Driver", back_populates="transactions")
    shipment = relationship("Shipment", back_populates="transactions")
    
    __table_args__ = (
        UniqueConstraint("driver_id", "sequence", name="uq_transaction_driver_sequence"),
        Index("ix_transaction_driver_status", driver_id, status),
        Index("ix_transaction_type_status", type, status),
    )
