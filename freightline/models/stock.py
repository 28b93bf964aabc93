"""
Stock Model - on-hand / reserved / available per product and warehouse
"""
from sqlalchemy import Column, Integer, ForeignKey, Uuid, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from freightline.core import Base
from .base import UUIDMixin, TimestampMixin

class Stock(Base, UUIDMixin, TimestampMixin):
    """Stock record for one product at one warehouse"""
    __tablename__ = "stock"
    
    product_id = Column(Uuid(as_uuid=True), ForeignKey("product.id", ondelete="CASCADE"), nullable=False)
    warehouse_id = Column(Uuid(as_uuid=True), ForeignKey("warehouse.id", ondelete="CASCADE"), nullable=False)
    
    quantity = Column(Integer, default=0, nullable=False)  # On hand
    reserved_quantity = Column(Integer, default=0, nullable=False)  # Committed to open shipments
    available_quantity = Column(Integer, default=0, nullable=False)  # quantity - reserved_quantity
    
    # Relationships
    product = relationship("Product", back_populates="stocks")
    warehouse = relationship("Warehouse", back_populates="stocks")
    
    __table_args__ = (
        UniqueConstraint("product_id", "warehouse_id", name="uq_stock_product_warehouse"),
        Index("ix_stock_warehouse_product", "warehouse_id", "product_id"),
    )

    def recompute_available(self):
        self.available_quantity = self.quantity - self.reserved_quantity
