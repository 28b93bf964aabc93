"""
Stock Service - Reservation ledger for warehouse inventory

Every mutation here runs inside the caller's session transaction and never
commits by itself: reserving stock while creating a shipment, or moving it
while unloading, must land together with the caller's other writes.
The route-level helpers at the bottom (`*_and_commit`) wrap a single
mutation in its own unit of work for direct inventory endpoints.
"""
import logging
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from freightline.core import atomic
from freightline.core.exceptions import InsufficientStock, NotFound
from freightline.models import Stock, Product, Warehouse

logger = logging.getLogger(__name__)

class StockService:
    """Stock/Inventory business logic"""

    @staticmethod
    def get_stock(db: Session, product_id: UUID, warehouse_id: UUID, for_update: bool = False) -> Optional[Stock]:
        """Point lookup by (product, warehouse)"""
        query = db.query(Stock).filter(
            Stock.product_id == product_id,
            Stock.warehouse_id == warehouse_id
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def reserve(db: Session, product_id: UUID, warehouse_id: UUID, quantity: int) -> Stock:
        """Commit stock to an open shipment"""
        stock = StockService.get_stock(db, product_id, warehouse_id, for_update=True)
        available = stock.available_quantity if stock else 0

        if not stock or available < quantity:
            raise InsufficientStock(
                f"Insufficient stock for product {product_id} at warehouse {warehouse_id}. "
                f"Available: {available}, Requested: {quantity}",
                available=available,
                requested=quantity
            )

        stock.reserved_quantity += quantity
        stock.recompute_available()
        return stock

    @staticmethod
    def release(db: Session, product_id: UUID, warehouse_id: UUID, quantity: int) -> Stock:
        """Give back reserved stock; releasing more than is reserved is rejected"""
        stock = StockService.get_stock(db, product_id, warehouse_id, for_update=True)
        if not stock:
            raise NotFound("Stock", f"{product_id}@{warehouse_id}")

        if stock.reserved_quantity < quantity:
            raise InsufficientStock(
                f"Cannot release {quantity} of product {product_id} at warehouse {warehouse_id}. "
                f"Reserved: {stock.reserved_quantity}",
                available=stock.reserved_quantity,
                requested=quantity
            )

        stock.reserved_quantity -= quantity
        stock.recompute_available()
        return stock

    @staticmethod
    def consume(db: Session, product_id: UUID, warehouse_id: UUID, quantity: int) -> Stock:
        """Physically remove previously reserved stock"""
        stock = StockService.get_stock(db, product_id, warehouse_id, for_update=True)
        if not stock:
            raise NotFound("Stock", f"{product_id}@{warehouse_id}")

        if stock.reserved_quantity < quantity or stock.quantity < quantity:
            raise InsufficientStock(
                f"Cannot consume {quantity} of product {product_id} at warehouse {warehouse_id}. "
                f"On hand: {stock.quantity}, Reserved: {stock.reserved_quantity}",
                available=min(stock.quantity, stock.reserved_quantity),
                requested=quantity
            )

        stock.quantity -= quantity
        stock.reserved_quantity -= quantity
        stock.recompute_available()
        return stock

    @staticmethod
    def receive(db: Session, product_id: UUID, warehouse_id: UUID, quantity: int) -> Stock:
        """Arriving goods - creates the stock record on first arrival"""
        stock = StockService.get_stock(db, product_id, warehouse_id, for_update=True)
        if not stock:
            stock = Stock(
                product_id=product_id,
                warehouse_id=warehouse_id,
                quantity=0,
                reserved_quantity=0,
                available_quantity=0
            )
            db.add(stock)

        stock.quantity += quantity
        stock.recompute_available()
        # Make the new row visible to later lookups in the same transaction
        db.flush()
        return stock

    @staticmethod
    def set_quantity(db: Session, product_id: UUID, warehouse_id: UUID, quantity: int, reason: Optional[str] = None) -> Stock:
        """Overwrite the on-hand count (stock take / manual correction)"""
        if not db.get(Product, product_id):
            raise NotFound("Product", product_id)
        if not db.get(Warehouse, warehouse_id):
            raise NotFound("Warehouse", warehouse_id)

        stock = StockService.get_stock(db, product_id, warehouse_id, for_update=True)
        if not stock:
            stock = Stock(
                product_id=product_id,
                warehouse_id=warehouse_id,
                quantity=0,
                reserved_quantity=0,
                available_quantity=0
            )
            db.add(stock)

        if quantity < stock.reserved_quantity:
            raise InsufficientStock(
                f"Cannot set on-hand quantity to {quantity}: {stock.reserved_quantity} units are reserved",
                available=stock.quantity,
                requested=quantity
            )

        old_quantity = stock.quantity
        stock.quantity = quantity
        stock.recompute_available()
        db.flush()

        logger.info(
            f"Stock set: product={product_id} warehouse={warehouse_id} "
            f"{old_quantity} -> {quantity} ({reason or 'no reason given'})"
        )
        return stock

    # ===================== Single-operation units of work =====================

    @staticmethod
    def reserve_and_commit(db: Session, product_id: UUID, warehouse_id: UUID, quantity: int) -> Stock:
        with atomic(db):
            stock = StockService.reserve(db, product_id, warehouse_id, quantity)
        db.refresh(stock)
        return stock

    @staticmethod
    def release_and_commit(db: Session, product_id: UUID, warehouse_id: UUID, quantity: int) -> Stock:
        with atomic(db):
            stock = StockService.release(db, product_id, warehouse_id, quantity)
        db.refresh(stock)
        return stock

    @staticmethod
    def consume_and_commit(db: Session, product_id: UUID, warehouse_id: UUID, quantity: int) -> Stock:
        with atomic(db):
            stock = StockService.consume(db, product_id, warehouse_id, quantity)
        db.refresh(stock)
        return stock

    @staticmethod
    def receive_and_commit(db: Session, product_id: UUID, warehouse_id: UUID, quantity: int) -> Stock:
        with atomic(db):
            if not db.get(Product, product_id):
                raise NotFound("Product", product_id)
            if not db.get(Warehouse, warehouse_id):
                raise NotFound("Warehouse", warehouse_id)
            stock = StockService.receive(db, product_id, warehouse_id, quantity)
        db.refresh(stock)
        return stock

    @staticmethod
    def set_quantity_and_commit(db: Session, product_id: UUID, warehouse_id: UUID, quantity: int, reason: Optional[str] = None) -> Stock:
        with atomic(db):
            stock = StockService.set_quantity(db, product_id, warehouse_id, quantity, reason)
        db.refresh(stock)
        return stock

    # ===================== Lookups =====================

    @staticmethod
    def get_stock_by_warehouse(db: Session, warehouse_id: UUID) -> List[Stock]:
        if not db.get(Warehouse, warehouse_id):
            raise NotFound("Warehouse", warehouse_id)
        return db.query(Stock).filter(Stock.warehouse_id == warehouse_id).all()

    @staticmethod
    def get_stock_by_product(db: Session, product_id: UUID) -> List[Stock]:
        if not db.get(Product, product_id):
            raise NotFound("Product", product_id)
        return db.query(Stock).filter(Stock.product_id == product_id).all()

    @staticmethod
    def get_low_stock(db: Session, warehouse_id: Optional[UUID] = None) -> List[Stock]:
        """Stock records at or below the product's low-stock threshold"""
        query = db.query(Stock).join(Product).filter(
            Product.is_active == True,
            Stock.available_quantity <= Product.low_stock_threshold
        )

        if warehouse_id:
            query = query.filter(Stock.warehouse_id == warehouse_id)

        return query.order_by(Stock.available_quantity.asc()).all()
