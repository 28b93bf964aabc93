"""
Inventory API - Stock ledger operations and lookups
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional, List
from uuid import UUID

from freightline.core import get_db
from freightline.schemas.stock import StockQuantityChange, StockUpdate, StockResponse
from freightline.services import StockService

inventory_router = APIRouter(prefix="/inventory", tags=["Inventory"])


@inventory_router.post("/stock", response_model=StockResponse)
def update_stock(data: StockUpdate, db: Session = Depends(get_db)):
    stock = StockService.set_quantity_and_commit(db, data.product_id, data.warehouse_id, data.quantity, data.reason)
    return StockResponse.model_validate(stock)


@inventory_router.post("/stock/reserve", response_model=StockResponse)
def reserve_stock(data: StockQuantityChange, db: Session = Depends(get_db)):
    stock = StockService.reserve_and_commit(db, data.product_id, data.warehouse_id, data.quantity)
    return StockResponse.model_validate(stock)


@inventory_router.post("/stock/release", response_model=StockResponse)
def release_stock(data: StockQuantityChange, db: Session = Depends(get_db)):
    stock = StockService.release_and_commit(db, data.product_id, data.warehouse_id, data.quantity)
    return StockResponse.model_validate(stock)


@inventory_router.post("/stock/consume", response_model=StockResponse)
def consume_stock(data: StockQuantityChange, db: Session = Depends(get_db)):
    stock = StockService.consume_and_commit(db, data.product_id, data.warehouse_id, data.quantity)
    return StockResponse.model_validate(stock)


@inventory_router.post("/stock/receive", response_model=StockResponse)
def receive_stock(data: StockQuantityChange, db: Session = Depends(get_db)):
    stock = StockService.receive_and_commit(db, data.product_id, data.warehouse_id, data.quantity)
    return StockResponse.model_validate(stock)


@inventory_router.get("/stock/warehouse/{warehouse_id}", response_model=List[StockResponse])
def get_stock_by_warehouse(warehouse_id: UUID, db: Session = Depends(get_db)):
    return [StockResponse.model_validate(s) for s in StockService.get_stock_by_warehouse(db, warehouse_id)]


@inventory_router.get("/stock/product/{product_id}", response_model=List[StockResponse])
def get_stock_by_product(product_id: UUID, db: Session = Depends(get_db)):
    return [StockResponse.model_validate(s) for s in StockService.get_stock_by_product(db, product_id)]


@inventory_router.get("/low-stock", response_model=List[StockResponse])
def get_low_stock(warehouse_id: Optional[UUID] = Query(None), db: Session = Depends(get_db)):
    return [StockResponse.model_validate(s) for s in StockService.get_low_stock(db, warehouse_id)]
