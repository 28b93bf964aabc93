"""
Master Data API - Warehouses, Products, Drivers
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional, List
from uuid import UUID

from freightline.core import get_db
from freightline.models import DriverStatus
from freightline.schemas.master import (
    WarehouseCreate, WarehouseResponse, ProductCreate, ProductResponse,
    DriverCreate, DriverResponse, DriverStatusUpdate
)
from freightline.services import MasterService

master_router = APIRouter(tags=["Master Data"])

# ===================== WAREHOUSES =====================

@master_router.post("/warehouses", response_model=WarehouseResponse, status_code=201)
def create_warehouse(data: WarehouseCreate, db: Session = Depends(get_db)):
    return WarehouseResponse.model_validate(MasterService.create_warehouse(db, data))

@master_router.get("/warehouses", response_model=List[WarehouseResponse])
def list_warehouses(db: Session = Depends(get_db)):
    return [WarehouseResponse.model_validate(w) for w in MasterService.get_warehouses(db)]

@master_router.get("/warehouses/{warehouse_id}", response_model=WarehouseResponse)
def get_warehouse(warehouse_id: UUID, db: Session = Depends(get_db)):
    return WarehouseResponse.model_validate(MasterService.get_warehouse(db, warehouse_id))

@master_router.delete("/warehouses/{warehouse_id}", status_code=204)
def delete_warehouse(warehouse_id: UUID, db: Session = Depends(get_db)):
    MasterService.delete_warehouse(db, warehouse_id)

# ===================== PRODUCTS =====================

@master_router.post("/products", response_model=ProductResponse, status_code=201)
def create_product(data: ProductCreate, db: Session = Depends(get_db)):
    return ProductResponse.model_validate(MasterService.create_product(db, data))

@master_router.get("/products", response_model=List[ProductResponse])
def list_products(db: Session = Depends(get_db)):
    return [ProductResponse.model_validate(p) for p in MasterService.get_products(db)]

@master_router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: UUID, db: Session = Depends(get_db)):
    return ProductResponse.model_validate(MasterService.get_product(db, product_id))

@master_router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: UUID, db: Session = Depends(get_db)):
    MasterService.delete_product(db, product_id)

# ===================== DRIVERS =====================

@master_router.post("/drivers", response_model=DriverResponse, status_code=201)
def create_driver(data: DriverCreate, db: Session = Depends(get_db)):
    return DriverResponse.model_validate(MasterService.create_driver(db, data))

@master_router.get("/drivers", response_model=List[DriverResponse])
def list_drivers(status: Optional[DriverStatus] = Query(None), db: Session = Depends(get_db)):
    drivers = MasterService.get_drivers(db, status.value if status else None)
    return [DriverResponse.model_validate(d) for d in drivers]

@master_router.get("/drivers/{driver_id}", response_model=DriverResponse)
def get_driver(driver_id: UUID, db: Session = Depends(get_db)):
    return DriverResponse.model_validate(MasterService.get_driver(db, driver_id))

@master_router.put("/drivers/{driver_id}/status", response_model=DriverResponse)
def update_driver_status(driver_id: UUID, data: DriverStatusUpdate, db: Session = Depends(get_db)):
    return DriverResponse.model_validate(MasterService.update_driver_status(db, driver_id, data.status.value))

@master_router.delete("/drivers/{driver_id}", status_code=204)
def delete_driver(driver_id: UUID, db: Session = Depends(get_db)):
    MasterService.delete_driver(db, driver_id)
