"""
Master Data Service - Warehouses, Products, Drivers
"""
import logging
from sqlalchemy.orm import Session
from typing import List, Optional, Type
from uuid import UUID

from freightline.core import atomic
from freightline.core.exceptions import NotFound, DuplicateEntry
from freightline.models import Warehouse, Product, Driver, DriverStatus
from freightline.schemas.master import WarehouseCreate, ProductCreate, DriverCreate

logger = logging.getLogger(__name__)

class MasterService:
    """Create / read / soft-delete for the records the core references"""

    @staticmethod
    def _get(db: Session, model: Type, entity_id: UUID):
        record = db.get(model, entity_id)
        if not record:
            raise NotFound(model.__name__, entity_id)
        return record

    @staticmethod
    def _create(db: Session, record, unique_field: str):
        model = type(record)
        value = getattr(record, unique_field)
        with atomic(db):
            if db.query(model).filter(getattr(model, unique_field) == value).first():
                raise DuplicateEntry(f"{model.__name__} with {unique_field} {value} already exists")
            db.add(record)
        db.refresh(record)
        logger.info(f"Created {model.__name__} {record.id} ({unique_field}={value})")
        return record

    @staticmethod
    def _deactivate(db: Session, model: Type, entity_id: UUID):
        with atomic(db):
            record = MasterService._get(db, model, entity_id)
            record.is_active = False
        logger.info(f"Deactivated {model.__name__} {entity_id}")

    # ===================== Warehouses =====================

    @staticmethod
    def create_warehouse(db: Session, data: WarehouseCreate) -> Warehouse:
        return MasterService._create(db, Warehouse(**data.model_dump()), "code")

    @staticmethod
    def get_warehouses(db: Session) -> List[Warehouse]:
        return db.query(Warehouse).filter(Warehouse.is_active == True).order_by(Warehouse.code).all()

    @staticmethod
    def get_warehouse(db: Session, warehouse_id: UUID) -> Warehouse:
        return MasterService._get(db, Warehouse, warehouse_id)

    @staticmethod
    def delete_warehouse(db: Session, warehouse_id: UUID):
        MasterService._deactivate(db, Warehouse, warehouse_id)

    # ===================== Products =====================

    @staticmethod
    def create_product(db: Session, data: ProductCreate) -> Product:
        return MasterService._create(db, Product(**data.model_dump()), "sku")

    @staticmethod
    def get_products(db: Session) -> List[Product]:
        return db.query(Product).filter(Product.is_active == True).order_by(Product.sku).all()

    @staticmethod
    def get_product(db: Session, product_id: UUID) -> Product:
        return MasterService._get(db, Product, product_id)

    @staticmethod
    def delete_product(db: Session, product_id: UUID):
        MasterService._deactivate(db, Product, product_id)

    # ===================== Drivers =====================

    @staticmethod
    def create_driver(db: Session, data: DriverCreate) -> Driver:
        return MasterService._create(db, Driver(**data.model_dump()), "license_number")

    @staticmethod
    def get_drivers(db: Session, status: Optional[str] = None) -> List[Driver]:
        query = db.query(Driver).filter(Driver.is_active == True)
        if status:
            query = query.filter(Driver.status == status)
        return query.all()

    @staticmethod
    def get_driver(db: Session, driver_id: UUID) -> Driver:
        return MasterService._get(db, Driver, driver_id)

    @staticmethod
    def update_driver_status(db: Session, driver_id: UUID, status: str) -> Driver:
        status = DriverStatus(status).value
        with atomic(db):
            driver = MasterService._get(db, Driver, driver_id)
            driver.status = status
        db.refresh(driver)
        logger.info(f"Driver {driver_id} status -> {status}")
        return driver

    @staticmethod
    def delete_driver(db: Session, driver_id: UUID):
        MasterService._deactivate(db, Driver, driver_id)
