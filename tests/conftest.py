import os

os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from freightline.core import Base
from freightline.schemas.master import WarehouseCreate, ProductCreate, DriverCreate
from freightline.services import MasterService, StockService

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def warehouses(db):
    """Three active warehouses: origin, hub and destination"""
    created = []
    for code, name in (("WH-A", "Origin"), ("WH-B", "Hub"), ("WH-C", "Destination")):
        created.append(MasterService.create_warehouse(db, WarehouseCreate(
            code=code, name=name, address=f"{name} street 1", location=name, capacity=1000
        )))
    return created


@pytest.fixture
def product(db):
    return MasterService.create_product(db, ProductCreate(
        sku="SKU-001", name="Pallet of bricks", unit_price=Decimal("100.00"), low_stock_threshold=5
    ))


@pytest.fixture
def second_product(db):
    return MasterService.create_product(db, ProductCreate(
        sku="SKU-002", name="Bag of cement", unit_price=Decimal("12.50")
    ))


@pytest.fixture
def stocked(db, warehouses, product, second_product):
    """100 of each product on hand at the origin warehouse"""
    origin = warehouses[0]
    StockService.set_quantity_and_commit(db, product.id, origin.id, 100, "opening balance")
    StockService.set_quantity_and_commit(db, second_product.id, origin.id, 100, "opening balance")
    return origin


@pytest.fixture
def driver(db):
    return MasterService.create_driver(db, DriverCreate(
        first_name="Alex", last_name="Morgan", license_number="LIC-1001", phone_number="555-0101"
    ))


@pytest.fixture
def second_driver(db):
    return MasterService.create_driver(db, DriverCreate(
        first_name="Sam", last_name="Rivera", license_number="LIC-1002", phone_number="555-0102"
    ))
