from decimal import Decimal
from uuid import uuid4

import pytest

from freightline.core.exceptions import (
    InsufficientStock, InvalidState, NotFound, DriverUnavailable, DuplicateEntry
)
from freightline.models import Shipment, ShipmentStatus, LegStatus, DriverStatus
from freightline.schemas.shipment import ShipmentCreate, ShipmentItemCreate, ShipmentLegCreate
from freightline.services import ShipmentService, StockService


def make_shipment(db, origin, items, **kwargs):
    data = ShipmentCreate(
        origin_warehouse_id=origin.id,
        items=[ShipmentItemCreate(product_id=p.id, quantity=q) for p, q in items],
        **kwargs
    )
    return ShipmentService.create_shipment(db, data)


def make_multi_leg(db, warehouses, product):
    origin, hub, destination = warehouses
    return make_shipment(
        db, origin, [(product, 5)],
        destination_warehouse_id=destination.id,
        legs=[
            ShipmentLegCreate(sequence=1, from_warehouse_id=origin.id, to_warehouse_id=hub.id),
            ShipmentLegCreate(sequence=2, from_warehouse_id=hub.id, to_warehouse_id=destination.id),
        ]
    )


def test_create_shipment_reserves_stock_and_totals(db, stocked, product, second_product):
    shipment = make_shipment(db, stocked, [(product, 10), (second_product, 4)])

    assert shipment.status == ShipmentStatus.PENDING.value
    assert shipment.tracking_number.startswith("TRK-")
    assert shipment.total_value == Decimal("1050.00")
    assert shipment.total_weight == 14
    assert len(shipment.items) == 2
    assert not shipment.is_multi_leg

    assert StockService.get_stock(db, product.id, stocked.id).reserved_quantity == 10
    assert StockService.get_stock(db, second_product.id, stocked.id).reserved_quantity == 4


def test_create_shipment_is_all_or_nothing(db, stocked, product, second_product):
    with pytest.raises(InsufficientStock):
        make_shipment(db, stocked, [(product, 10), (second_product, 101)])

    assert db.query(Shipment).count() == 0
    assert StockService.get_stock(db, product.id, stocked.id).reserved_quantity == 0
    assert StockService.get_stock(db, second_product.id, stocked.id).reserved_quantity == 0


def test_create_shipment_unknown_product(db, stocked, product):
    data = ShipmentCreate(
        origin_warehouse_id=stocked.id,
        items=[ShipmentItemCreate(product_id=uuid4(), quantity=1)]
    )
    with pytest.raises(NotFound):
        ShipmentService.create_shipment(db, data)


def test_tracking_numbers_are_unique(db, stocked, product):
    first = make_shipment(db, stocked, [(product, 1)])
    second = make_shipment(db, stocked, [(product, 1)])

    assert first.tracking_number != second.tracking_number
    assert ShipmentService.get_shipment_by_tracking_number(db, second.tracking_number).id == second.id


def test_lookup_by_unknown_tracking_number(db):
    with pytest.raises(NotFound):
        ShipmentService.get_shipment_by_tracking_number(db, "TRK-0-NOPE")


def test_status_transitions_follow_table(db, stocked, product):
    shipment = make_shipment(db, stocked, [(product, 1)])

    with pytest.raises(InvalidState):
        ShipmentService.update_status(db, shipment.id, ShipmentStatus.DELIVERED.value)

    ShipmentService.update_status(db, shipment.id, ShipmentStatus.QUEUED.value)
    ShipmentService.update_status(db, shipment.id, ShipmentStatus.LOADING.value)
    shipment = ShipmentService.update_status(db, shipment.id, ShipmentStatus.IN_TRANSIT.value)
    assert shipment.actual_pickup_date is not None

    shipment = ShipmentService.update_status(db, shipment.id, ShipmentStatus.DELIVERED.value)
    assert shipment.actual_delivery_date is not None

    with pytest.raises(InvalidState):
        ShipmentService.update_status(db, shipment.id, ShipmentStatus.CANCELLED.value)


def test_same_status_is_a_no_op(db, stocked, product):
    shipment = make_shipment(db, stocked, [(product, 1)])
    shipment = ShipmentService.update_status(db, shipment.id, ShipmentStatus.PENDING.value)
    assert shipment.status == ShipmentStatus.PENDING.value


def test_override_skips_transition_check(db, stocked, product):
    shipment = make_shipment(db, stocked, [(product, 1)])
    shipment = ShipmentService.override_status(db, shipment.id, ShipmentStatus.DELIVERED.value)

    assert shipment.status == ShipmentStatus.DELIVERED.value
    assert shipment.actual_delivery_date is not None


def test_legs_cascade_to_delivery(db, warehouses, stocked, product):
    shipment = make_multi_leg(db, warehouses, product)
    assert shipment.is_multi_leg
    assert [leg.status for leg in shipment.legs] == [LegStatus.PENDING.value] * 2

    ShipmentService.update_status(db, shipment.id, ShipmentStatus.QUEUED.value)
    ShipmentService.update_status(db, shipment.id, ShipmentStatus.LOADING.value)
    shipment = ShipmentService.update_status(db, shipment.id, ShipmentStatus.IN_TRANSIT.value)

    first, second = shipment.legs
    assert first.status == LegStatus.IN_TRANSIT.value
    assert first.actual_departure_date is not None
    assert second.status == LegStatus.PENDING.value

    for status in (LegStatus.ARRIVED, LegStatus.UNLOADED, LegStatus.COMPLETED):
        ShipmentService.update_leg_status(db, shipment.id, 1, status.value)

    db.refresh(second)
    assert second.status == LegStatus.IN_TRANSIT.value
    assert second.actual_departure_date is not None

    for status in (LegStatus.ARRIVED, LegStatus.UNLOADED, LegStatus.COMPLETED):
        ShipmentService.update_leg_status(db, shipment.id, 2, status.value)

    shipment = ShipmentService.get_shipment_by_id(db, shipment.id)
    db.refresh(shipment)
    assert shipment.status == ShipmentStatus.DELIVERED.value
    assert shipment.actual_delivery_date is not None


def test_leg_cannot_skip_states(db, warehouses, stocked, product):
    shipment = make_multi_leg(db, warehouses, product)

    with pytest.raises(InvalidState):
        ShipmentService.update_leg_status(db, shipment.id, 1, LegStatus.UNLOADED.value)


def test_repeated_leg_status_keeps_first_timestamp(db, warehouses, stocked, product):
    shipment = make_multi_leg(db, warehouses, product)
    leg = ShipmentService.update_leg_status(db, shipment.id, 1, LegStatus.IN_TRANSIT.value)
    departed = leg.actual_departure_date

    leg = ShipmentService.update_leg_status(db, shipment.id, 1, LegStatus.IN_TRANSIT.value)
    assert leg.actual_departure_date == departed


def test_unknown_leg(db, warehouses, stocked, product):
    shipment = make_multi_leg(db, warehouses, product)
    with pytest.raises(NotFound):
        ShipmentService.update_leg_status(db, shipment.id, 3, LegStatus.IN_TRANSIT.value)


def test_assign_driver(db, stocked, product, driver, second_driver):
    shipment = make_shipment(db, stocked, [(product, 1)])
    shipment = ShipmentService.assign_driver(db, shipment.id, driver.id)

    assert shipment.driver_id == driver.id
    db.refresh(driver)
    assert driver.status == DriverStatus.ON_ROUTE.value

    other = make_shipment(db, stocked, [(product, 1)])
    with pytest.raises(DriverUnavailable):
        ShipmentService.assign_driver(db, other.id, driver.id)

    assert ShipmentService.assign_driver(db, other.id, second_driver.id).driver_id == second_driver.id


def test_unload_moves_stock_between_warehouses(db, warehouses, stocked, product):
    hub = warehouses[1]
    shipment = make_shipment(db, stocked, [(product, 8)])

    ShipmentService.unload_at_warehouse(db, shipment.id, hub.id)

    origin_stock = StockService.get_stock(db, product.id, stocked.id)
    assert origin_stock.quantity == 92
    assert origin_stock.reserved_quantity == 0

    hub_stock = StockService.get_stock(db, product.id, hub.id)
    assert hub_stock.quantity == 8
    assert hub_stock.available_quantity == 8


def test_unload_twice_is_rejected(db, warehouses, stocked, product):
    hub = warehouses[1]
    shipment = make_shipment(db, stocked, [(product, 8)])
    ShipmentService.unload_at_warehouse(db, shipment.id, hub.id)

    with pytest.raises(InsufficientStock):
        ShipmentService.unload_at_warehouse(db, shipment.id, hub.id)

    assert StockService.get_stock(db, product.id, hub.id).quantity == 8


def test_repeated_leg_sequence_is_rejected(db, warehouses, stocked, product):
    origin, hub, destination = warehouses
    with pytest.raises(DuplicateEntry):
        make_shipment(
            db, origin, [(product, 5)],
            legs=[
                ShipmentLegCreate(sequence=1, from_warehouse_id=origin.id, to_warehouse_id=hub.id),
                ShipmentLegCreate(sequence=1, from_warehouse_id=hub.id, to_warehouse_id=destination.id),
            ]
        )

    assert db.query(Shipment).count() == 0
    assert StockService.get_stock(db, product.id, origin.id).reserved_quantity == 0


def test_leg_with_unknown_warehouse_is_rejected(db, warehouses, stocked, product):
    origin = warehouses[0]
    missing = uuid4()
    with pytest.raises(NotFound) as exc:
        make_shipment(
            db, origin, [(product, 5)],
            legs=[ShipmentLegCreate(sequence=1, from_warehouse_id=origin.id, to_warehouse_id=missing)]
        )

    assert exc.value.entity_id == missing
    assert db.query(Shipment).count() == 0
