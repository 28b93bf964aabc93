import pytest

from freightline.core.exceptions import InsufficientStock, NotFound
from freightline.services import StockService


def test_reserve_moves_available_into_reserved(db, stocked, product):
    stock = StockService.reserve_and_commit(db, product.id, stocked.id, 30)

    assert stock.quantity == 100
    assert stock.reserved_quantity == 30
    assert stock.available_quantity == 70


def test_reserve_more_than_available_is_rejected(db, stocked, product):
    StockService.reserve_and_commit(db, product.id, stocked.id, 80)

    with pytest.raises(InsufficientStock) as exc:
        StockService.reserve_and_commit(db, product.id, stocked.id, 21)

    assert exc.value.available == 20
    assert exc.value.requested == 21
    stock = StockService.get_stock(db, product.id, stocked.id)
    assert stock.reserved_quantity == 80


def test_reserve_without_stock_record(db, warehouses, product):
    with pytest.raises(InsufficientStock):
        StockService.reserve_and_commit(db, product.id, warehouses[1].id, 1)


def test_release_returns_reservation(db, stocked, product):
    StockService.reserve_and_commit(db, product.id, stocked.id, 10)
    stock = StockService.release_and_commit(db, product.id, stocked.id, 4)

    assert stock.reserved_quantity == 6
    assert stock.available_quantity == 94


def test_release_beyond_reserved_is_rejected(db, stocked, product):
    StockService.reserve_and_commit(db, product.id, stocked.id, 3)

    with pytest.raises(InsufficientStock):
        StockService.release_and_commit(db, product.id, stocked.id, 4)


def test_release_missing_record(db, warehouses, product):
    with pytest.raises(NotFound):
        StockService.release_and_commit(db, product.id, warehouses[2].id, 1)


def test_consume_removes_reserved_goods(db, stocked, product):
    StockService.reserve_and_commit(db, product.id, stocked.id, 10)
    stock = StockService.consume_and_commit(db, product.id, stocked.id, 10)

    assert stock.quantity == 90
    assert stock.reserved_quantity == 0
    assert stock.available_quantity == 90


def test_consume_unreserved_goods_is_rejected(db, stocked, product):
    with pytest.raises(InsufficientStock):
        StockService.consume_and_commit(db, product.id, stocked.id, 1)

    stock = StockService.get_stock(db, product.id, stocked.id)
    assert stock.quantity == 100


def test_receive_creates_record_on_first_arrival(db, warehouses, product):
    hub = warehouses[1]
    assert StockService.get_stock(db, product.id, hub.id) is None

    stock = StockService.receive_and_commit(db, product.id, hub.id, 25)
    assert stock.quantity == 25
    assert stock.available_quantity == 25

    stock = StockService.receive_and_commit(db, product.id, hub.id, 5)
    assert stock.quantity == 30


def test_receive_unknown_warehouse(db, product):
    from uuid import uuid4

    with pytest.raises(NotFound):
        StockService.receive_and_commit(db, product.id, uuid4(), 5)


def test_set_quantity_cannot_go_below_reserved(db, stocked, product):
    StockService.reserve_and_commit(db, product.id, stocked.id, 40)

    with pytest.raises(InsufficientStock):
        StockService.set_quantity_and_commit(db, product.id, stocked.id, 39, "recount")

    stock = StockService.set_quantity_and_commit(db, product.id, stocked.id, 40, "recount")
    assert stock.available_quantity == 0


def test_available_invariant_holds_across_operations(db, stocked, product):
    StockService.reserve_and_commit(db, product.id, stocked.id, 20)
    StockService.consume_and_commit(db, product.id, stocked.id, 5)
    StockService.release_and_commit(db, product.id, stocked.id, 5)
    StockService.receive_and_commit(db, product.id, stocked.id, 7)

    stock = StockService.get_stock(db, product.id, stocked.id)
    assert stock.quantity == 102
    assert stock.reserved_quantity == 10
    assert stock.available_quantity == stock.quantity - stock.reserved_quantity
    assert 0 <= stock.reserved_quantity <= stock.quantity


def test_lookups(db, stocked, product, second_product, warehouses):
    assert len(StockService.get_stock_by_warehouse(db, stocked.id)) == 2
    assert len(StockService.get_stock_by_product(db, product.id)) == 1
    assert StockService.get_stock_by_warehouse(db, warehouses[1].id) == []


def test_low_stock(db, stocked, product, second_product):
    assert StockService.get_low_stock(db) == []

    StockService.reserve_and_commit(db, product.id, stocked.id, 96)

    low = StockService.get_low_stock(db, stocked.id)
    assert [s.product_id for s in low] == [product.id]
