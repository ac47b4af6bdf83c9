from __future__ import annotations

import pytest

from custody_desk.core.errors import InsufficientStockError, NotFoundError, ValidationError
from custody_desk.models.audit import AuditEntry
from custody_desk.models.items import Item
from custody_desk.models.stock import StockRecord
from custody_desk.services import catalog, movements
from custody_desk.services import stock as stock_ledger


def _create_item(db, clock, quantity=10, name="Radio"):
    return catalog.create_item(db, name=name, total_quantity=quantity, clock=clock)


def test_create_item_initializes_total_and_available(db_session, clock):
    item = _create_item(db_session, clock, quantity=7)

    stock = stock_ledger.get_stock(db_session, item.id)
    assert stock.total == 7
    assert stock.available == 7


def test_initialize_rejects_non_positive_quantity(db_session):
    with pytest.raises(ValidationError):
        stock_ledger.initialize(db_session, Item(name="Radio"), 0)

    assert db_session.query(StockRecord).count() == 0


def test_adjust_total_upward_grows_available_by_same_delta(db_session, clock):
    item = _create_item(db_session, clock, quantity=5)
    movements.checkout(db_session, item.id, "Ana", 2, "CHECKOUT", "2024-01-10", clock=clock)

    stock = stock_ledger.adjust_total(db_session, item.id, 8, clock=clock)

    assert stock.total == 8
    assert stock.available == 6


def test_adjust_total_downward_clamps_available_at_zero(db_session, clock):
    item = _create_item(db_session, clock, quantity=10)
    movements.checkout(db_session, item.id, "Ana", 8, "INDEFINITE", clock=clock)

    stock = stock_ledger.adjust_total(db_session, item.id, 5, clock=clock)

    # 2 available - 5 would be -3
    assert stock.total == 5
    assert stock.available == 0


def test_adjust_total_to_zero_is_allowed(db_session, clock):
    item = _create_item(db_session, clock, quantity=3)

    stock = stock_ledger.adjust_total(db_session, item.id, 0, clock=clock)

    assert stock.total == 0
    assert stock.available == 0


def test_adjust_total_rejects_negative_total(db_session, clock):
    item = _create_item(db_session, clock, quantity=3)

    with pytest.raises(ValidationError):
        stock_ledger.adjust_total(db_session, item.id, -1, clock=clock)

    stock = stock_ledger.get_stock(db_session, item.id)
    assert stock.total == 3
    assert stock.available == 3


def test_adjust_total_unknown_item_raises_not_found(db_session, clock):
    with pytest.raises(NotFoundError):
        stock_ledger.adjust_total(db_session, 999, 4, clock=clock)


def test_adjust_total_records_audit_entry(db_session, clock):
    item = _create_item(db_session, clock, quantity=4)

    stock_ledger.adjust_total(db_session, item.id, 6, clock=clock)

    entry = (
        db_session.query(AuditEntry)
        .filter(AuditEntry.action == "AJUSTE_ESTOQUE", AuditEntry.item_id == item.id)
        .one()
    )
    assert "from 4 to 6" in entry.detail
    assert "+2" in entry.detail


def test_reserve_more_than_available_leaves_stock_unchanged():
    stock = StockRecord(total=5, available=3)

    with pytest.raises(InsufficientStockError) as exc_info:
        stock_ledger.reserve(stock, 4)

    assert stock.available == 3
    assert exc_info.value.available == 3


def test_reserve_and_release_move_available_only():
    stock = StockRecord(total=5, available=5)

    stock_ledger.reserve(stock, 2)
    assert (stock.total, stock.available) == (5, 3)

    stock_ledger.release(stock, 2)
    assert (stock.total, stock.available) == (5, 5)


@pytest.mark.parametrize("quantity", [0, -2])
def test_reserve_and_release_reject_non_positive_quantity(quantity):
    stock = StockRecord(total=5, available=5)

    with pytest.raises(ValidationError):
        stock_ledger.reserve(stock, quantity)

    with pytest.raises(ValidationError):
        stock_ledger.release(stock, quantity)
