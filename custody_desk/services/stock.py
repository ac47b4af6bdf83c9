# custody_desk/services/stock.py
#
# Stock ledger rules. initialize/reserve/release only touch the session;
# the calling service owns the item lock and the commit.

import logging

from sqlalchemy.orm import Session

from custody_desk.core.clock import Clock, system_clock
from custody_desk.core.errors import (
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from custody_desk.core.locks import item_locks
from custody_desk.database import transaction
from custody_desk.models.items import Item
from custody_desk.models.stock import StockRecord
from custody_desk.services import audit

logger = logging.getLogger(__name__)


def initialize(db: Session, item: Item, total_quantity: int) -> StockRecord:
    if total_quantity is None or total_quantity <= 0:
        raise ValidationError("Total quantity must be greater than zero")

    stock = StockRecord(
        item=item,
        total=total_quantity,
        available=total_quantity,
    )
    db.add(stock)
    return stock


def find_stock(db: Session, item_id: int, *, for_update: bool = False) -> StockRecord | None:
    query = db.query(StockRecord).filter(StockRecord.item_id == item_id)

    if for_update:
        query = query.with_for_update()

    return query.first()


def get_stock(db: Session, item_id: int, *, for_update: bool = False) -> StockRecord:
    stock = find_stock(db, item_id, for_update=for_update)

    if stock is None:
        raise NotFoundError(f"No stock record for item {item_id}")

    return stock


def apply_total(stock: StockRecord, new_total: int) -> int:
    """
    Move ``total`` to ``new_total`` and shift ``available`` by the same delta.

    A reduction larger than what is on the shelf leaves ``available`` at 0,
    even when units are still checked out on paper. Returns the delta.
    """
    if new_total is None or new_total < 0:
        raise ValidationError("New total quantity must be zero or greater")

    delta = new_total - stock.total
    stock.total = new_total
    stock.available = max(stock.available + delta, 0)
    return delta


def reserve(stock: StockRecord, quantity: int) -> None:
    if quantity is None or quantity <= 0:
        raise ValidationError("Quantity must be greater than zero")

    if quantity > stock.available:
        raise InsufficientStockError(requested=quantity, available=stock.available)

    stock.available -= quantity


def release(stock: StockRecord, quantity: int) -> None:
    # No upper clamp here: reconciliation never releases more than is out
    if quantity is None or quantity <= 0:
        raise ValidationError("Quantity must be greater than zero")

    stock.available += quantity


def adjust_total(
    db: Session,
    item_id: int,
    new_total: int,
    *,
    clock: Clock = system_clock,
    actor: str | None = None,
) -> StockRecord:
    if new_total is None or new_total < 0:
        raise ValidationError("New total quantity must be zero or greater")

    with item_locks.hold(item_id), transaction(db):
        stock = get_stock(db, item_id, for_update=True)
        old_total = stock.total
        delta = apply_total(stock, new_total)
        db.flush()

        audit.record(
            db,
            "AJUSTE_ESTOQUE",
            item_id,
            f"Total adjusted from {old_total} to {new_total} (delta {delta:+d})",
            actor=actor,
            clock=clock,
        )

    db.refresh(stock)
    logger.info(
        "Stock total for item %s adjusted %s -> %s, available now %s",
        item_id,
        old_total,
        new_total,
        stock.available,
    )
    return stock
