# =========================================================
# MOVEMENT RECONCILIATION
#
# CHECKOUT:
# - Reserves units on the stock record and opens one movement
#
# RETURN:
# - Releases units, then closes or shrinks outstanding movements
#   oldest checkout first (FIFO) until the returned quantity is absorbed
#
# OVERDUE SWEEP:
# - Flags pending due-dated movements past their deadline as LATE
#
# Every mutation of an item runs under that item's lock and inside a
# single transaction.
# =========================================================

import logging
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from custody_desk.core.clock import Clock, system_clock
from custody_desk.core.errors import ConflictError, NotFoundError
from custody_desk.core.locks import item_locks
from custody_desk.database import transaction
from custody_desk.models.movements import DeadlineStatus, Movement, MovementKind
from custody_desk.schemas.common import validated
from custody_desk.schemas.movement import CheckoutRequest, ReturnRequest
from custody_desk.services import audit, catalog, stock as stock_ledger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReturnResult:
    quantity: int
    # Records fully closed by this return and the units they accounted for
    closed_count: int
    closed_units: int
    # Units no outstanding record could absorb
    remainder: int


def _normalize_kind(kind):
    if isinstance(kind, MovementKind):
        return kind.value
    if isinstance(kind, str):
        return kind.strip().upper()
    return kind


# =========================================================
# QUERIES
# =========================================================

def outstanding_movements(db: Session, item_id: int) -> list[Movement]:
    """Open movements of an item, longest outstanding first."""
    return (
        db.query(Movement)
        .filter(
            Movement.item_id == item_id,
            Movement.returned_at.is_(None),
        )
        .order_by(Movement.checked_out_at.asc(), Movement.id.asc())
        .all()
    )


def list_active_movements(db: Session, item_id: int) -> list[Movement]:
    catalog.get_item(db, item_id)
    return outstanding_movements(db, item_id)


def get_latest_active_movement(db: Session, item_id: int) -> Movement:
    catalog.get_item(db, item_id)

    movement = (
        db.query(Movement)
        .filter(
            Movement.item_id == item_id,
            Movement.returned_at.is_(None),
        )
        .order_by(Movement.checked_out_at.desc(), Movement.id.desc())
        .first()
    )

    if movement is None:
        raise NotFoundError(f"No active movement for item {item_id}")

    return movement


def get_movement(db: Session, movement_id: int) -> Movement:
    movement = db.get(Movement, movement_id)

    if movement is None:
        raise NotFoundError(f"Movement {movement_id} not found")

    return movement


# =========================================================
# DEADLINE STATUS
# =========================================================

def terminal_status(movement: Movement, returned_on: date) -> DeadlineStatus:
    # A LATE flag set by the sweep is kept on close
    if movement.deadline_status == DeadlineStatus.LATE:
        return DeadlineStatus.LATE

    if (
        movement.kind == MovementKind.CHECKOUT
        and movement.due_date is not None
        and returned_on > movement.due_date
    ):
        return DeadlineStatus.LATE

    return DeadlineStatus.CLOSED


def close_movement(movement: Movement, returned_at: datetime, returned_on: date) -> None:
    movement.deadline_status = terminal_status(movement, returned_on)
    movement.returned_at = returned_at


# =========================================================
# CHECKOUT
# =========================================================

def checkout(
    db: Session,
    item_id: int,
    requester: str,
    quantity: int,
    kind=MovementKind.CHECKOUT,
    due_date=None,
    *,
    clock: Clock = system_clock,
    actor: str | None = None,
) -> Movement:
    terms = {"kind": _normalize_kind(kind)}
    if due_date not in (None, ""):
        terms["due_date"] = due_date

    request = validated(
        CheckoutRequest,
        requester=requester,
        quantity=quantity,
        terms=terms,
    )

    with item_locks.hold(item_id), transaction(db):
        item = catalog.get_item(db, item_id)
        stock = stock_ledger.get_stock(db, item_id, for_update=True)

        # Fails the whole checkout, nothing is written
        stock_ledger.reserve(stock, request.quantity)

        movement = Movement(
            item_id=item.id,
            item_name=item.name,
            requester=request.requester,
            quantity=request.quantity,
            kind=request.kind,
            due_date=request.due_date,
            checked_out_at=clock.now(),
            returned_at=None,
            deadline_status=DeadlineStatus.PENDING,
        )
        db.add(movement)
        db.flush()

        deadline = request.due_date.isoformat() if request.due_date else "indefinite"
        audit.record(
            db,
            f"RETIRADA_{request.kind.value}",
            item_id,
            f"Checkout of {request.quantity} units by {request.requester}. "
            f"Due: {deadline}",
            actor=actor,
            clock=clock,
        )

    db.refresh(movement)
    logger.info(
        "Movement %s: %s units of item %s out to %s",
        movement.id,
        movement.quantity,
        item_id,
        movement.requester,
    )
    return movement


# =========================================================
# RETURN (FIFO)
# =========================================================

def return_units(
    db: Session,
    item_id: int,
    quantity: int,
    *,
    clock: Clock = system_clock,
    actor: str | None = None,
) -> ReturnResult:
    request = validated(ReturnRequest, quantity=quantity)

    with item_locks.hold(item_id), transaction(db):
        stock = stock_ledger.get_stock(db, item_id, for_update=True)

        units_out = stock.units_out
        if request.quantity > units_out:
            raise ConflictError(
                f"Returned quantity exceeds the units currently checked out ({units_out})"
            )

        stock_ledger.release(stock, request.quantity)

        now = clock.now()
        returned_on = clock.local_date(now)
        remaining = request.quantity
        closed_count = 0
        closed_units = 0

        for movement in outstanding_movements(db, item_id):
            if remaining == 0:
                break

            if movement.quantity <= remaining:
                remaining -= movement.quantity
                closed_count += 1
                closed_units += movement.quantity
                close_movement(movement, now, returned_on)
            else:
                # Partial return: the record stays open with fewer units
                movement.quantity -= remaining
                remaining = 0

        if remaining:
            logger.warning(
                "Return of %s units on item %s left %s units unmatched by open movements",
                request.quantity,
                item_id,
                remaining,
            )

        db.flush()

        audit.record(
            db,
            "DEVOLUCAO_ITEM",
            item_id,
            f"Return of {request.quantity} units. "
            f"Units closed in history: {closed_units}.",
            actor=actor,
            clock=clock,
        )

    logger.info(
        "Return on item %s: %s units, %s movements closed",
        item_id,
        request.quantity,
        closed_count,
    )
    return ReturnResult(
        quantity=request.quantity,
        closed_count=closed_count,
        closed_units=closed_units,
        remainder=remaining,
    )


# =========================================================
# OVERDUE SWEEP
# =========================================================

def sweep_overdue(db: Session, today: date) -> int:
    """
    Flag outstanding CHECKOUT movements still PENDING whose due date is
    before ``today`` as LATE. Returns how many were flagged.

    Each movement is re-read and written under its item's lock. A movement
    changed by a concurrent return fails the version check and is skipped.
    """
    candidates = (
        db.query(Movement.id, Movement.item_id)
        .filter(
            Movement.returned_at.is_(None),
            Movement.kind == MovementKind.CHECKOUT,
            Movement.deadline_status == DeadlineStatus.PENDING,
            Movement.due_date < today,
        )
        .order_by(Movement.id)
        .all()
    )
    db.rollback()

    flagged = 0

    for movement_id, item_id in candidates:
        with item_locks.hold(item_id):
            try:
                movement = db.get(Movement, movement_id, populate_existing=True)

                if (
                    movement is None
                    or movement.returned_at is not None
                    or movement.deadline_status != DeadlineStatus.PENDING
                ):
                    db.rollback()
                    continue

                item_name = movement.item_name
                due_date = movement.due_date
                movement.deadline_status = DeadlineStatus.LATE
                db.commit()

            except StaleDataError:
                db.rollback()
                logger.info("Movement %s changed during sweep, skipped", movement_id)
                continue

            except SQLAlchemyError:
                db.rollback()
                raise

        flagged += 1
        logger.warning(
            "Overdue: movement %s (item %s, %s) was due %s",
            movement_id,
            item_id,
            item_name,
            due_date,
        )

    return flagged
