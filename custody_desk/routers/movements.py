# custody_desk/routers/movements.py

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from custody_desk.core.clock import Clock, get_clock
from custody_desk.core.config import settings
from custody_desk.core.dependencies import get_actor
from custody_desk.core.rate_limiter import limiter
from custody_desk.database import get_db
from custody_desk.schemas.movement import (
    CheckoutBody,
    MovementResponse,
    ReturnBody,
    ReturnResponse,
    SweepResponse,
)
from custody_desk.services import movements

router = APIRouter(prefix="/movements", tags=["Movements"])


@router.post(
    "/{item_id}/checkout",
    response_model=MovementResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.RATE_LIMIT_MUTATIONS)
def checkout_item(
    request: Request,
    item_id: int,
    checkout_data: CheckoutBody,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    actor: str = Depends(get_actor),
):
    return movements.checkout(
        db,
        item_id,
        requester=checkout_data.requester,
        quantity=checkout_data.quantity,
        kind=checkout_data.kind,
        due_date=checkout_data.due_date,
        clock=clock,
        actor=actor,
    )


@router.post("/{item_id}/return", response_model=ReturnResponse)
@limiter.limit(settings.RATE_LIMIT_MUTATIONS)
def return_item(
    request: Request,
    item_id: int,
    return_data: ReturnBody,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    actor: str = Depends(get_actor),
):
    result = movements.return_units(
        db,
        item_id,
        return_data.quantity,
        clock=clock,
        actor=actor,
    )

    return ReturnResponse(
        quantity=result.quantity,
        closed_count=result.closed_count,
        closed_units=result.closed_units,
        remainder=result.remainder,
    )


@router.get("/{item_id}/active", response_model=list[MovementResponse])
def list_active_movements(item_id: int, db: Session = Depends(get_db)):
    return movements.list_active_movements(db, item_id)


@router.get("/{item_id}/latest", response_model=MovementResponse)
def get_latest_active_movement(item_id: int, db: Session = Depends(get_db)):
    return movements.get_latest_active_movement(db, item_id)


@router.post("/sweep", response_model=SweepResponse)
def run_overdue_sweep(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return SweepResponse(flagged=movements.sweep_overdue(db, clock.today()))
