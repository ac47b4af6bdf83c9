# custody_desk/routers/items.py

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from custody_desk.core.clock import Clock, get_clock
from custody_desk.core.config import settings
from custody_desk.core.dependencies import get_actor
from custody_desk.core.rate_limiter import limiter
from custody_desk.database import get_db
from custody_desk.schemas.item import ItemCreate, ItemResponse, ItemUpdate
from custody_desk.schemas.stock import StockAdjust, StockResponse
from custody_desk.services import catalog, stock as stock_ledger

router = APIRouter(
    prefix="/items",
    tags=["Items"],
)


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.RATE_LIMIT_MUTATIONS)
def create_item(
    request: Request,
    item_data: ItemCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    actor: str = Depends(get_actor),
):
    return catalog.create_item(
        db,
        name=item_data.name,
        total_quantity=item_data.total_quantity,
        asset_tag=item_data.asset_tag,
        description=item_data.description,
        clock=clock,
        actor=actor,
    )


@router.get("", response_model=list[ItemResponse])
def list_items(db: Session = Depends(get_db)):
    return catalog.list_items(db)


@router.get("/{item_id}", response_model=ItemResponse)
def get_item(item_id: int, db: Session = Depends(get_db)):
    return catalog.get_item(db, item_id)


@router.put("/{item_id}", response_model=ItemResponse)
def update_item(
    item_id: int,
    item_data: ItemUpdate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    actor: str = Depends(get_actor),
):
    return catalog.update_item(
        db,
        item_id,
        name=item_data.name,
        asset_tag=item_data.asset_tag,
        description=item_data.description,
        clock=clock,
        actor=actor,
    )


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    actor: str = Depends(get_actor),
):
    catalog.delete_item(db, item_id, clock=clock, actor=actor)
    return None


# =========================================================
# STOCK
# =========================================================

@router.get("/{item_id}/stock", response_model=StockResponse)
def get_stock(item_id: int, db: Session = Depends(get_db)):
    return stock_ledger.get_stock(db, item_id)


@router.patch("/{item_id}/stock", response_model=StockResponse)
@limiter.limit(settings.RATE_LIMIT_MUTATIONS)
def adjust_stock_total(
    request: Request,
    item_id: int,
    stock_data: StockAdjust,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    actor: str = Depends(get_actor),
):
    return stock_ledger.adjust_total(
        db,
        item_id,
        stock_data.total_quantity,
        clock=clock,
        actor=actor,
    )
