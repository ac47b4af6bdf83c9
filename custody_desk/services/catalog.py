# custody_desk/services/catalog.py

import logging

from sqlalchemy.orm import Session

from custody_desk.core.clock import Clock, system_clock
from custody_desk.core.errors import NotFoundError
from custody_desk.core.locks import item_locks
from custody_desk.database import transaction
from custody_desk.models.items import Item
from custody_desk.schemas.common import validated
from custody_desk.schemas.item import ItemCreate, ItemUpdate
from custody_desk.services import audit, stock as stock_ledger

logger = logging.getLogger(__name__)


def create_item(
    db: Session,
    name: str,
    total_quantity: int,
    asset_tag: str | None = None,
    description: str | None = None,
    *,
    clock: Clock = system_clock,
    actor: str | None = None,
) -> Item:
    data = validated(
        ItemCreate,
        name=name,
        total_quantity=total_quantity,
        asset_tag=asset_tag,
        description=description,
    )

    with transaction(db):
        item = Item(
            name=data.name,
            asset_tag=data.asset_tag,
            description=data.description,
        )
        db.add(item)
        stock_ledger.initialize(db, item, data.total_quantity)
        db.flush()

        audit.record(
            db,
            "CRIACAO_ITEM",
            item.id,
            f"New item: {item.name} (qty: {data.total_quantity})",
            actor=actor,
            clock=clock,
        )

    db.refresh(item)
    logger.info("Item %s created with %s units", item.id, data.total_quantity)
    return item


def find_item(db: Session, item_id: int) -> Item | None:
    return db.query(Item).filter(Item.id == item_id).first()


def get_item(db: Session, item_id: int) -> Item:
    item = find_item(db, item_id)

    if item is None:
        raise NotFoundError(f"Item {item_id} not found")

    return item


def list_items(db: Session) -> list[Item]:
    return db.query(Item).order_by(Item.id).all()


def update_item(
    db: Session,
    item_id: int,
    name: str,
    asset_tag: str | None = None,
    description: str | None = None,
    *,
    clock: Clock = system_clock,
    actor: str | None = None,
) -> Item:
    """Replace every editable field of an item. Omitted fields are cleared."""
    data = validated(ItemUpdate, name=name, asset_tag=asset_tag, description=description)

    with transaction(db):
        item = get_item(db, item_id)
        item.name = data.name
        item.asset_tag = data.asset_tag
        item.description = data.description
        db.flush()

        audit.record(
            db,
            "EDICAO_ITEM",
            item.id,
            f"Item updated: {item.name}",
            actor=actor,
            clock=clock,
        )

    db.refresh(item)
    return item


def delete_item(
    db: Session,
    item_id: int,
    *,
    clock: Clock = system_clock,
    actor: str | None = None,
) -> None:
    """
    Hard-delete an item together with its stock record and its whole
    movement history, open or closed. Nothing is kept but the audit entry.
    """
    with item_locks.hold(item_id):
        with transaction(db):
            item = get_item(db, item_id)
            item_name = item.name
            movement_count = len(item.movements)

            # Cascades to stock and movements in the same flush
            db.delete(item)
            db.flush()

            audit.record(
                db,
                "EXCLUSAO_ITEM",
                item_id,
                f"Item deleted: {item_name} (full removal, including "
                f"{movement_count} movement records)",
                actor=actor,
                clock=clock,
            )

        item_locks.forget(item_id)

    logger.info("Item %s (%s) deleted with its history", item_id, item_name)
