from __future__ import annotations

import pytest

from custody_desk.core.config import settings
from custody_desk.core.errors import NotFoundError, ValidationError
from custody_desk.models.audit import AuditEntry
from custody_desk.models.movements import Movement
from custody_desk.models.stock import StockRecord
from custody_desk.services import audit, catalog, movements
from custody_desk.services import stock as stock_ledger


def test_create_item_stores_optional_fields(db_session, clock):
    item = catalog.create_item(
        db_session,
        name="Camera",
        total_quantity=2,
        asset_tag="PAT-7",
        description="Canon body",
        clock=clock,
    )

    fetched = catalog.get_item(db_session, item.id)
    assert fetched.name == "Camera"
    assert fetched.asset_tag == "PAT-7"
    assert fetched.description == "Canon body"

    entry = db_session.query(AuditEntry).filter(AuditEntry.action == "CRIACAO_ITEM").one()
    assert entry.item_id == item.id
    assert entry.actor == settings.AUDIT_ACTOR


@pytest.mark.parametrize("name, quantity", [("", 3), ("   ", 3), ("Camera", 0), ("Camera", -4)])
def test_create_item_rejects_invalid_input(db_session, clock, name, quantity):
    with pytest.raises(ValidationError):
        catalog.create_item(db_session, name=name, total_quantity=quantity, clock=clock)

    assert catalog.list_items(db_session) == []


def test_find_item_returns_none_for_unknown_id(db_session):
    assert catalog.find_item(db_session, 12) is None

    with pytest.raises(NotFoundError):
        catalog.get_item(db_session, 12)


def test_update_replaces_every_field(db_session, clock):
    item = catalog.create_item(
        db_session,
        name="Camera",
        total_quantity=2,
        asset_tag="PAT-7",
        description="Canon body",
        clock=clock,
    )

    updated = catalog.update_item(db_session, item.id, name="Camera kit", clock=clock)

    assert updated.name == "Camera kit"
    assert updated.asset_tag is None
    assert updated.description is None


def test_update_unknown_item_raises_not_found(db_session, clock):
    with pytest.raises(NotFoundError):
        catalog.update_item(db_session, 77, name="Ghost", clock=clock)


@pytest.mark.parametrize("name", ["", "  \t "])
def test_update_rejects_empty_name(db_session, clock, name):
    item = catalog.create_item(db_session, name="Camera", total_quantity=1, clock=clock)

    with pytest.raises(ValidationError):
        catalog.update_item(db_session, item.id, name=name, clock=clock)

    assert catalog.get_item(db_session, item.id).name == "Camera"


def test_item_name_is_stripped(db_session, clock):
    item = catalog.create_item(db_session, name="  Camera  ", total_quantity=1, clock=clock)

    assert item.name == "Camera"


def test_delete_removes_stock_and_full_history(db_session, clock):
    item = catalog.create_item(db_session, name="Tripod", total_quantity=6, clock=clock)
    other = catalog.create_item(db_session, name="Cable", total_quantity=3, clock=clock)
    movements.checkout(db_session, item.id, "Ana", 2, "CHECKOUT", "2024-01-10", clock=clock)
    movements.checkout(db_session, item.id, "Bia", 1, "INDEFINITE", clock=clock)
    movements.return_units(db_session, item.id, 2, clock=clock)
    movements.checkout(db_session, other.id, "Caio", 1, "INDEFINITE", clock=clock)

    catalog.delete_item(db_session, item.id, clock=clock)

    with pytest.raises(NotFoundError):
        catalog.get_item(db_session, item.id)
    with pytest.raises(NotFoundError):
        stock_ledger.get_stock(db_session, item.id)
    with pytest.raises(NotFoundError):
        movements.list_active_movements(db_session, item.id)

    assert db_session.query(Movement).filter(Movement.item_id == item.id).count() == 0
    assert db_session.query(StockRecord).filter(StockRecord.item_id == item.id).count() == 0

    # Other items are untouched
    assert len(movements.list_active_movements(db_session, other.id)) == 1

    entry = db_session.query(AuditEntry).filter(AuditEntry.action == "EXCLUSAO_ITEM").one()
    assert entry.item_id == item.id
    assert "Tripod" in entry.detail


def test_delete_unknown_item_raises_not_found(db_session, clock):
    with pytest.raises(NotFoundError):
        catalog.delete_item(db_session, 5, clock=clock)


def test_audit_failure_does_not_roll_back_business_change(monkeypatch, db_session, clock):
    # actor is NOT NULL, so the audit insert fails inside its savepoint
    monkeypatch.setattr(settings, "AUDIT_ACTOR", None)

    item = catalog.create_item(db_session, name="Headset", total_quantity=4, clock=clock)

    assert catalog.get_item(db_session, item.id).name == "Headset"
    assert stock_ledger.get_stock(db_session, item.id).available == 4
    assert db_session.query(AuditEntry).count() == 0


def test_list_entries_newest_first_and_filtered(db_session, clock):
    item = catalog.create_item(db_session, name="Mic", total_quantity=4, clock=clock)
    other = catalog.create_item(db_session, name="Stand", total_quantity=1, clock=clock)
    clock.set(clock.now().replace(hour=15))
    movements.checkout(db_session, item.id, "Ana", 1, "INDEFINITE", clock=clock)

    entries = audit.list_entries(db_session, item_id=item.id)

    assert [e.action for e in entries] == ["RETIRADA_INDEFINITE", "CRIACAO_ITEM"]
    assert {e.item_id for e in audit.list_entries(db_session)} == {item.id, other.id}
