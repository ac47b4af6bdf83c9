# custody_desk/services/audit.py

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from custody_desk.core.clock import Clock, system_clock
from custody_desk.core.config import settings
from custody_desk.models.audit import AuditEntry

logger = logging.getLogger(__name__)


def record(
    db: Session,
    action: str,
    item_id: int | None,
    detail: str,
    *,
    actor: str | None = None,
    at: datetime | None = None,
    clock: Clock = system_clock,
) -> AuditEntry | None:
    """
    Best-effort audit write.

    The entry is flushed inside a SAVEPOINT of the caller's transaction, so a
    failed insert is rolled back on its own and the business change still
    commits. Failures are logged, never raised.
    """
    entry = AuditEntry(
        action=action,
        item_id=item_id,
        actor=actor or settings.AUDIT_ACTOR,
        detail=detail,
        recorded_at=at or clock.now(),
    )
    try:
        with db.begin_nested():
            db.add(entry)
            db.flush()
    except SQLAlchemyError as exc:
        logger.warning(
            "Audit entry %s for item %s was not recorded: %s",
            action,
            item_id,
            exc,
        )
        return None

    return entry


def list_entries(db: Session, item_id: int | None = None) -> list[AuditEntry]:
    query = db.query(AuditEntry)

    if item_id is not None:
        query = query.filter(AuditEntry.item_id == item_id)

    return query.order_by(AuditEntry.recorded_at.desc(), AuditEntry.id.desc()).all()
