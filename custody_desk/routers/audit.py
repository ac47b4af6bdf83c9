# custody_desk/routers/audit.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from custody_desk.database import get_db
from custody_desk.schemas.audit import AuditEntryResponse
from custody_desk.services import audit

router = APIRouter(prefix="/audit", tags=["Audit"])


@router.get("", response_model=list[AuditEntryResponse])
def list_audit_entries(
    item_id: int | None = Query(None),
    db: Session = Depends(get_db),
):
    return audit.list_entries(db, item_id=item_id)
