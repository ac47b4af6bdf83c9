from pydantic import BaseModel
from datetime import datetime


class AuditEntryResponse(BaseModel):
    id: int
    action: str
    item_id: int | None
    actor: str
    detail: str | None
    recorded_at: datetime

    class Config:
        from_attributes = True
