# custody_desk/models/audit.py

from sqlalchemy import Column, DateTime, Index, Integer, String, Text

from custody_desk.database import Base


class AuditEntry(Base):
    __tablename__ = "audit_entries"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String(64), nullable=False)

    # Not a foreign key: entries outlive the items they describe
    item_id = Column(Integer, nullable=True, index=True)

    actor = Column(String(255), nullable=False)
    detail = Column(Text, nullable=True)
    recorded_at = Column(DateTime(timezone=True), nullable=False, index=True)

    __table_args__ = (
        Index("ix_audit_entries_item_recorded", "item_id", "recorded_at"),
    )
