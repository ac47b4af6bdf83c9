# custody_desk/models/movements.py

import enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from custody_desk.database import Base


class MovementKind(str, enum.Enum):
    CHECKOUT = "CHECKOUT"
    INDEFINITE = "INDEFINITE"


class DeadlineStatus(str, enum.Enum):
    PENDING = "PENDING"
    LATE = "LATE"
    CLOSED = "CLOSED"


class Movement(Base):
    __tablename__ = "movements"

    id = Column(Integer, primary_key=True, index=True)

    item_id = Column(
        Integer,
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Name as it was when the units left the desk
    item_name = Column(String(512), nullable=True)

    requester = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    kind = Column(Enum(MovementKind, name="movement_kind"), nullable=False)
    due_date = Column(Date, nullable=True)

    checked_out_at = Column(DateTime(timezone=True), nullable=False)
    returned_at = Column(DateTime(timezone=True), nullable=True)

    deadline_status = Column(
        Enum(DeadlineStatus, name="deadline_status"),
        nullable=False,
        default=DeadlineStatus.PENDING,
    )

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    version = Column(Integer, nullable=False)

    item = relationship("Item", back_populates="movements")

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_movements_item_outstanding", "item_id", "returned_at", "checked_out_at"),
        Index("ix_movements_sweep", "returned_at", "kind", "deadline_status"),
        CheckConstraint("quantity > 0", name="ck_movement_quantity_positive"),
        CheckConstraint(
            "(kind = 'CHECKOUT' AND due_date IS NOT NULL) "
            "OR (kind = 'INDEFINITE' AND due_date IS NULL)",
            name="ck_movement_kind_due_date",
        ),
    )

    @property
    def is_outstanding(self) -> bool:
        return self.returned_at is None
