# custody_desk/models/items.py

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from custody_desk.database import Base


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    asset_tag = Column(String(255), nullable=True)
    description = Column(String(1000), nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    stock = relationship(
        "StockRecord",
        back_populates="item",
        uselist=False,
        cascade="all, delete-orphan",
    )
    movements = relationship(
        "Movement",
        back_populates="item",
        cascade="all, delete-orphan",
    )
