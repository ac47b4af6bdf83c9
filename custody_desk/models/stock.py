# custody_desk/models/stock.py

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer
from sqlalchemy.orm import relationship

from custody_desk.database import Base


class StockRecord(Base):
    __tablename__ = "stock_records"

    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(
        Integer,
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    total = Column(Integer, nullable=False)
    available = Column(Integer, nullable=False)

    item = relationship("Item", back_populates="stock")

    __table_args__ = (
        CheckConstraint("total >= 0", name="ck_stock_total_non_negative"),
        CheckConstraint("available >= 0", name="ck_stock_available_non_negative"),
    )

    @property
    def units_out(self) -> int:
        return self.total - self.available
