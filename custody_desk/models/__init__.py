# custody_desk/models/__init__.py
# Import every model so relationships resolve and metadata is complete

from custody_desk.models.items import Item
from custody_desk.models.stock import StockRecord
from custody_desk.models.movements import DeadlineStatus, Movement, MovementKind
from custody_desk.models.audit import AuditEntry

__all__ = [
    "Item",
    "StockRecord",
    "Movement",
    "MovementKind",
    "DeadlineStatus",
    "AuditEntry",
]
