"""Overdue sweep runner.

Safe to run from the scheduler or by hand: the sweep only flags movements
that are still PENDING, so repeated runs on the same day flag nothing new.
"""

import logging

from sqlalchemy.orm import Session

from custody_desk.core.clock import Clock, system_clock
from custody_desk.database import SessionLocal
from custody_desk.services.movements import sweep_overdue

logger = logging.getLogger(__name__)


def run(session_factory=SessionLocal, clock: Clock = system_clock) -> int | None:
    """Run one sweep. Returns the flagged count, or None if the run failed."""
    db: Session = session_factory()
    try:
        today = clock.today()
        flagged = sweep_overdue(db, today)
        logger.info("Overdue sweep for %s flagged %s movements", today, flagged)
        return flagged

    except Exception:
        # Never take the host process down; the next tick retries
        db.rollback()
        logger.exception("Overdue sweep failed, will retry on next tick")
        return None

    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )
    result = run()
    print("Overdue sweep completed:", result)
