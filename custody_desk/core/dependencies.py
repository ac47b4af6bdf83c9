# custody_desk/core/dependencies.py

from fastapi import Header

from custody_desk.core.config import settings


def get_actor(x_desk_operator: str | None = Header(default=None)) -> str:
    # No authentication: the operator name is informational only
    if x_desk_operator and x_desk_operator.strip():
        return x_desk_operator.strip()
    return settings.AUDIT_ACTOR
