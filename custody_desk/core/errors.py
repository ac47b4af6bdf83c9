# custody_desk/core/errors.py
#
# Business failures raised by the services. Routers translate them to
# HTTP responses in main.py; nothing here is retried.

from fastapi import status


class CustodyDeskError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(CustodyDeskError):
    """Malformed, missing or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(CustodyDeskError):
    status_code = status.HTTP_404_NOT_FOUND


class InsufficientStockError(CustodyDeskError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, requested: int, available: int):
        super().__init__(
            f"Insufficient stock. Requested: {requested}, available: {available}"
        )
        self.requested = requested
        self.available = available


class ConflictError(ValidationError):
    """Return quantity exceeds the units currently checked out."""

    status_code = status.HTTP_409_CONFLICT
