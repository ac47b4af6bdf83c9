# custody_desk/schemas/movement.py

from datetime import date, datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from custody_desk.models.movements import DeadlineStatus, MovementKind


# =========================================================
# CHECKOUT TERMS (tagged by kind)
# =========================================================

class DueDateTerms(BaseModel):
    """A loan that must come back by ``due_date``."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["CHECKOUT"]
    due_date: date


class IndefiniteTerms(BaseModel):
    """A loan with no deadline. A due date is rejected."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["INDEFINITE"]


CheckoutTerms = Annotated[
    Union[DueDateTerms, IndefiniteTerms],
    Field(discriminator="kind"),
]


class CheckoutRequest(BaseModel):
    requester: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., gt=0)
    terms: CheckoutTerms

    @field_validator("requester")
    @classmethod
    def requester_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Requester name is required")
        return value

    @property
    def kind(self) -> MovementKind:
        return MovementKind(self.terms.kind)

    @property
    def due_date(self) -> date | None:
        return getattr(self.terms, "due_date", None)


class ReturnRequest(BaseModel):
    quantity: int = Field(..., gt=0)


# =========================================================
# HTTP BODIES
# =========================================================

class CheckoutBody(BaseModel):
    requester: str
    quantity: int
    kind: str = MovementKind.CHECKOUT.value
    due_date: str | None = None


class ReturnBody(BaseModel):
    quantity: int


# =========================================================
# RESPONSES
# =========================================================

class MovementResponse(BaseModel):
    id: int
    item_id: int
    item_name: str | None
    requester: str
    quantity: int
    kind: MovementKind
    due_date: date | None
    checked_out_at: datetime
    returned_at: datetime | None
    deadline_status: DeadlineStatus

    class Config:
        from_attributes = True


class ReturnResponse(BaseModel):
    quantity: int
    closed_count: int
    closed_units: int
    remainder: int


class SweepResponse(BaseModel):
    flagged: int
