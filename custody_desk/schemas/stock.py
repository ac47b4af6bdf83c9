from pydantic import BaseModel, Field


class StockAdjust(BaseModel):
    total_quantity: int = Field(..., ge=0)


class StockResponse(BaseModel):
    item_id: int
    total: int
    available: int

    class Config:
        from_attributes = True
