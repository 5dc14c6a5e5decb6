# backend/schemas/stock.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Literal, Optional

# Define allowed types for stock movements
MovementType = Literal["IN", "OUT"]

# Schema for recording a stock-in or stock-out
class StockMovementCreate(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)
    notes: Optional[str] = None

# Schema for editing an existing movement
class StockMovementUpdate(BaseModel):
    quantity: int = Field(gt=0)
    notes: Optional[str] = None

# Schema for returning stock movement details
class StockMovementResponse(BaseModel):
    id: int
    product_id: int
    quantity: int
    date: datetime
    notes: Optional[str] = None
    movement_type: MovementType
    code: Optional[str] = None
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
