# schemas/reports.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from schemas.stock import StockMovementResponse

# Per-product totals over the report window
class StockMovementSummaryItem(BaseModel):
    product_id: int
    code: str
    name: str
    current_quantity: int
    total_stock_in: int
    total_stock_out: int
    net_change: int

class StockMovementReport(BaseModel):
    summary: List[StockMovementSummaryItem]
    details: List[StockMovementResponse]

# Stored quantity with lifetime totals
class CurrentStockItem(BaseModel):
    id: int
    code: str
    name: str
    quantity: int
    total_stock_in: int
    total_stock_out: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
