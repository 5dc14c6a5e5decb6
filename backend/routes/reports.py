# routes/reports.py
from typing import Optional, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user
from models.users import User
from services import reports
from schemas.reports import StockMovementReport, CurrentStockItem

router = APIRouter(tags=["Reports"])

# -----------------------------
# 1) Ruchy magazynowe w oknie czasowym
# -----------------------------
@router.get("/stock-movement", response_model=StockMovementReport)
def report_stock_movement(
    report_type: str = Query("daily", alias="reportType", description="daily | monthly | custom"),
    start_date: Optional[str] = Query(None, alias="startDate", description="YYYY-MM-DD, custom only"),
    end_date: Optional[str] = Query(None, alias="endDate", description="YYYY-MM-DD, custom only"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return reports.stock_movement_report(db, report_type, start_date, end_date)

# -----------------------------
# 2) Aktualne stany
# -----------------------------
@router.get("/current-stock", response_model=List[CurrentStockItem])
def report_current_stock(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return reports.current_stock_report(db)
