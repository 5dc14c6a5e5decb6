# backend/services/reports.py
"""Read-only stock reports.

Nothing here writes to the database; the functions can run alongside any
stock mutation. Date bounds always travel as bound parameters.
"""
import calendar
import logging
from datetime import date, datetime, time
from typing import Dict, List, Optional, Tuple, Union

from sqlalchemy import func, literal
from sqlalchemy.orm import Session

from models.product import Product
from models.stock import StockIn, StockOut
from services.errors import InvalidInput

logger = logging.getLogger(__name__)

REPORT_TYPES = ("daily", "monthly", "custom")

DateLike = Union[str, date, None]


def _parse_date(value: DateLike, label: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    # Full ISO timestamps are accepted too, anything trailing is not
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise InvalidInput(f"Invalid {label}: {value}")


def _day_bounds(start: date, end: date) -> Tuple[datetime, datetime]:
    return datetime.combine(start, time.min), datetime.combine(end, time.max)


def report_window(
    report_type: Optional[str],
    start_date: DateLike = None,
    end_date: DateLike = None,
    today: Optional[date] = None,
) -> Tuple[datetime, datetime]:
    """Inclusive datetime bounds for a report.

    ``daily`` covers today, ``monthly`` the current calendar month and
    ``custom`` the given dates, each day taken from 00:00:00 to end of day.
    """
    today = today or date.today()

    if report_type == "daily":
        return _day_bounds(today, today)

    if report_type == "monthly":
        last_day = calendar.monthrange(today.year, today.month)[1]
        return _day_bounds(today.replace(day=1), today.replace(day=last_day))

    if report_type == "custom":
        if not start_date or not end_date:
            raise InvalidInput("Start date and end date are required for a custom report")
        start = _parse_date(start_date, "start date")
        end = _parse_date(end_date, "end date")
        if start > end:
            raise InvalidInput("Start date must not be after end date")
        return _day_bounds(start, end)

    raise InvalidInput("Invalid report parameters")


def _totals_subquery(db: Session, model, start: Optional[datetime] = None, end: Optional[datetime] = None):
    q = db.query(
        model.product_id.label("product_id"),
        func.sum(model.quantity).label("total"),
    )
    if start is not None:
        q = q.filter(model.date >= start)
    if end is not None:
        q = q.filter(model.date <= end)
    return q.group_by(model.product_id).subquery()


def _per_product_totals(db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None):
    # IN and OUT are aggregated separately so one table's rows never multiply the other's
    ins = _totals_subquery(db, StockIn, start, end)
    outs = _totals_subquery(db, StockOut, start, end)

    return (
        db.query(
            Product,
            func.coalesce(ins.c.total, 0).label("total_stock_in"),
            func.coalesce(outs.c.total, 0).label("total_stock_out"),
        )
        .outerjoin(ins, ins.c.product_id == Product.id)
        .outerjoin(outs, outs.c.product_id == Product.id)
        .order_by(Product.name.asc(), Product.id.asc())
        .all()
    )


def _movement_details(db: Session, model, start: datetime, end: datetime) -> List[Dict]:
    rows = (
        db.query(
            model.id,
            model.product_id,
            Product.code,
            Product.name,
            model.quantity,
            model.date,
            model.notes,
            literal(model.movement_type).label("movement_type"),
        )
        .join(Product, Product.id == model.product_id)
        .filter(model.date >= start, model.date <= end)
        .all()
    )
    return [dict(r._mapping) for r in rows]


def stock_movement_report(
    db: Session,
    report_type: Optional[str],
    start_date: DateLike = None,
    end_date: DateLike = None,
    today: Optional[date] = None,
) -> Dict[str, List[Dict]]:
    start, end = report_window(report_type, start_date, end_date, today=today)
    logger.info("Stock movement report (%s) from %s to %s", report_type, start, end)

    summary = []
    for product, total_in, total_out in _per_product_totals(db, start, end):
        total_in, total_out = int(total_in), int(total_out)
        summary.append({
            "product_id": product.id,
            "code": product.code,
            "name": product.name,
            "current_quantity": product.quantity,
            "total_stock_in": total_in,
            "total_stock_out": total_out,
            "net_change": total_in - total_out,
        })

    details = _movement_details(db, StockIn, start, end) + _movement_details(db, StockOut, start, end)
    details.sort(key=lambda m: m["date"], reverse=True)

    logger.info("Report generated: %s products, %s movements", len(summary), len(details))
    return {"summary": summary, "details": details}


def current_stock_report(db: Session) -> List[Dict]:
    """Stored quantity of every product next to its lifetime in/out totals."""
    return [
        {
            "id": product.id,
            "code": product.code,
            "name": product.name,
            "quantity": product.quantity,
            "created_at": product.created_at,
            "updated_at": product.updated_at,
            "total_stock_in": int(total_in),
            "total_stock_out": int(total_out),
        }
        for product, total_in, total_out in _per_product_totals(db)
    ]
