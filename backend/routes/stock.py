# backend/routes/stock.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from database import get_db
from models.users import User
from utils.tokenJWT import get_current_user
from services import inventory
import schemas.stock as stock_schemas

stockin_router = APIRouter(tags=["Stock In"])
stockout_router = APIRouter(tags=["Stock Out"])


# Flatten a movement with its product's code and name
def _movement_out(m) -> dict:
    return {
        "id": m.id,
        "product_id": m.product_id,
        "quantity": m.quantity,
        "date": m.date,
        "notes": m.notes,
        "movement_type": m.movement_type,
        "code": m.product.code if m.product else None,
        "name": m.product.name if m.product else None,
    }


# =========================
# STOCK IN
# =========================
@stockin_router.get("", response_model=List[stock_schemas.StockMovementResponse])
def list_stock_in(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [_movement_out(m) for m in inventory.list_stock_ins(db)]


@stockin_router.get("/product/{product_id}", response_model=List[stock_schemas.StockMovementResponse])
def list_stock_in_for_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [_movement_out(m) for m in inventory.list_stock_ins(db, product_id)]


@stockin_router.post("", response_model=stock_schemas.StockMovementResponse, status_code=status.HTTP_201_CREATED)
def add_stock_in(
    payload: stock_schemas.StockMovementCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    movement = inventory.record_stock_in(db, payload.product_id, payload.quantity, payload.notes)
    return _movement_out(movement)


@stockin_router.put("/{movement_id}", response_model=stock_schemas.StockMovementResponse)
def edit_stock_in(
    movement_id: int,
    payload: stock_schemas.StockMovementUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    movement = inventory.update_stock_in(db, movement_id, payload.quantity, payload.notes)
    return _movement_out(movement)


@stockin_router.delete("/{movement_id}")
def remove_stock_in(
    movement_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    inventory.delete_stock_in(db, movement_id)
    return {"message": "Stock-in record deleted successfully"}


# =========================
# STOCK OUT
# =========================
@stockout_router.get("", response_model=List[stock_schemas.StockMovementResponse])
def list_stock_out(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [_movement_out(m) for m in inventory.list_stock_outs(db)]


@stockout_router.get("/product/{product_id}", response_model=List[stock_schemas.StockMovementResponse])
def list_stock_out_for_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [_movement_out(m) for m in inventory.list_stock_outs(db, product_id)]


@stockout_router.post("", response_model=stock_schemas.StockMovementResponse, status_code=status.HTTP_201_CREATED)
def add_stock_out(
    payload: stock_schemas.StockMovementCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    movement = inventory.record_stock_out(db, payload.product_id, payload.quantity, payload.notes)
    return _movement_out(movement)


@stockout_router.put("/{movement_id}", response_model=stock_schemas.StockMovementResponse)
def edit_stock_out(
    movement_id: int,
    payload: stock_schemas.StockMovementUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    movement = inventory.update_stock_out(db, movement_id, payload.quantity, payload.notes)
    return _movement_out(movement)


@stockout_router.delete("/{movement_id}")
def remove_stock_out(
    movement_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    inventory.delete_stock_out(db, movement_id)
    return {"message": "Stock-out record deleted successfully"}
