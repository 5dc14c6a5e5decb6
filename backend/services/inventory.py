# backend/services/inventory.py
"""Stock-in / stock-out ledger and the quantity kept in step with it.

Every product's cached ``quantity`` equals its initial quantity plus all
stock-in minus all stock-out currently on record. Each function below changes
the ledger and the quantity together in one transaction, so a failed or
rejected call leaves both untouched.

Removals never read the quantity and write it back: the floor check rides on
the UPDATE itself (``WHERE quantity + :delta >= 0``), so two concurrent
stock-outs cannot both pass against the same stock, even on SQLite where
``FOR UPDATE`` is ignored.
"""
import logging
from datetime import datetime
from typing import List, Optional, Type, Union

from sqlalchemy.orm import Session

from config import settings
from database import unit_of_work
from models.product import Product
from models.stock import StockIn, StockOut
from services.errors import InsufficientStock, NotFound
from services.validation import optional_notes, positive_quantity

logger = logging.getLogger(__name__)

Movement = Union[StockIn, StockOut]

_LABELS = {StockIn: "Stock-in", StockOut: "Stock-out"}


def _lock_product(db: Session, product_id: int) -> Product:
    product = (
        db.query(Product)
        .filter(Product.id == product_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if not product:
        raise NotFound("Product not found")
    return product


def _lock_movement(db: Session, model: Type[Movement], movement_id: int) -> Movement:
    movement = (
        db.query(model)
        .filter(model.id == movement_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if not movement:
        raise NotFound(f"{_LABELS[model]} record not found")
    return movement


def _apply_delta(db: Session, product_id: int, delta) -> None:
    # Single UPDATE ... SET quantity = quantity + :delta
    db.query(Product).filter(Product.id == product_id).update(
        {Product.quantity: Product.quantity + delta},
        synchronize_session=False,
    )


def _apply_delta_with_floor(db: Session, product_id: int, delta) -> bool:
    """Apply ``delta`` only if the quantity stays at or above zero.

    Returns False, changing nothing, when the stored quantity is too low.
    """
    updated = (
        db.query(Product)
        .filter(Product.id == product_id, Product.quantity + delta >= 0)
        .update({Product.quantity: Product.quantity + delta}, synchronize_session=False)
    )
    return updated == 1


def _stored_quantity(db: Session, product_id: int) -> int:
    return db.query(Product.quantity).filter(Product.id == product_id).scalar() or 0


def _remove_in_strict_mode(db: Session, product_id: int, removed: int) -> None:
    if not settings.STRICT_STOCK_EDITS:
        _apply_delta(db, product_id, -removed)
        return
    if not _apply_delta_with_floor(db, product_id, -removed):
        max_removable = max(_stored_quantity(db, product_id), 0)
        logger.warning("Strict edit refused: product %s, removing %s, maximum %s", product_id, removed, max_removable)
        raise InsufficientStock(
            max_removable,
            f"Change would leave negative stock. Maximum removable: {max_removable}",
        )


def _finish(db: Session, movement: Movement) -> Movement:
    db.refresh(movement)
    return movement


# =========================
# STOCK IN
# =========================
def record_stock_in(
    db: Session,
    product_id: int,
    quantity,
    notes: Optional[str] = None,
    date: Optional[datetime] = None,
) -> StockIn:
    qty = positive_quantity(quantity)

    with unit_of_work(db):
        product = _lock_product(db, product_id)
        _apply_delta(db, product.id, qty)
        movement = StockIn(
            product_id=product.id,
            quantity=qty,
            notes=optional_notes(notes),
            date=date or datetime.now(),
        )
        db.add(movement)

    logger.info("Stock-in %s: product %s +%s", movement.id, product_id, qty)
    return _finish(db, movement)


def update_stock_in(db: Session, movement_id: int, quantity, notes: Optional[str] = None) -> StockIn:
    new_qty = positive_quantity(quantity)

    with unit_of_work(db):
        movement = _lock_movement(db, StockIn, movement_id)
        product = _lock_product(db, movement.product_id)
        old_qty = movement.quantity
        if new_qty < old_qty:
            _remove_in_strict_mode(db, product.id, old_qty - new_qty)
        else:
            _apply_delta(db, product.id, new_qty - old_qty)
        movement.quantity = new_qty
        movement.notes = optional_notes(notes)

    logger.info("Stock-in %s: %s -> %s (product %s)", movement_id, old_qty, new_qty, movement.product_id)
    return _finish(db, movement)


def delete_stock_in(db: Session, movement_id: int) -> None:
    """Reverse a stock-in and drop it from the ledger.

    Stock already issued against it is not checked, so the product can end up
    below zero. With STRICT_STOCK_EDITS on, such deletes are rejected instead.
    """
    with unit_of_work(db):
        movement = _lock_movement(db, StockIn, movement_id)
        product = _lock_product(db, movement.product_id)
        product_id, qty = product.id, movement.quantity
        _remove_in_strict_mode(db, product_id, qty)
        db.delete(movement)

    logger.info("Stock-in %s deleted: product %s -%s", movement_id, product_id, qty)


# =========================
# STOCK OUT
# =========================
def record_stock_out(
    db: Session,
    product_id: int,
    quantity,
    notes: Optional[str] = None,
    date: Optional[datetime] = None,
) -> StockOut:
    qty = positive_quantity(quantity)

    with unit_of_work(db):
        product = _lock_product(db, product_id)
        if not _apply_delta_with_floor(db, product.id, -qty):
            available = _stored_quantity(db, product.id)
            logger.warning("Stock-out refused: product %s has %s, requested %s", product.id, available, qty)
            raise InsufficientStock(max(available, 0))

        movement = StockOut(
            product_id=product.id,
            quantity=qty,
            notes=optional_notes(notes),
            date=date or datetime.now(),
        )
        db.add(movement)

    logger.info("Stock-out %s: product %s -%s", movement.id, product_id, qty)
    return _finish(db, movement)


def update_stock_out(db: Session, movement_id: int, quantity, notes: Optional[str] = None) -> StockOut:
    new_qty = positive_quantity(quantity)

    with unit_of_work(db):
        movement = _lock_movement(db, StockOut, movement_id)
        product = _lock_product(db, movement.product_id)
        old_qty = movement.quantity

        # As if the old movement were reversed first
        if not _apply_delta_with_floor(db, product.id, old_qty - new_qty):
            ceiling = _stored_quantity(db, product.id) + old_qty
            logger.warning("Stock-out %s edit refused: ceiling %s, requested %s", movement_id, ceiling, new_qty)
            raise InsufficientStock(max(ceiling, 0))

        movement.quantity = new_qty
        movement.notes = optional_notes(notes)

    logger.info("Stock-out %s: %s -> %s (product %s)", movement_id, old_qty, new_qty, movement.product_id)
    return _finish(db, movement)


def delete_stock_out(db: Session, movement_id: int) -> None:
    with unit_of_work(db):
        movement = _lock_movement(db, StockOut, movement_id)
        product_id, qty = movement.product_id, movement.quantity
        _lock_product(db, product_id)
        _apply_delta(db, product_id, qty)
        db.delete(movement)

    logger.info("Stock-out %s deleted: product %s +%s", movement_id, product_id, qty)


# =========================
# LISTINGS
# =========================
def _get(db: Session, model: Type[Movement], movement_id: int) -> Movement:
    movement = db.query(model).filter(model.id == movement_id).first()
    if not movement:
        raise NotFound(f"{_LABELS[model]} record not found")
    return movement


def _list(db: Session, model: Type[Movement], product_id: Optional[int]) -> List[Movement]:
    query = db.query(model).join(Product)
    if product_id is not None:
        query = query.filter(model.product_id == product_id)
    return query.order_by(model.date.desc(), model.id.desc()).all()


def get_stock_in(db: Session, movement_id: int) -> StockIn:
    return _get(db, StockIn, movement_id)


def get_stock_out(db: Session, movement_id: int) -> StockOut:
    return _get(db, StockOut, movement_id)


def list_stock_ins(db: Session, product_id: Optional[int] = None) -> List[StockIn]:
    return _list(db, StockIn, product_id)


def list_stock_outs(db: Session, product_id: Optional[int] = None) -> List[StockOut]:
    return _list(db, StockOut, product_id)
