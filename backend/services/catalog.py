# backend/services/catalog.py
import logging
import re
from typing import List, Optional

from sqlalchemy.orm import Session

from database import unit_of_work
from models.product import Product
from models.sequence import CodeSequence
import models.stock  # noqa: F401  Product relationships need StockIn/StockOut mapped
from services.errors import NotFound
from services.validation import non_negative_quantity, required_text

logger = logging.getLogger(__name__)

CODE_PREFIX = "P"
CODE_WIDTH = 4
PRODUCT_SEQUENCE = "product"

_TRAILING_DIGITS = re.compile(r"(\d+)$")


def format_product_code(number: int) -> str:
    return f"{CODE_PREFIX}{str(number).zfill(CODE_WIDTH)}"


def _last_code_number(db: Session) -> int:
    """Number behind the newest product's code, 0 for an empty catalog."""
    last = db.query(Product.code).order_by(Product.id.desc()).first()
    if not last:
        return 0
    match = _TRAILING_DIGITS.search(last.code or "")
    return int(match.group(1)) if match else 0


def allocate_product_code(db: Session) -> str:
    """Take the next product code from the counter row.

    Must run inside the transaction that inserts the product. The counter is
    bumped by a single ``UPDATE ... SET last_value = last_value + 1`` and read
    back afterwards, so the write lock is taken before any value is read and
    two concurrent creates always get different codes. A missing counter is
    seeded from the newest product's code, which keeps numbering going on
    databases that predate it.
    """
    bumped = (
        db.query(CodeSequence)
        .filter(CodeSequence.name == PRODUCT_SEQUENCE)
        .update({CodeSequence.last_value: CodeSequence.last_value + 1}, synchronize_session=False)
    )
    if not bumped:
        db.add(CodeSequence(name=PRODUCT_SEQUENCE, last_value=_last_code_number(db) + 1))
        db.flush()

    value = db.query(CodeSequence.last_value).filter(CodeSequence.name == PRODUCT_SEQUENCE).scalar()
    return format_product_code(value)


def create_product(db: Session, name: Optional[str], quantity=None) -> Product:
    clean_name = required_text(name, "Product name is required")
    initial_qty = non_negative_quantity(quantity)

    with unit_of_work(db):
        product = Product(
            code=allocate_product_code(db),
            name=clean_name,
            quantity=initial_qty,
        )
        db.add(product)
        db.flush()

    db.refresh(product)
    logger.info("Product %s created as %s with quantity %s", product.id, product.code, product.quantity)
    return product


def get_product(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFound("Product not found")
    return product


def list_products(db: Session) -> List[Product]:
    return db.query(Product).order_by(Product.id.desc()).all()


def update_product(db: Session, product_id: int, name: Optional[str]) -> Product:
    clean_name = required_text(name, "Product name is required")

    with unit_of_work(db):
        product = get_product(db, product_id)
        product.name = clean_name

    db.refresh(product)
    logger.info("Product %s renamed", product.id)
    return product


def delete_product(db: Session, product_id: int) -> None:
    """Remove a product together with its whole movement history.

    A bulk removal, nothing is reconciled.
    """
    with unit_of_work(db):
        product = get_product(db, product_id)
        db.delete(product)

    logger.info("Product %s deleted with its movements", product_id)
