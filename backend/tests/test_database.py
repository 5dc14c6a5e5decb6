import pytest
from sqlalchemy.exc import OperationalError

from database import unit_of_work
from models.product import Product
from models.stock import StockIn
from services import catalog, inventory
from services.errors import InsufficientStock, StorageError


def _disk_error():
    return OperationalError("UPDATE products SET quantity=?", (1,), Exception("disk I/O error"))


def test_store_error_becomes_storage_error(db):
    with pytest.raises(StorageError) as exc:
        with unit_of_work(db):
            raise _disk_error()

    assert exc.value.kind == "StorageError"
    assert exc.value.status_code == 500
    assert isinstance(exc.value.__cause__, OperationalError)
    assert "products" not in exc.value.message


def test_store_error_mid_operation_leaves_nothing_behind(db, monkeypatch):
    product = catalog.create_product(db, "Widget", 4)

    def failing_add(movement):
        raise _disk_error()

    monkeypatch.setattr(db, "add", failing_add)
    with pytest.raises(StorageError):
        inventory.record_stock_in(db, product.id, 3)
    monkeypatch.undo()

    db.expire_all()
    assert db.query(Product).filter(Product.id == product.id).one().quantity == 4
    assert db.query(StockIn).count() == 0


def test_failed_rollback_is_reported_with_its_cause(db, monkeypatch):
    original = _disk_error()

    def failing_rollback():
        raise OperationalError("ROLLBACK", {}, Exception("connection lost"))

    monkeypatch.setattr(db, "rollback", failing_rollback)
    with pytest.raises(StorageError) as exc:
        with unit_of_work(db):
            raise original

    assert exc.value.__cause__ is original
    assert exc.value.message == "Rollback failed after OperationalError error"


def test_failed_rollback_after_domain_error(db, monkeypatch):
    product = catalog.create_product(db, "Widget")

    def failing_rollback():
        raise OperationalError("ROLLBACK", {}, Exception("connection lost"))

    monkeypatch.setattr(db, "rollback", failing_rollback)
    with pytest.raises(StorageError) as exc:
        inventory.record_stock_out(db, product.id, 1)

    assert isinstance(exc.value.__cause__, InsufficientStock)
    assert exc.value.message == "Rollback failed after InsufficientStock error"
