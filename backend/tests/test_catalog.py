import pytest

from database import unit_of_work
from models.product import Product
from models.sequence import CodeSequence
from models.stock import StockIn, StockOut
from services import catalog, inventory
from services.errors import ConflictOnAllocation, InvalidInput, NotFound


def test_codes_start_at_p0001_and_increase(db):
    first = catalog.create_product(db, "Hammer")
    second = catalog.create_product(db, "Saw")

    assert first.code == "P0001"
    assert second.code == "P0002"


def test_codes_are_not_reused_after_delete(db):
    catalog.create_product(db, "Hammer")
    second = catalog.create_product(db, "Saw")
    catalog.delete_product(db, second.id)

    third = catalog.create_product(db, "Drill")

    assert third.code == "P0003"


def test_counter_is_seeded_from_existing_codes(db):
    db.add(Product(code="P0041", name="Legacy", quantity=0))
    db.commit()

    product = catalog.create_product(db, "New")

    assert product.code == "P0042"
    assert db.query(CodeSequence).one().last_value == 42


def test_code_widens_past_four_digits():
    assert catalog.format_product_code(7) == "P0007"
    assert catalog.format_product_code(12345) == "P12345"


def test_create_product_validation(db):
    with pytest.raises(InvalidInput, match="Product name is required"):
        catalog.create_product(db, "   ")
    with pytest.raises(InvalidInput):
        catalog.create_product(db, "Valid", -1)
    with pytest.raises(InvalidInput):
        catalog.create_product(db, "Valid", "lots")

    assert db.query(Product).count() == 0
    assert db.query(CodeSequence).count() == 0


def test_create_product_with_initial_quantity(db):
    product = catalog.create_product(db, "  Chisel ", 12)

    assert product.name == "Chisel"
    assert product.quantity == 12
    assert product.created_at is not None


def test_update_product_only_renames(db):
    product = catalog.create_product(db, "Hamer", 3)

    updated = catalog.update_product(db, product.id, "Hammer")

    assert updated.name == "Hammer"
    assert updated.code == "P0001"
    assert updated.quantity == 3
    with pytest.raises(InvalidInput):
        catalog.update_product(db, product.id, "")
    with pytest.raises(NotFound):
        catalog.update_product(db, 999, "Ghost")


def test_list_and_get_products(db):
    first = catalog.create_product(db, "A")
    second = catalog.create_product(db, "B")

    assert [p.id for p in catalog.list_products(db)] == [second.id, first.id]
    assert catalog.get_product(db, first.id).name == "A"
    with pytest.raises(NotFound, match="Product not found"):
        catalog.get_product(db, 999)


def test_delete_product_removes_its_movements(db):
    product = catalog.create_product(db, "Ladder", 5)
    keep = catalog.create_product(db, "Bucket", 5)
    inventory.record_stock_in(db, product.id, 2)
    inventory.record_stock_out(db, product.id, 1)
    inventory.record_stock_in(db, keep.id, 2)

    catalog.delete_product(db, product.id)

    db.expire_all()
    assert db.query(Product).count() == 1
    assert db.query(StockIn).filter(StockIn.product_id == product.id).count() == 0
    assert db.query(StockOut).filter(StockOut.product_id == product.id).count() == 0
    assert db.query(StockIn).count() == 1
    with pytest.raises(NotFound):
        catalog.delete_product(db, product.id)


def test_duplicate_code_surfaces_as_conflict(db):
    catalog.create_product(db, "Original")

    with pytest.raises(ConflictOnAllocation):
        with unit_of_work(db):
            db.add(Product(code="P0001", name="Copy", quantity=0))

    assert db.query(Product).count() == 1
