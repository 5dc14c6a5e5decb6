import threading

from models.product import Product
from models.stock import StockOut
from services import catalog, inventory
from services.errors import InsufficientStock


def _run_together(session_local, work):
    """Run ``work(session)`` in two threads, each with its own session."""
    results = [None, None]

    def runner(index):
        session = session_local()
        try:
            results[index] = work(session)
        except Exception as e:
            results[index] = e
        finally:
            session.close()

    threads = [threading.Thread(target=runner, args=(i,)) for i in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return results


def test_concurrent_stock_outs_cannot_overdraw(file_session_local, monkeypatch):
    setup = file_session_local()
    product_id = catalog.create_product(setup, "Widget", 5).id
    setup.close()

    # Both calls have looked at the product before either of them writes
    both_read = threading.Barrier(2, timeout=20)
    lock_product = inventory._lock_product

    def lock_then_wait(db, pid):
        product = lock_product(db, pid)
        both_read.wait()
        return product

    monkeypatch.setattr(inventory, "_lock_product", lock_then_wait)
    results = _run_together(file_session_local, lambda s: inventory.record_stock_out(s, product_id, 3))

    ok = [r for r in results if isinstance(r, StockOut)]
    refused = [r for r in results if isinstance(r, InsufficientStock)]
    assert len(ok) == 1, results
    assert len(refused) == 1, results
    assert refused[0].max_available == 2

    check = file_session_local()
    assert check.query(Product).filter(Product.id == product_id).one().quantity == 2
    assert check.query(StockOut).count() == 1
    check.close()


def test_concurrent_stock_out_edits_cannot_overdraw(file_session_local, monkeypatch):
    setup = file_session_local()
    product_id = catalog.create_product(setup, "Widget", 6).id
    first = inventory.record_stock_out(setup, product_id, 1).id
    second = inventory.record_stock_out(setup, product_id, 1).id
    setup.close()

    both_read = threading.Barrier(2, timeout=20)
    lock_product = inventory._lock_product

    def lock_then_wait(db, pid):
        product = lock_product(db, pid)
        both_read.wait()
        return product

    monkeypatch.setattr(inventory, "_lock_product", lock_then_wait)
    ids = iter([first, second])
    lock = threading.Lock()

    def edit(session):
        with lock:
            movement_id = next(ids)
        return inventory.update_stock_out(session, movement_id, 4)

    results = _run_together(file_session_local, edit)

    assert sum(isinstance(r, StockOut) for r in results) == 1, results
    assert sum(isinstance(r, InsufficientStock) for r in results) == 1, results

    check = file_session_local()
    assert check.query(Product).filter(Product.id == product_id).one().quantity == 1
    check.close()


def test_concurrent_creates_get_distinct_codes(file_session_local, monkeypatch):
    setup = file_session_local()
    catalog.create_product(setup, "Seed")
    setup.close()

    # Both creates are inside their transactions before either takes a code
    both_started = threading.Barrier(2, timeout=20)
    allocate = catalog.allocate_product_code

    def wait_then_allocate(db):
        both_started.wait()
        return allocate(db)

    monkeypatch.setattr(catalog, "allocate_product_code", wait_then_allocate)
    names = iter(["Hammer", "Saw"])
    lock = threading.Lock()

    def create(session):
        with lock:
            name = next(names)
        return catalog.create_product(session, name).code

    results = _run_together(file_session_local, create)

    assert sorted(results) == ["P0002", "P0003"], results
