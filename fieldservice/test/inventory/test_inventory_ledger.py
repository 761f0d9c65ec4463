"""
Tests for InventoryLedger: stock debit, restock and the consumption history.
"""
import threading
from datetime import datetime

import pytest
from sqlalchemy import update

from fieldservice.buisness.assets.equipment_manager import EquipmentManager
from fieldservice.buisness.core.unit_of_work import unit_of_work
from fieldservice.buisness.errors import (
    InsufficientStockError,
    InvalidQuantityError,
    PartNotFoundError,
    ValidationError,
)
from fieldservice.buisness.inventory.inventory_ledger import InventoryLedger
from fieldservice.buisness.inventory.part_manager import PartManager
from fieldservice.data.inventory.consumption_record import ConsumptionRecord
from fieldservice.data.inventory.part import Part


@pytest.fixture
def equipment(app):
    return EquipmentManager().create({'name': 'Misturador', 'code': 'MR-01'})


@pytest.fixture
def belt_a(app):
    return PartManager().create({'name': 'Belt A', 'model': 'A', 'quantity_on_hand': 10})


def _stock(db, part_id):
    return db.session.get(Part, part_id).quantity_on_hand


def _record_count(db, part_id):
    return db.session.query(ConsumptionRecord).filter_by(part_id=part_id).count()


def test_belt_a_debit_then_insufficient_stock(db, equipment, belt_a):
    """Debit 4 of 10 succeeds, then debit 10 of 6 fails without changing anything"""
    ledger = InventoryLedger()

    record = ledger.debit(equipment.id, belt_a.id, 4)
    assert record.quantity == 4
    assert record.equipment_id == equipment.id
    assert _stock(db, belt_a.id) == 6
    assert _record_count(db, belt_a.id) == 1

    with pytest.raises(InsufficientStockError) as excinfo:
        ledger.debit(equipment.id, belt_a.id, 10)

    assert excinfo.value.requested == 10
    assert excinfo.value.available == 6
    assert excinfo.value.status_code == 409
    assert _stock(db, belt_a.id) == 6
    assert _record_count(db, belt_a.id) == 1


def test_debit_exact_stock_empties_part(db, equipment, belt_a):
    InventoryLedger().debit(equipment.id, belt_a.id, 10)
    part = db.session.get(Part, belt_a.id)
    assert part.quantity_on_hand == 0
    assert part.is_out_of_stock


@pytest.mark.parametrize('quantity', [0, -1, 'abc', None, 1.5])
def test_debit_rejects_invalid_quantity(db, equipment, belt_a, quantity):
    with pytest.raises(InvalidQuantityError):
        InventoryLedger().debit(equipment.id, belt_a.id, quantity)

    assert _stock(db, belt_a.id) == 10
    assert _record_count(db, belt_a.id) == 0


def test_debit_accepts_numeric_strings(db, equipment, belt_a):
    """Form posts deliver quantities as strings"""
    InventoryLedger().debit(str(equipment.id), str(belt_a.id), '3')
    assert _stock(db, belt_a.id) == 7


def test_debit_unknown_part(db, equipment):
    with pytest.raises(PartNotFoundError):
        InventoryLedger().debit(equipment.id, 999, 1)
    assert db.session.query(ConsumptionRecord).count() == 0


def test_debit_uses_injected_clock(db, equipment, belt_a):
    moment = datetime(2024, 5, 17, 10, 30)
    record = InventoryLedger(clock=lambda: moment).debit(equipment.id, belt_a.id, 1)
    assert db.session.get(ConsumptionRecord, record.id).consumed_at == moment


def test_concurrent_debits_never_oversell(app, db, equipment):
    """Five parallel debits of 1 against a stock of 3: exactly three succeed"""
    part = PartManager().create({'name': 'Belt C', 'quantity_on_hand': 3})
    part_id, equipment_id = part.id, equipment.id
    db.session.commit()

    outcomes = []
    lock = threading.Lock()
    barrier = threading.Barrier(5)

    def worker():
        with app.app_context():
            barrier.wait()
            try:
                InventoryLedger().debit(equipment_id, part_id, 1)
                result = 'ok'
            except InsufficientStockError:
                result = 'insufficient'
            finally:
                db.session.remove()
            with lock:
                outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    db.session.expire_all()
    assert sorted(outcomes) == ['insufficient', 'insufficient', 'ok', 'ok', 'ok']
    assert _stock(db, part_id) == 0
    assert _record_count(db, part_id) == 3


def test_restock_absolute_quantity(db, belt_a):
    part = InventoryLedger().restock(belt_a.id, new_quantity=25)
    assert part.quantity_on_hand == 25
    assert db.session.query(ConsumptionRecord).count() == 0


def test_restock_delta(db, belt_a):
    part = InventoryLedger().restock(belt_a.id, delta=5)
    assert part.quantity_on_hand == 15

    part = InventoryLedger().restock(belt_a.id, delta='-15')
    assert part.quantity_on_hand == 0


def test_restock_delta_cannot_go_negative(db, belt_a):
    with pytest.raises(InsufficientStockError):
        InventoryLedger().restock(belt_a.id, delta=-11)
    assert _stock(db, belt_a.id) == 10


def test_restock_requires_exactly_one_mode(db, belt_a):
    with pytest.raises(ValidationError):
        InventoryLedger().restock(belt_a.id)
    with pytest.raises(ValidationError):
        InventoryLedger().restock(belt_a.id, new_quantity=1, delta=1)
    with pytest.raises(ValidationError):
        InventoryLedger().restock(belt_a.id, delta=0)
    with pytest.raises(InvalidQuantityError):
        InventoryLedger().restock(belt_a.id, new_quantity=-1)


def test_restock_unknown_part(db):
    with pytest.raises(PartNotFoundError):
        InventoryLedger().restock(404, new_quantity=3)


def test_failure_after_stock_update_leaves_no_partial_debit(db, equipment, belt_a):
    """A clock error after the conditional UPDATE must not leak the decrement into a later commit"""
    def broken_clock():
        raise RuntimeError("clock unavailable")

    with pytest.raises(RuntimeError):
        InventoryLedger(clock=broken_clock).debit(equipment.id, belt_a.id, 4)

    # Any later commit on the same session
    EquipmentManager().create({'name': 'Prensa'})

    db.session.expire_all()
    assert _stock(db, belt_a.id) == 10
    assert _record_count(db, belt_a.id) == 0


def test_unit_of_work_rolls_back_unexpected_errors(db, belt_a):
    with pytest.raises(TypeError):
        with unit_of_work("zero part stock") as session:
            session.execute(
                update(Part)
                .where(Part.id == belt_a.id)
                .values(quantity_on_hand=0)
                .execution_options(synchronize_session=False)
            )
            raise TypeError("unexpected")

    db.session.commit()
    db.session.expire_all()
    assert _stock(db, belt_a.id) == 10
