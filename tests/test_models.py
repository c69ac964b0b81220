"""Unit tests for SQLAlchemy models and the record store."""
import pytest
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from assetledger.errors import ConcurrentModification, ConflictError, NotFound
from assetledger.models.asset import Asset, AssetStatus
from assetledger.models.consumable import Consumable
from assetledger.models.employee import Employee, EmployeeStatus
from assetledger.store import RecordStore


def _employee(db, code="E-1") -> Employee:
    e = Employee(employee_code=code, name="Alice", comments=[], audit_log=[])
    db.add(e)
    db.commit()
    db.refresh(e)
    return e


# ─── Employee ────────────────────────────────────────────────────────────────

def test_employee_defaults(db):
    e = _employee(db)
    assert e.id is not None
    assert e.status == EmployeeStatus.active
    assert e.exit_date is None


def test_employee_unique_code(db):
    _employee(db, "DUP")
    db.add(Employee(employee_code="DUP", name="Bob", comments=[], audit_log=[]))
    with pytest.raises(IntegrityError):
        db.commit()


# ─── Asset ───────────────────────────────────────────────────────────────────

def test_asset_assigned_without_employee_rejected(db):
    db.add(Asset(asset_tag="T-1", serial_number="S-1", status=AssetStatus.assigned, comments=[], audit_log=[]))
    with pytest.raises(IntegrityError):
        db.commit()


def test_asset_retired_with_employee_rejected(db):
    e = _employee(db)
    db.add(Asset(
        asset_tag="T-2", serial_number="S-2", status=AssetStatus.donated,
        assigned_to=e.id, comments=[], audit_log=[],
    ))
    with pytest.raises(IntegrityError):
        db.commit()


def test_asset_version_increments(db):
    asset = Asset(asset_tag="T-3", serial_number="S-3", comments=[], audit_log=[])
    db.add(asset)
    db.commit()
    assert asset.version == 1
    asset.ram = "8GB"
    db.commit()
    assert asset.version == 2


# ─── Consumable ──────────────────────────────────────────────────────────────

def test_consumable_quantity_non_negative(db):
    db.add(Consumable(name="Pen", quantity=-1, initial_quantity=0, issue_log=[], audit_log=[]))
    with pytest.raises(IntegrityError):
        db.commit()


# ─── RecordStore ─────────────────────────────────────────────────────────────

def test_store_require_missing(db):
    with pytest.raises(NotFound) as info:
        RecordStore(db, Asset).require(5)
    assert info.value.detail == "Asset 5 not found"


def test_store_maps_integrity_error(db):
    store = RecordStore(db, Employee)
    store.insert(Employee(employee_code="X", name="A", comments=[], audit_log=[]))
    with pytest.raises(ConflictError):
        store.insert(Employee(employee_code="X", name="B", comments=[], audit_log=[]))


def test_store_detects_stale_write(db):
    store = RecordStore(db, Consumable)
    item = store.insert(Consumable(name="Pen", quantity=5, initial_quantity=5, issue_log=[], audit_log=[]))
    # Another writer bumps the version behind this session's back
    db.execute(
        update(Consumable)
        .where(Consumable.id == item.id)
        .values(version=item.version + 1)
        .execution_options(synchronize_session=False)
    )

    item.quantity = 4
    with pytest.raises(ConcurrentModification):
        store.update(item)


def test_store_get_all_filters(db):
    _employee(db, "A")
    _employee(db, "B")
    rows = RecordStore(db, Employee).get_all(Employee.employee_code == "B")
    assert [e.employee_code for e in rows] == ["B"]
