"""Employee exit/deletion, mass update and saga resume under injected store failures."""
from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError

from assetledger.errors import NotFound, PartialCascadeFailure, StoreUnavailable, ValidationError
from assetledger.models.asset import Asset, AssetStatus
from assetledger.models.cascade import CascadeRun
from assetledger.models.employee import Employee, EmployeeStatus
from assetledger.schemas.employee import EmployeeUpdate
from assetledger.schemas.software import SoftwareCreate
from assetledger.services import cascade_service as cascades
from assetledger.services import employee_service as employee_svc
from assetledger.services import report_service
from assetledger.services import software_service as software_svc


def _unassigned_entries(asset) -> list[dict]:
    return [e for e in asset.audit_log if e["action"] == "Unassigned"]


def _fail_commit_once(monkeypatch, db, when, exc):
    """Make the next commit whose dirty set matches ``when`` raise ``exc``."""
    real_commit = db.commit
    state = {"fired": False}

    def commit():
        if not state["fired"] and any(when(obj) for obj in db.dirty):
            state["fired"] = True
            raise exc
        real_commit()

    monkeypatch.setattr(db, "commit", commit)
    return state


# ─── Exit ────────────────────────────────────────────────────────────────────

def test_exit_unassigns_every_asset(db, make_employee, make_asset):
    alice = make_employee("Alice")
    a1, a2 = make_asset(assigned_to=alice.id), make_asset(assigned_to=alice.id)

    result = cascades.process_employee_exit(db, alice.id, date(2026, 3, 31), "Resigned", "Moving abroad")

    employee = result["employee"]
    assert employee.status == EmployeeStatus.inactive
    assert employee.exit_date == date(2026, 3, 31)
    assert employee.audit_log[0]["action"] == "Exited"
    assert employee.audit_log[0]["details"] == "Marked as exited. Reason: Resigned. Notes: Moving abroad"
    assert employee.comments[0]["text"] == "All assets collected and verified on March 31, 2026."

    for asset_id in (a1.id, a2.id):
        asset = db.get(Asset, asset_id)
        db.refresh(asset)
        assert asset.assigned_to is None
        assert asset.status == AssetStatus.available
        entries = _unassigned_entries(asset)
        assert len(entries) == 1
        assert entries[0]["details"] == "Asset unassigned from exited employee Alice"

    report = result["cascade"]
    assert report["status"] == "completed"
    assert report["attempted"] == 3
    assert report["failed"] == 0


def test_exit_without_assets(db, make_employee):
    bob = make_employee("Bob")
    result = cascades.process_employee_exit(db, bob.id, date(2026, 1, 1), "Retired")
    assert result["employee"].status == EmployeeStatus.inactive
    assert result["employee"].audit_log[0]["details"].endswith("Notes: N/A")
    assert result["cascade"]["attempted"] == 1


def test_exit_twice_adds_nothing(db, make_employee, make_asset):
    alice = make_employee("Alice")
    asset = make_asset(assigned_to=alice.id)
    cascades.process_employee_exit(db, alice.id, date(2026, 1, 1), "Resigned")
    db.refresh(alice)
    db.refresh(asset)
    employee_log, asset_log = len(alice.audit_log), len(asset.audit_log)

    result = cascades.process_employee_exit(db, alice.id, date(2026, 1, 1), "Resigned")

    assert result["cascade"]["results"][0]["status"] == "skipped"
    db.refresh(alice)
    db.refresh(asset)
    assert len(alice.audit_log) == employee_log
    assert len(asset.audit_log) == asset_log


def test_exit_unknown_employee(db):
    with pytest.raises(NotFound):
        cascades.process_employee_exit(db, 404, date(2026, 1, 1), "Resigned")


# ─── Deletion ────────────────────────────────────────────────────────────────

def test_scenario_delete_employee_with_two_assets(db, make_employee, make_asset):
    e2 = make_employee("Erin")
    a1, a2 = make_asset(assigned_to=e2.id), make_asset(assigned_to=e2.id)

    report = cascades.delete_employee(db, e2.id)["cascade"]

    assert report["status"] == "completed"
    assert db.get(Employee, e2.id) is None
    for asset_id in (a1.id, a2.id):
        asset = db.get(Asset, asset_id)
        db.refresh(asset)
        assert asset.assigned_to is None
        assert asset.status == AssetStatus.available
        assert _unassigned_entries(asset)[0]["details"] == "Asset unassigned from deleted employee Erin"


def test_bulk_delete_skips_missing_ids(db, make_employee, make_asset):
    e1, e2 = make_employee("A"), make_employee("B")
    make_asset(assigned_to=e1.id)

    report = cascades.delete_employees(db, [e1.id, e2.id, 999])["cascade"]

    assert report["status"] == "completed"
    statuses = [r["status"] for r in report["results"]]
    assert statuses == ["done", "skipped", "done", "skipped", "done", "skipped", "skipped"]
    assert db.scalars(select(Employee)).all() == []


def test_delete_step_refuses_while_assets_remain(db, make_employee, make_asset):
    employee = make_employee()
    make_asset(assigned_to=employee.id)
    steps = [cascades.step("delete_employee", employee.id)]

    with pytest.raises(PartialCascadeFailure) as info:
        cascades.start_cascade(db, "employee_delete", employee.id, steps)

    assert info.value.report["failed"] == 1
    assert info.value.report["results"][0]["error"] == "ValidationError"
    assert db.get(Employee, employee.id) is not None


def test_delete_employee_releases_license_seats(db, make_employee):
    erin, finn = make_employee("Erin"), make_employee("Finn")
    software = software_svc.create_software(db, SoftwareCreate(
        name="IDE", total_licenses=1, assigned_to=[erin.id],
    ))["software"]

    report = cascades.delete_employee(db, erin.id)["cascade"]

    assert [r["op"] for r in report["results"]] == ["release_licenses", "delete_employee"]
    db.refresh(software)
    assert software.assigned_to == []
    assert software.audit_log[0]["details"] == "License released from deleted employee Erin; 0 of 1 in use"
    assert report_service.license_usage(db)[0]["remaining"] == 1
    # the freed seat can go to someone else
    result = cascades.set_software_assignees(db, software.id, [finn.id])
    assert result["software"].assigned_to == [finn.id]


def test_release_licenses_step_is_idempotent(db, make_employee):
    erin = make_employee("Erin")
    software = software_svc.create_software(db, SoftwareCreate(
        name="IDE", total_licenses=2, assigned_to=[erin.id],
    ))["software"]
    release = cascades.step("release_licenses", erin.id, {"name": "Erin"})

    cascades.start_cascade(db, "test", erin.id, [release])
    report = cascades.start_cascade(db, "test", erin.id, [release])

    assert report["results"][0]["status"] == "skipped"
    db.refresh(software)
    assert len([e for e in software.audit_log if e["details"].startswith("License released")]) == 1


# ─── Mass update ─────────────────────────────────────────────────────────────

def test_mass_update_fields(db, make_asset):
    a1, a2 = make_asset(), make_asset()
    report = cascades.mass_update_assets(db, [a1.id, a2.id], {"ram": "32GB", "asset_type": "Laptop"})["cascade"]
    assert report["succeeded"] == 2
    for asset_id in (a1.id, a2.id):
        asset = db.get(Asset, asset_id)
        db.refresh(asset)
        assert asset.ram == "32GB"
        assert asset.asset_type == "Laptop"


def test_mass_update_retire_clears_assignee(db, make_employee, make_asset):
    employee = make_employee("Alice")
    asset = make_asset(assigned_to=employee.id)
    report = cascades.mass_update_assets(db, [asset.id], {"status": "E-Waste"})["cascade"]

    db.refresh(asset)
    assert asset.status == AssetStatus.e_waste
    assert asset.assigned_to is None
    # primary update plus the collection comment
    assert report["attempted"] == 2
    db.refresh(employee)
    assert employee.comments[0]["text"].startswith("Asset collected:")


def test_mass_update_rejects_unknown_fields(db, make_asset):
    asset = make_asset()
    with pytest.raises(ValidationError):
        cascades.mass_update_assets(db, [asset.id], {"serial_number": "X"})


def test_mass_update_partial_failure(db, make_employee, make_asset):
    employee = make_employee()
    free = make_asset()
    held = make_asset(assigned_to=employee.id)

    with pytest.raises(PartialCascadeFailure) as info:
        cascades.mass_update_assets(db, [free.id, held.id, 999], {"status": "Available", "ram": "4GB"})

    report = info.value.report
    assert report["status"] == "partial"
    assert [r["status"] for r in report["results"]] == ["done", "failed", "failed"]
    assert report["results"][1]["error"] == "ValidationError"
    assert report["results"][2]["error"] == "NotFound"
    db.refresh(held)
    assert held.assigned_to == employee.id
    assert held.ram is None


@pytest.mark.parametrize("status", ["Assigned", "Lost"])
def test_mass_update_with_unsettable_status_fails_the_step(db, make_asset, status):
    asset = make_asset()

    with pytest.raises(PartialCascadeFailure) as info:
        cascades.mass_update_assets(db, [asset.id], {"status": status})

    report = info.value.report
    assert report["status"] == "partial"
    assert report["results"][0]["error"] == "ValidationError"
    assert db.get(CascadeRun, report["run_id"]).status == "partial"


# ─── Saga: failure injection and resume ──────────────────────────────────────

def test_store_failure_aborts_and_resume_finishes(db, monkeypatch, make_employee, make_asset):
    alice = make_employee("Alice")
    a1, a2 = make_asset(assigned_to=alice.id), make_asset(assigned_to=alice.id)
    target = a2.id
    _fail_commit_once(
        monkeypatch, db,
        lambda obj: isinstance(obj, Asset) and obj.id == target,
        OperationalError("UPDATE assets", {}, Exception("database is locked")),
    )

    with pytest.raises(StoreUnavailable):
        cascades.process_employee_exit(db, alice.id, date(2026, 2, 1), "Resigned")

    run = db.scalars(select(CascadeRun).where(CascadeRun.kind == "employee_exit")).one()
    assert run.status == "aborted"
    assert run.cursor == 2
    db.refresh(alice)
    assert alice.status == EmployeeStatus.inactive
    assert db.get(Asset, target).assigned_to == alice.id

    monkeypatch.undo()
    report = cascades.resume_cascade(db, run.id)

    assert report["status"] == "completed"
    for asset_id in (a1.id, a2.id):
        asset = db.get(Asset, asset_id)
        db.refresh(asset)
        assert asset.assigned_to is None
        assert len(_unassigned_entries(asset)) == 1
    db.refresh(alice)
    assert len([e for e in alice.audit_log if e["action"] == "Exited"]) == 1


def test_best_effort_failure_keeps_primary_write(db, monkeypatch, make_employee, make_asset):
    bob = make_employee("Bob")
    asset = make_asset()
    _fail_commit_once(
        monkeypatch, db,
        lambda obj: isinstance(obj, Employee),
        IntegrityError("UPDATE employees", {}, Exception("constraint failed")),
    )

    result = cascades.assign_asset(db, asset.id, bob.id)

    assert result["asset"].assigned_to == bob.id
    report = result["cascade"]
    assert report["status"] == "partial"
    assert report["results"][0]["best_effort"] is True
    assert report["results"][0]["status"] == "failed"
    db.refresh(bob)
    assert bob.comments == []

    monkeypatch.undo()
    report = cascades.resume_cascade(db, report["run_id"])
    assert report["status"] == "completed"
    db.refresh(bob)
    assert len(bob.comments) == 1


def test_resume_skips_comment_for_deleted_employee(db, monkeypatch, make_employee, make_asset):
    bob = make_employee("Bob")
    asset = make_asset()
    _fail_commit_once(
        monkeypatch, db,
        lambda obj: isinstance(obj, Employee),
        IntegrityError("UPDATE employees", {}, Exception("constraint failed")),
    )
    report = cascades.assign_asset(db, asset.id, bob.id)["cascade"]
    assert report["status"] == "partial"
    monkeypatch.undo()

    cascades.unassign_asset(db, asset.id)
    cascades.delete_employee(db, bob.id)
    report = cascades.resume_cascade(db, report["run_id"])

    assert report["status"] == "completed"
    assert report["results"][0]["status"] == "skipped"
    assert cascades.get_runs(db, status="partial") == []


def test_resume_completed_run_is_noop(db, make_employee, make_asset):
    employee = make_employee()
    asset = make_asset()
    report = cascades.assign_asset(db, asset.id, employee.id)["cascade"]
    again = cascades.resume_cascade(db, report["run_id"])
    assert again == report
    db.refresh(employee)
    assert len(employee.comments) == 1


def test_comment_step_dedupes_on_retry(db, make_employee):
    employee = make_employee()
    step = cascades.comment_step(employee.id, "Issued consumable: 1 x Pen.")
    cascades.start_cascade(db, "test", employee.id, [step])
    report = cascades.start_cascade(db, "test", employee.id, [step])
    assert report["results"][0]["status"] == "skipped"
    db.refresh(employee)
    assert len(employee.comments) == 1


def test_inactive_with_assets_report_shows_interrupted_exit(db, monkeypatch, make_employee, make_asset):
    alice = make_employee("Alice")
    asset = make_asset(assigned_to=alice.id)
    target = asset.id
    _fail_commit_once(
        monkeypatch, db,
        lambda obj: isinstance(obj, Asset) and obj.id == target,
        OperationalError("UPDATE assets", {}, Exception("timeout")),
    )
    with pytest.raises(StoreUnavailable):
        cascades.process_employee_exit(db, alice.id, date(2026, 2, 1), "Resigned")

    rows = report_service.inactive_employees_with_assets(db)
    assert rows[0]["employee_id"] == alice.id
    assert rows[0]["asset_ids"] == [target]


def test_employee_update_diff(db, make_employee):
    employee = make_employee(department="IT")
    employee = employee_svc.update_employee(db, employee.id, EmployeeUpdate(department="Finance"))
    assert employee.audit_log[0]["details"] == "'department' from 'IT' to 'Finance'"
