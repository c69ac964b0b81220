"""
Cascade coordinator.

A user action that touches several records is planned as a list of steps and
persisted as a CascadeRun before anything else is written. Steps run strictly
in sequence; after each one the result and the cursor are saved, so a run that
dies half way can be resumed. Nothing is rolled back.

Every step handler re-reads its target and checks the current state before
acting, which makes re-running a step harmless. Best-effort steps (employee
comments) never block the primary write; their failures are logged and leave
the run in ``partial`` status for a later resume.
"""
import logging
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.orm import Session

from assetledger.errors import DomainError, PartialCascadeFailure, StoreUnavailable, ValidationError
from assetledger.models.asset import Asset, Ownership
from assetledger.models.cascade import CascadeRun
from assetledger.models.consumable import Consumable
from assetledger.models.employee import Employee, EmployeeStatus
from assetledger.models.software import Software
from assetledger.schemas.ledger import EmployeeRef
from assetledger.services import assignment_service as assignment
from assetledger.services import inventory_service as inventory
from assetledger.services import ledger_service as ledger
from assetledger.store import RecordStore

logger = logging.getLogger(__name__)

MASS_UPDATE_FIELDS = {"status", "asset_type", "ownership", "purchase_from", "processor", "ram", "storage"}


@dataclass
class StepOutcome:
    status: str  # done / skipped
    detail: str | None = None
    followups: list[dict] = field(default_factory=list)


def step(op: str, target_id: int | None, payload: dict | None = None, best_effort: bool = False) -> dict:
    return {"op": op, "target_id": target_id, "best_effort": best_effort, "payload": payload or {}}


def comment_step(employee_id: int, text: str) -> dict:
    # comment_id is fixed at planning time so a retried step can detect its own earlier write
    return step("employee_comment", employee_id, {"comment_id": ledger.new_id(), "text": text}, best_effort=True)


# ─── Step handlers ────────────────────────────────────────────────────────────

def _exit_employee(db: Session, employee_id: int, payload: dict) -> StepOutcome:
    employees = RecordStore(db, Employee)
    employee = employees.require(employee_id)
    if employee.status == EmployeeStatus.inactive:
        return StepOutcome("skipped", "employee already inactive")

    exit_date = date.fromisoformat(payload["exit_date"])
    employee.status = EmployeeStatus.inactive
    employee.exit_date = exit_date
    employee.exit_reason = payload["exit_reason"]
    employee.audit_log = ledger.append_entry(employee.audit_log, ledger.new_entry(
        "Exited",
        f"Marked as exited. Reason: {payload['exit_reason']}. Notes: {payload.get('notes') or 'N/A'}",
    ))
    employee.comments = ledger.append_comment(
        employee.comments,
        f"All assets collected and verified on {exit_date:%B} {exit_date.day}, {exit_date.year}.",
    )
    employees.update(employee)
    return StepOutcome("done", "employee marked inactive")


def _unassign_asset(db: Session, asset_id: int, payload: dict) -> StepOutcome:
    assets = RecordStore(db, Asset)
    asset = assets.get(asset_id)
    holder = EmployeeRef(**payload["employee"])
    if asset is None:
        return StepOutcome("skipped", "asset no longer exists")
    if asset.assigned_to != holder.id:
        return StepOutcome("skipped", f"asset no longer assigned to employee {holder.id}")

    assignment.apply_state(asset, assignment.unassign(assignment.state_of(asset)))
    asset.audit_log = ledger.append_entry(
        asset.audit_log,
        ledger.assignment_changed(holder, None, action="Unassigned", reason=payload["reason"]),
    )
    assets.update(asset)
    return StepOutcome("done", "asset unassigned")


def _release_licenses(db: Session, employee_id: int, payload: dict) -> StepOutcome:
    store = RecordStore(db, Software)
    held = [s for s in store.get_all() if employee_id in (s.assigned_to or [])]
    if not held:
        return StepOutcome("skipped", "no license seats held")
    name = payload.get("name") or f"#{employee_id}"
    for software in held:
        software.assigned_to = [i for i in software.assigned_to if i != employee_id]
        software.audit_log = ledger.append_entry(software.audit_log, ledger.new_entry(
            "Updated",
            f"License released from deleted employee {name}; "
            f"{len(software.assigned_to)} of {software.total_licenses} in use",
        ))
        store.update(software)
    return StepOutcome("done", f"released {len(held)} license seat(s)")


def _delete_employee(db: Session, employee_id: int, payload: dict) -> StepOutcome:
    employees = RecordStore(db, Employee)
    employee = employees.get(employee_id)
    if employee is None:
        return StepOutcome("skipped", "employee already deleted")
    held = RecordStore(db, Asset).get_all(Asset.assigned_to == employee_id)
    if held:
        raise ValidationError(f"Employee {employee_id} still holds {len(held)} asset(s)")
    employees.delete(employee)
    return StepOutcome("done", "employee deleted")


def _update_asset(db: Session, asset_id: int, payload: dict) -> StepOutcome:
    # Re-read right before writing so concurrent edits to other fields survive
    asset = RecordStore(db, Asset).require(asset_id)
    followups = apply_asset_change(db, asset, payload["changes"])
    if followups is None:
        return StepOutcome("skipped", "no changes")
    return StepOutcome("done", "asset updated", followups)


def _employee_comment(db: Session, employee_id: int, payload: dict) -> StepOutcome:
    employees = RecordStore(db, Employee)
    employee = employees.get(employee_id)
    if employee is None:
        return StepOutcome("skipped", "employee no longer exists")
    if ledger.has_comment(employee.comments, payload["comment_id"]):
        return StepOutcome("skipped", "comment already recorded")
    employee.comments = ledger.append_comment(employee.comments, payload["text"], comment_id=payload["comment_id"])
    employees.update(employee)
    return StepOutcome("done", "comment added")


_HANDLERS = {
    "exit_employee": _exit_employee,
    "unassign_asset": _unassign_asset,
    "release_licenses": _release_licenses,
    "delete_employee": _delete_employee,
    "update_asset": _update_asset,
    "employee_comment": _employee_comment,
}


# ─── Runner ───────────────────────────────────────────────────────────────────

def start_cascade(db: Session, kind: str, subject_id: int | None, steps: list[dict]) -> dict:
    if not steps:
        return _report(None, kind, "completed", [])
    run = RecordStore(db, CascadeRun).insert(CascadeRun(
        kind=kind,
        subject_id=subject_id,
        steps=steps,
        results=[None] * len(steps),
        cursor=0,
        status="running",
    ))
    logger.info("Cascade %s #%s started with %d step(s)", kind, run.id, len(steps))
    return _execute(db, run)


def resume_cascade(db: Session, run_id: int) -> dict:
    runs = RecordStore(db, CascadeRun)
    run = runs.require(run_id)
    if run.status == "completed":
        return run_report(run)
    retry = [i for i, r in enumerate(run.results) if r is not None and r["status"] == "failed"]
    logger.info("Resuming cascade %s #%s: %d failed step(s), cursor at %d", run.kind, run.id, len(retry), run.cursor)
    run.status = "running"
    runs.update(run)
    return _execute(db, run, retry=retry)


def _execute(db: Session, run: CascadeRun, retry: list[int] | None = None) -> dict:
    runs = RecordStore(db, CascadeRun)
    run_id, kind = run.id, run.kind
    steps, results, cursor = list(run.steps), list(run.results), run.cursor

    def checkpoint(status: str) -> None:
        run.steps, run.results, run.cursor, run.status = list(steps), list(results), cursor, status
        runs.update(run)

    pending = list(retry or [])
    while pending or cursor < len(steps):
        index = pending.pop(0) if pending else cursor
        spec = steps[index]
        try:
            outcome = _HANDLERS[spec["op"]](db, spec["target_id"], spec.get("payload") or {})
        except StoreUnavailable as exc:
            logger.error("Cascade %s #%s aborted at step %d (%s): %s", kind, run_id, index, spec["op"], exc)
            db.rollback()
            try:
                checkpoint("aborted")
            except StoreUnavailable:
                logger.error("Could not record abort of cascade #%s; cursor stays at last checkpoint", run_id)
            raise StoreUnavailable(
                f"Record store unavailable; cascade #{run_id} stopped at step {index}, resume it later"
            ) from exc
        except DomainError as exc:
            db.rollback()
            results[index] = _result(index, spec, "failed", error=type(exc).__name__, detail=exc.detail)
            if spec.get("best_effort"):
                logger.warning("Best-effort step %s on %s failed in cascade #%s: %s",
                               spec["op"], spec["target_id"], run_id, exc.detail)
            else:
                logger.warning("Step %s on %s failed in cascade #%s: %s", spec["op"], spec["target_id"], run_id, exc.detail)
        else:
            results[index] = _result(index, spec, outcome.status, detail=outcome.detail)
            steps.extend(outcome.followups)
            results.extend([None] * len(outcome.followups))
        if index == cursor:
            cursor += 1
        checkpoint("running")

    failed = [r for r in results if r is not None and r["status"] == "failed"]
    checkpoint("partial" if failed else "completed")
    report = run_report(run)
    logger.info("Cascade %s #%s finished: %d/%d step(s) succeeded",
                kind, run_id, report["succeeded"], report["attempted"])

    primary_failures = [r for r in failed if not r["best_effort"]]
    if primary_failures:
        raise PartialCascadeFailure(
            f"{len(primary_failures)} of {report['attempted']} step(s) failed in {kind} cascade #{run_id}",
            report,
        )
    return report


def _result(index: int, spec: dict, status: str, error: str | None = None, detail: str | None = None) -> dict:
    return {
        "index": index,
        "op": spec["op"],
        "target_id": spec["target_id"],
        "best_effort": bool(spec.get("best_effort")),
        "status": status,
        "error": error,
        "detail": detail,
    }


def _report(run_id: int | None, kind: str, status: str, results: list) -> dict:
    attempted = [r for r in results if r is not None]
    failed = sum(1 for r in attempted if r["status"] == "failed")
    return {
        "run_id": run_id,
        "kind": kind,
        "status": status,
        "attempted": len(attempted),
        "succeeded": len(attempted) - failed,
        "failed": failed,
        "results": attempted,
    }


def run_report(run: CascadeRun) -> dict:
    return _report(run.id, run.kind, run.status, run.results)


def get_runs(db: Session, status: str | None = None) -> list[CascadeRun]:
    criteria = [CascadeRun.status == status] if status else []
    return RecordStore(db, CascadeRun).get_all(*criteria, order_by=CascadeRun.id.desc())


# ─── Asset changes ────────────────────────────────────────────────────────────

def apply_asset_change(db: Session, asset: Asset, changes: dict) -> list[dict] | None:
    """
    Apply an edit to ``asset`` through the state machine, append one ledger
    entry per logical change and persist the asset.

    Returns the follow-up comment steps for the employees involved, or None
    when the edit changed nothing (no write happens then).
    """
    for name in ("asset_tag", "serial_number"):
        if name in changes and not changes[name]:
            raise ValidationError(f"'{name}' cannot be cleared")
    if "ownership" in changes and changes["ownership"] is None:
        raise ValidationError("'ownership' cannot be cleared")
    employees = RecordStore(db, Employee)
    old_state = assignment.state_of(asset)
    new_state = assignment.state_for_edit(old_state, changes)
    old_id, new_id = assignment.assignee_of(old_state), assignment.assignee_of(new_state)

    old_employee = employees.get(old_id) if old_id is not None else None
    new_employee = employees.require(new_id) if new_id is not None else None
    if new_id is not None and new_id != old_id and new_employee.status == EmployeeStatus.inactive:
        raise ValidationError(f"Employee {new_employee.name} is inactive and cannot receive assets")

    before = assignment.snapshot(asset)
    for name, value in changes.items():
        if name not in assignment.TRACKED_FIELDS:
            continue
        if name == "ownership":
            value = Ownership(getattr(value, "value", value))
        setattr(asset, name, value)
    assignment.apply_state(asset, new_state)

    entries = assignment.diff_asset(before, asset, old_state, new_state, old_employee, new_employee)
    if not entries:
        db.rollback()
        return None
    asset.audit_log = ledger.append_entries(asset.audit_log, entries)
    RecordStore(db, Asset).update(asset)

    if old_id == new_id:
        return []
    return assignment_comments(asset, old_employee, new_employee)


def assignment_comments(asset: Asset, old_employee: Employee | None, new_employee: Employee | None) -> list[dict]:
    label = f"{asset.make} {asset.model} (Tag: {asset.asset_tag})"
    steps = []
    if old_employee is not None:
        steps.append(comment_step(old_employee.id, f"Asset collected: {label}"))
    if new_employee is not None:
        steps.append(comment_step(new_employee.id, f"Asset assigned: {label}"))
    return steps


def update_asset(db: Session, asset_id: int, changes: dict, kind: str = "asset_edit") -> dict:
    assets = RecordStore(db, Asset)
    asset = assets.require(asset_id)
    followups = apply_asset_change(db, asset, changes) or []
    report = start_cascade(db, kind, asset_id, followups)
    return {"asset": assets.require(asset_id), "cascade": report}


def assign_asset(db: Session, asset_id: int, employee_id: int) -> dict:
    return update_asset(db, asset_id, {"assigned_to": employee_id}, kind="asset_assign")


def unassign_asset(db: Session, asset_id: int) -> dict:
    return update_asset(db, asset_id, {"assigned_to": None}, kind="asset_unassign")


def set_asset_retired(db: Session, asset_id: int, kind: str) -> dict:
    return update_asset(db, asset_id, {"status": kind}, kind="asset_retire")


def restore_asset(db: Session, asset_id: int) -> dict:
    return update_asset(db, asset_id, {"status": "Available"}, kind="asset_restore")


def mass_update_assets(db: Session, asset_ids: list[int], changes: dict) -> dict:
    unknown = set(changes) - MASS_UPDATE_FIELDS
    if unknown:
        raise ValidationError(f"Fields not allowed in a mass update: {', '.join(sorted(unknown))}")
    if not changes:
        raise ValidationError("Mass update needs at least one field")
    steps = [step("update_asset", asset_id, {"changes": changes}) for asset_id in dict.fromkeys(asset_ids)]
    return {"cascade": start_cascade(db, "asset_mass_update", None, steps)}


# ─── Employee exit / deletion ─────────────────────────────────────────────────

def _unassign_steps(db: Session, employee: Employee, reason: str) -> list[dict]:
    held = RecordStore(db, Asset).get_all(Asset.assigned_to == employee.id)
    holder = ledger.employee_ref(employee).model_dump()
    return [
        step("unassign_asset", asset.id, {"employee": holder, "reason": f"{reason} {employee.name}"})
        for asset in held
    ]


def process_employee_exit(db: Session, employee_id: int, exit_date: date, exit_reason: str, notes: str | None = None) -> dict:
    employees = RecordStore(db, Employee)
    employee = employees.require(employee_id)
    steps = [step("exit_employee", employee_id, {
        "exit_date": exit_date.isoformat(),
        "exit_reason": exit_reason,
        "notes": notes,
    })]
    steps += _unassign_steps(db, employee, "Asset unassigned from exited employee")
    report = start_cascade(db, "employee_exit", employee_id, steps)
    return {"employee": employees.require(employee_id), "cascade": report}


def _delete_steps(employee_id: int, employee: Employee | None) -> list[dict]:
    name = employee.name if employee is not None else None
    return [step("release_licenses", employee_id, {"name": name}), step("delete_employee", employee_id)]


def delete_employee(db: Session, employee_id: int) -> dict:
    employee = RecordStore(db, Employee).require(employee_id)
    steps = _unassign_steps(db, employee, "Asset unassigned from deleted employee")
    steps += _delete_steps(employee_id, employee)
    return {"cascade": start_cascade(db, "employee_delete", employee_id, steps)}


def delete_employees(db: Session, employee_ids: list[int]) -> dict:
    employees = RecordStore(db, Employee)
    unassign, deletes = [], []
    for employee_id in dict.fromkeys(employee_ids):
        employee = employees.get(employee_id)
        if employee is not None:
            unassign += _unassign_steps(db, employee, "Asset unassigned from deleted employee")
        deletes += _delete_steps(employee_id, employee)
    return {"cascade": start_cascade(db, "employee_bulk_delete", None, unassign + deletes)}


# ─── Consumables ──────────────────────────────────────────────────────────────

def issue_consumable(db: Session, consumable_id: int, employee_id: int, quantity: int, remarks: str | None = None) -> dict:
    consumables = RecordStore(db, Consumable)
    consumable = consumables.require(consumable_id)
    employee = RecordStore(db, Employee).require(employee_id)

    inventory.issue(consumable, employee.id, quantity, remarks, employee.name)
    consumables.update(consumable)

    steps = [comment_step(employee.id, f"Issued consumable: {quantity} x {consumable.name}.")]
    report = start_cascade(db, "consumable_issue", consumable_id, steps)
    return {"consumable": consumables.require(consumable_id), "cascade": report}


def revoke_consumable_issue(db: Session, consumable_id: int, issue_id: str) -> dict:
    consumables = RecordStore(db, Consumable)
    consumable = consumables.require(consumable_id)
    target = inventory.find_issue(consumable, issue_id)

    inventory.revoke(consumable, issue_id)
    consumables.update(consumable)

    steps = []
    employee = RecordStore(db, Employee).get(target.employee_id)
    if employee is not None:
        steps.append(comment_step(employee.id, (
            f"Returned consumable: {target.quantity} x {consumable.name}. "
            f"(Issue from {target.issue_date:%Y-%m-%d} revoked)"
        )))
    report = start_cascade(db, "consumable_revoke", consumable_id, steps)
    return {"consumable": consumables.require(consumable_id), "cascade": report}


# ─── Software licenses ────────────────────────────────────────────────────────

def check_license_assignees(db: Session, employee_ids: list[int], total_licenses: int) -> list[Employee]:
    ids = sorted(set(employee_ids))
    if len(ids) > total_licenses:
        raise ValidationError(f"{len(ids)} assignees exceed the {total_licenses} available license(s)")
    employees = RecordStore(db, Employee)
    return [employees.require(i) for i in ids]


def license_comments(software: Software, added: list[Employee], removed: list[Employee]) -> list[dict]:
    label = f"{software.name} {software.version or ''}".strip()
    return (
        [comment_step(e.id, f"Assigned software license: {label}") for e in added]
        + [comment_step(e.id, f"Unassigned software license: {label}") for e in removed]
    )


def set_software_assignees(db: Session, software_id: int, employee_ids: list[int]) -> dict:
    store = RecordStore(db, Software)
    software = store.require(software_id)
    assignees = check_license_assignees(db, employee_ids, software.total_licenses)

    old_ids = set(software.assigned_to or [])
    new_ids = {e.id for e in assignees}
    added = [e for e in assignees if e.id not in old_ids]
    employees = RecordStore(db, Employee)
    removed = [e for e in (employees.get(i) for i in sorted(old_ids - new_ids)) if e is not None]
    if not added and old_ids == new_ids:
        return {"software": software, "cascade": _report(None, "software_assignees", "completed", [])}

    software.assigned_to = sorted(new_ids)
    details = f"Licenses assigned to {len(new_ids)} of {software.total_licenses}"
    if added:
        details += f"; added: {', '.join(e.name for e in added)}"
    if removed:
        details += f"; removed: {', '.join(e.name for e in removed)}"
    software.audit_log = ledger.append_entry(software.audit_log, ledger.new_entry("Updated", details))
    store.update(software)

    report = start_cascade(db, "software_assignees", software_id, license_comments(software, added, removed))
    return {"software": store.require(software_id), "cascade": report}
