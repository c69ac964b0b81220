from sqlalchemy import select, func
from sqlalchemy.orm import Session
from assetledger.config import settings
from assetledger.errors import ConflictError, ValidationError
from assetledger.models.asset import Asset
from assetledger.models.employee import Employee, EmployeeStatus
from assetledger.schemas.asset import AssetCreate
from assetledger.schemas.pagination import Page, paginate
from assetledger.services import assignment_service as assignment
from assetledger.services import cascade_service as cascades
from assetledger.services import ledger_service as ledger
from assetledger.store import RecordStore


def get_assets(
    db: Session,
    page: int = 1,
    size: int = 50,
    search: str = "",
    status: str = "",
    assigned_to: int | None = None,
) -> Page:
    query = select(Asset)
    if search:
        query = query.where(
            Asset.asset_tag.ilike(f"%{search}%")
            | Asset.serial_number.ilike(f"%{search}%")
            | Asset.make.ilike(f"%{search}%")
            | Asset.model.ilike(f"%{search}%")
        )
    if status:
        query = query.where(Asset.status == assignment.as_status(status))
    if assigned_to is not None:
        query = query.where(Asset.assigned_to == assigned_to)
    total = db.scalar(select(func.count()).select_from(query.subquery()))
    rows = db.scalars(query.order_by(Asset.id).offset((page - 1) * size).limit(size)).all()
    return paginate(rows, total, page, size)


def get_asset(db: Session, asset_id: int) -> Asset:
    return RecordStore(db, Asset).require(asset_id)


def _check_capacity(db: Session, incoming: int) -> None:
    count = db.scalar(select(func.count()).select_from(Asset))
    if count + incoming > settings.MAX_ASSETS:
        raise ValidationError(f"Asset limit of {settings.MAX_ASSETS} reached")


def _check_assignee(db: Session, employee_id: int | None) -> Employee | None:
    if employee_id is None:
        return None
    employee = RecordStore(db, Employee).require(employee_id)
    if employee.status == EmployeeStatus.inactive:
        raise ValidationError(f"Employee {employee.name} is inactive and cannot receive assets")
    return employee


def _build(data: AssetCreate, details: str, employee: Employee | None) -> Asset:
    state = assignment.initial_state(data.assigned_to, data.status)
    asset = Asset(**data.model_dump(exclude={"assigned_to", "status"}), comments=[], audit_log=[])
    assignment.apply_state(asset, state)
    entries = [ledger.new_entry("Created", details)]
    if employee is not None:
        entries.append(ledger.assignment_changed(None, employee))
    asset.audit_log = ledger.append_entries([], entries)
    return asset


def create_asset(db: Session, data: AssetCreate) -> dict:
    _check_capacity(db, 1)
    employee = _check_assignee(db, data.assigned_to)
    asset = RecordStore(db, Asset).insert(_build(data, "Asset created manually", employee))
    steps = cascades.assignment_comments(asset, None, employee)
    report = cascades.start_cascade(db, "asset_create", asset.id, steps)
    return {"asset": get_asset(db, asset.id), "cascade": report}


def bulk_create_assets(db: Session, rows: list[AssetCreate]) -> list[Asset]:
    """Insert a batch in one write. Assignees are validated up front; no per-employee comments."""
    _check_capacity(db, len(rows))
    tags = [r.asset_tag for r in rows]
    serials = [r.serial_number for r in rows]
    if len(set(tags)) != len(tags) or len(set(serials)) != len(serials):
        raise ConflictError("Duplicate asset tag or serial number within the batch")
    assignees = [_check_assignee(db, row.assigned_to) for row in rows]
    return RecordStore(db, Asset).bulk_insert(
        _build(row, "Imported in bulk", employee) for row, employee in zip(rows, assignees)
    )


def add_asset_comment(db: Session, asset_id: int, text: str) -> Asset:
    store = RecordStore(db, Asset)
    asset = store.require(asset_id)
    text = text.strip()
    if not text:
        raise ValidationError("Comment text must not be empty")
    asset.comments = ledger.append_comment(asset.comments, text)
    asset.audit_log = ledger.append_entry(asset.audit_log, ledger.new_entry("Comment Added", text[:50]))
    return store.update(asset)


def delete_asset(db: Session, asset_id: int) -> None:
    store = RecordStore(db, Asset)
    store.delete(store.require(asset_id))

