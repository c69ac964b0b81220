from sqlalchemy import select, func
from sqlalchemy.orm import Session
from assetledger.config import settings
from assetledger.errors import ValidationError
from assetledger.models.asset import Asset
from assetledger.models.employee import Employee, EmployeeStatus
from assetledger.schemas.employee import EmployeeCreate, EmployeeUpdate
from assetledger.schemas.pagination import Page, paginate
from assetledger.services import ledger_service as ledger
from assetledger.store import RecordStore


def get_employees(db: Session, page: int = 1, size: int = 50, search: str = "", status: str = "") -> Page:
    query = select(Employee)
    if search:
        query = query.where(
            Employee.name.ilike(f"%{search}%")
            | Employee.employee_code.ilike(f"%{search}%")
            | Employee.department.ilike(f"%{search}%")
        )
    if status:
        query = query.where(Employee.status == EmployeeStatus(status))
    total = db.scalar(select(func.count()).select_from(query.subquery()))
    rows = db.scalars(query.order_by(Employee.name).offset((page - 1) * size).limit(size)).all()
    return paginate(rows, total, page, size)


def get_employee(db: Session, employee_id: int) -> Employee:
    return RecordStore(db, Employee).require(employee_id)


def create_employee(db: Session, data: EmployeeCreate) -> Employee:
    count = db.scalar(select(func.count()).select_from(Employee))
    if count >= settings.MAX_EMPLOYEES:
        raise ValidationError(f"Employee limit of {settings.MAX_EMPLOYEES} reached")
    employee = Employee(**data.model_dump(), status=EmployeeStatus.active, comments=[], audit_log=[])
    employee.audit_log = ledger.append_entry([], ledger.new_entry("Created", "Employee created manually"))
    return RecordStore(db, Employee).insert(employee)


def update_employee(db: Session, employee_id: int, data: EmployeeUpdate) -> Employee:
    store = RecordStore(db, Employee)
    employee = store.require(employee_id)
    changes = data.model_dump(exclude_unset=True)
    for field in ("employee_code", "name"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"'{field}' cannot be cleared")
    entries = []
    for field, value in changes.items():
        old = getattr(employee, field)
        if old == value:
            continue
        setattr(employee, field, value)
        entries.append(ledger.new_entry("Updated", f"'{field}' from '{old}' to '{value}'"))
    if not entries:
        return employee
    employee.audit_log = ledger.append_entries(employee.audit_log, entries)
    return store.update(employee)


def add_employee_comment(db: Session, employee_id: int, text: str) -> Employee:
    store = RecordStore(db, Employee)
    employee = store.require(employee_id)
    text = text.strip()
    if not text:
        raise ValidationError("Comment text must not be empty")
    employee.comments = ledger.append_comment(employee.comments, text)
    employee.audit_log = ledger.append_entry(employee.audit_log, ledger.new_entry("Comment Added", text[:50]))
    return store.update(employee)


def get_employee_assets(db: Session, employee_id: int) -> list[Asset]:
    get_employee(db, employee_id)
    return RecordStore(db, Asset).get_all(Asset.assigned_to == employee_id)
