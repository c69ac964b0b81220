"""
Audit ledger and comment helpers.

Every append-only sequence (audit logs, comments, issue logs) stores the most
recent item first. Helpers return a new list; callers assign it back to the
entity and persist it, which is also what makes SQLAlchemy notice the change
on a JSON column.
"""
import uuid
from datetime import datetime, timezone

from assetledger.models.employee import Employee
from assetledger.schemas.ledger import (
    AssignmentChanged,
    Comment,
    EmployeeRef,
    LedgerEntry,
    comment_list,
    entry_list,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def new_entry(action: str, details: str, at: datetime | None = None, entry_id: str | None = None) -> LedgerEntry:
    return LedgerEntry(id=entry_id or new_id(), action=action, date=at or _now(), details=details)


def employee_ref(employee: Employee | EmployeeRef | None) -> EmployeeRef | None:
    if employee is None or isinstance(employee, EmployeeRef):
        return employee
    return EmployeeRef(id=employee.id, name=employee.name, code=employee.employee_code)


def assignment_changed(
    old_employee: Employee | EmployeeRef | None,
    new_employee: Employee | EmployeeRef | None,
    action: str = "Assignment Changed",
    reason: str | None = None,
    at: datetime | None = None,
) -> AssignmentChanged:
    return AssignmentChanged(
        id=new_id(),
        action=action,
        date=at or _now(),
        from_employee=employee_ref(old_employee),
        to_employee=employee_ref(new_employee),
        reason=reason,
    )


def append_entry(log: list | None, entry: LedgerEntry | AssignmentChanged) -> list:
    return [entry.model_dump(mode="json"), *(log or [])]


def append_entries(log: list | None, entries: list) -> list:
    """Prepend several entries, keeping the newest (last in ``entries``) on top."""
    for entry in entries:
        log = append_entry(log, entry)
    return log or []


def append_comment(
    comments: list | None,
    text: str,
    at: datetime | None = None,
    comment_id: str | None = None,
) -> list:
    comment = Comment(id=comment_id or new_id(), text=text, date=at or _now())
    return [comment.model_dump(mode="json"), *(comments or [])]


def has_comment(comments: list | None, comment_id: str) -> bool:
    return any(c.get("id") == comment_id for c in (comments or []))


def parse_log(raw: list | None) -> list[LedgerEntry | AssignmentChanged]:
    return entry_list.validate_python(raw or [])


def parse_comments(raw: list | None) -> list[Comment]:
    return comment_list.validate_python(raw or [])


def sorted_by_date(entries: list) -> list:
    return sorted(entries, key=lambda e: e.date, reverse=True)
