"""
Consumable stock bookkeeping.

Stock invariant: quantity == initial_quantity - sum(active issues) >= 0.
Each operation mutates ``quantity`` and the logs together on the passed-in
consumable; the caller persists it in a single record update.
"""
from datetime import datetime, timezone

from assetledger.errors import AlreadyReversed, InsufficientStock, NotFound, ValidationError
from assetledger.models.consumable import Consumable, IssueStatus
from assetledger.schemas.ledger import IssueLogEntry, issue_list
from assetledger.services import ledger_service as ledger


def active_issued(consumable: Consumable) -> int:
    return sum(
        e["quantity"] for e in (consumable.issue_log or [])
        if e.get("status", IssueStatus.active.value) == IssueStatus.active.value
    )


def stock_is_consistent(consumable: Consumable) -> bool:
    return (
        consumable.quantity >= 0
        and consumable.quantity == consumable.initial_quantity - active_issued(consumable)
    )


def find_issue(consumable: Consumable, issue_id: str) -> IssueLogEntry:
    for entry in issue_list.validate_python(consumable.issue_log or []):
        if entry.id == issue_id:
            return entry
    raise NotFound(f"Issue {issue_id} not found on consumable {consumable.id}")


def issue(
    consumable: Consumable,
    employee_id: int,
    quantity: int,
    remarks: str | None,
    employee_name: str,
    at: datetime | None = None,
) -> Consumable:
    if quantity < 1:
        raise ValidationError("Issue quantity must be at least 1")
    if quantity > consumable.quantity:
        raise InsufficientStock(
            f"Cannot issue {quantity} of '{consumable.name}': only {consumable.quantity} in stock"
        )

    at = at or datetime.now(timezone.utc)
    entry = IssueLogEntry(
        id=ledger.new_id(),
        employee_id=employee_id,
        quantity=quantity,
        issue_date=at,
        remarks=remarks or "",
        status=IssueStatus.active,
    )
    consumable.quantity -= quantity
    consumable.issue_log = [entry.model_dump(mode="json"), *(consumable.issue_log or [])]
    consumable.audit_log = ledger.append_entry(
        consumable.audit_log,
        ledger.new_entry("Issued", f"Issued {quantity} unit(s) to {employee_name}", at=at, entry_id=entry.id),
    )
    return consumable


def revoke(consumable: Consumable, issue_id: str, at: datetime | None = None) -> Consumable:
    target = find_issue(consumable, issue_id)
    if target.status == IssueStatus.reversed:
        raise AlreadyReversed(f"Issue {issue_id} was already revoked")

    consumable.quantity += target.quantity
    consumable.issue_log = [
        {**e, "status": IssueStatus.reversed.value} if e.get("id") == issue_id else e
        for e in consumable.issue_log
    ]
    consumable.audit_log = ledger.append_entry(
        consumable.audit_log,
        ledger.new_entry("Issue Revoked", f"Revoked issue of {target.quantity} unit(s).", at=at),
    )
    return consumable


def restock(consumable: Consumable, amount: int, at: datetime | None = None) -> Consumable:
    if amount < 1:
        raise ValidationError("Restock amount must be at least 1")
    consumable.quantity += amount
    consumable.initial_quantity += amount
    consumable.audit_log = ledger.append_entry(
        consumable.audit_log,
        ledger.new_entry("Restocked", f"Added {amount} unit(s); {consumable.quantity} in stock", at=at),
    )
    return consumable
