"""
Read-only dashboard reports.

All of these scan JSON ledgers in Python; fine at the configured
MAX_ASSETS / MAX_EMPLOYEES scale.
"""
from sqlalchemy import select
from sqlalchemy.orm import Session
from assetledger.config import settings
from assetledger.models.asset import Asset
from assetledger.models.consumable import Consumable
from assetledger.models.employee import Employee, EmployeeStatus
from assetledger.models.software import Software
from assetledger.schemas.ledger import AssignmentChanged, issue_list
from assetledger.services import ledger_service as ledger


def _names(db: Session) -> dict[int, str]:
    return dict(db.execute(select(Employee.id, Employee.name)).all())


def recently_assigned(db: Session, limit: int | None = None) -> list[dict]:
    limit = limit or settings.RECENT_FEED_SIZE
    names = _names(db)
    feed = []
    for asset in db.scalars(select(Asset)).all():
        for entry in ledger.parse_log(asset.audit_log):
            if isinstance(entry, AssignmentChanged) and entry.to_employee is not None:
                feed.append({
                    "asset_id": asset.id,
                    "asset_tag": asset.asset_tag,
                    "asset": f"{asset.make or ''} {asset.model or ''}".strip(),
                    "employee_id": entry.to_employee.id,
                    "employee_name": names.get(entry.to_employee.id, entry.to_employee.name),
                    "date": entry.date,
                })
    feed.sort(key=lambda row: row["date"], reverse=True)
    return feed[:limit]


def inactive_employees_with_assets(db: Session) -> list[dict]:
    """Inactive employees still holding assets, i.e. exit cascades that did not finish."""
    rows = db.execute(
        select(Employee, Asset.id)
        .join(Asset, Asset.assigned_to == Employee.id)
        .where(Employee.status == EmployeeStatus.inactive)
        .order_by(Employee.id, Asset.id)
    ).all()
    report: dict[int, dict] = {}
    for employee, asset_id in rows:
        row = report.setdefault(employee.id, {
            "employee_id": employee.id,
            "employee_code": employee.employee_code,
            "name": employee.name,
            "exit_date": employee.exit_date,
            "asset_ids": [],
        })
        row["asset_ids"].append(asset_id)
    return list(report.values())


def license_usage(db: Session) -> list[dict]:
    usage = []
    for software in db.scalars(select(Software).order_by(Software.name)).all():
        used = len(software.assigned_to or [])
        usage.append({
            "software_id": software.id,
            "name": software.name,
            "version": software.version,
            "total": software.total_licenses,
            "used": used,
            "remaining": software.total_licenses - used,
            "expiry_date": software.expiry_date,
        })
    return usage


def recent_consumable_issues(db: Session, limit: int | None = None) -> list[dict]:
    limit = limit or settings.RECENT_FEED_SIZE
    names = _names(db)
    feed = []
    for consumable in db.scalars(select(Consumable)).all():
        for entry in issue_list.validate_python(consumable.issue_log or []):
            feed.append({
                "consumable_id": consumable.id,
                "consumable": consumable.name,
                "issue_id": entry.id,
                "employee_id": entry.employee_id,
                "employee_name": names.get(entry.employee_id, "Unknown"),
                "quantity": entry.quantity,
                "status": entry.status.value,
                "issue_date": entry.issue_date,
            })
    feed.sort(key=lambda row: row["issue_date"], reverse=True)
    return feed[:limit]
