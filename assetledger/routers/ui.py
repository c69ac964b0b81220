from pathlib import Path
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
from assetledger.database import get_db
import assetledger.services.asset_service as asset_svc
import assetledger.services.employee_service as employee_svc
import assetledger.services.ledger_service as ledger

router = APIRouter(tags=["ui"])
# Autoescape is on for .html templates; ledger text is user-supplied
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


def _history(request: Request, title: str, record, subtitle: str):
    return templates.TemplateResponse(request, "history.html", {
        "title": title,
        "subtitle": subtitle,
        "entries": ledger.sorted_by_date(ledger.parse_log(record.audit_log)),
        "comments": ledger.sorted_by_date(ledger.parse_comments(record.comments)),
    })


@router.get("/assets/{asset_id}/history", response_class=HTMLResponse)
def asset_history(asset_id: int, request: Request, db: Session = Depends(get_db)):
    asset = asset_svc.get_asset(db, asset_id)
    subtitle = f"{asset.make or ''} {asset.model or ''}".strip()
    return _history(request, f"Asset {asset.asset_tag}", asset, subtitle)


@router.get("/employees/{employee_id}/history", response_class=HTMLResponse)
def employee_history(employee_id: int, request: Request, db: Session = Depends(get_db)):
    employee = employee_svc.get_employee(db, employee_id)
    return _history(request, employee.name, employee, f"{employee.employee_code} · {employee.status.value}")
