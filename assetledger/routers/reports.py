from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from assetledger.database import get_db
import assetledger.services.report_service as svc

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/recently-assigned")
def recently_assigned(limit: int | None = Query(None, ge=1, le=100), db: Session = Depends(get_db)):
    return svc.recently_assigned(db, limit)


@router.get("/inactive-with-assets")
def inactive_with_assets(db: Session = Depends(get_db)):
    return svc.inactive_employees_with_assets(db)


@router.get("/license-usage")
def license_usage(db: Session = Depends(get_db)):
    return svc.license_usage(db)


@router.get("/consumable-issues")
def consumable_issues(limit: int | None = Query(None, ge=1, le=100), db: Session = Depends(get_db)):
    return svc.recent_consumable_issues(db, limit)
