from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from assetledger.database import get_db
from assetledger.models.asset import AssetStatus
from assetledger.schemas.asset import (
    AssetCreate,
    AssetUpdate,
    AssetResponse,
    AssetChangeResponse,
    AssignRequest,
    RetireRequest,
    MassUpdateRequest,
)
from assetledger.schemas.cascade import CascadeReport
from assetledger.schemas.ledger import CommentCreate
from assetledger.schemas.pagination import Page
import assetledger.services.asset_service as svc
import assetledger.services.cascade_service as cascade_svc

router = APIRouter(prefix="/api/assets", tags=["assets"])


@router.get("", response_model=Page[AssetResponse])
def list_assets(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    search: str = Query(""),
    status: AssetStatus | None = Query(None),
    assigned_to: int | None = Query(None),
    db: Session = Depends(get_db),
):
    return svc.get_assets(
        db, page=page, size=size, search=search,
        status=status.value if status else "", assigned_to=assigned_to,
    )


@router.post("", response_model=AssetChangeResponse, status_code=201)
def create_asset(data: AssetCreate, db: Session = Depends(get_db)):
    return svc.create_asset(db, data)


@router.post("/bulk", response_model=list[AssetResponse], status_code=201)
def bulk_create_assets(data: list[AssetCreate], db: Session = Depends(get_db)):
    return svc.bulk_create_assets(db, data)


@router.post("/mass-update", response_model=CascadeReport)
def mass_update_assets(data: MassUpdateRequest, db: Session = Depends(get_db)):
    changes = data.changes.model_dump(mode="json", exclude_unset=True)
    return cascade_svc.mass_update_assets(db, data.asset_ids, changes)["cascade"]


@router.get("/{asset_id}", response_model=AssetResponse)
def get_asset(asset_id: int, db: Session = Depends(get_db)):
    return svc.get_asset(db, asset_id)


@router.put("/{asset_id}", response_model=AssetChangeResponse)
def update_asset(asset_id: int, data: AssetUpdate, db: Session = Depends(get_db)):
    return cascade_svc.update_asset(db, asset_id, data.model_dump(exclude_unset=True))


@router.delete("/{asset_id}", status_code=204)
def delete_asset(asset_id: int, db: Session = Depends(get_db)):
    svc.delete_asset(db, asset_id)


@router.post("/{asset_id}/assign", response_model=AssetChangeResponse)
def assign_asset(asset_id: int, data: AssignRequest, db: Session = Depends(get_db)):
    return cascade_svc.assign_asset(db, asset_id, data.employee_id)


@router.post("/{asset_id}/unassign", response_model=AssetChangeResponse)
def unassign_asset(asset_id: int, db: Session = Depends(get_db)):
    return cascade_svc.unassign_asset(db, asset_id)


@router.post("/{asset_id}/retire", response_model=AssetChangeResponse)
def retire_asset(asset_id: int, data: RetireRequest, db: Session = Depends(get_db)):
    return cascade_svc.set_asset_retired(db, asset_id, data.kind.value)


@router.post("/{asset_id}/restore", response_model=AssetChangeResponse)
def restore_asset(asset_id: int, db: Session = Depends(get_db)):
    return cascade_svc.restore_asset(db, asset_id)


@router.post("/{asset_id}/comments", response_model=AssetResponse, status_code=201)
def add_comment(asset_id: int, data: CommentCreate, db: Session = Depends(get_db)):
    return svc.add_asset_comment(db, asset_id, data.text)
