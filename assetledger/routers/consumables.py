from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from assetledger.database import get_db
from assetledger.schemas.consumable import (
    ConsumableCreate,
    ConsumableUpdate,
    ConsumableResponse,
    ConsumableChangeResponse,
    IssueRequest,
    RestockRequest,
)
from assetledger.schemas.pagination import Page
import assetledger.services.consumable_service as svc
import assetledger.services.cascade_service as cascade_svc

router = APIRouter(prefix="/api/consumables", tags=["consumables"])


@router.get("", response_model=Page[ConsumableResponse])
def list_consumables(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    search: str = Query(""),
    category: str = Query(""),
    db: Session = Depends(get_db),
):
    return svc.get_consumables(db, page=page, size=size, search=search, category=category)


@router.post("", response_model=ConsumableResponse, status_code=201)
def create_consumable(data: ConsumableCreate, db: Session = Depends(get_db)):
    return svc.create_consumable(db, data)


@router.get("/{consumable_id}", response_model=ConsumableResponse)
def get_consumable(consumable_id: int, db: Session = Depends(get_db)):
    return svc.get_consumable(db, consumable_id)


@router.put("/{consumable_id}", response_model=ConsumableResponse)
def update_consumable(consumable_id: int, data: ConsumableUpdate, db: Session = Depends(get_db)):
    return svc.update_consumable(db, consumable_id, data)


@router.delete("/{consumable_id}", status_code=204)
def delete_consumable(consumable_id: int, db: Session = Depends(get_db)):
    svc.delete_consumable(db, consumable_id)


@router.post("/{consumable_id}/issue", response_model=ConsumableChangeResponse, status_code=201)
def issue_consumable(consumable_id: int, data: IssueRequest, db: Session = Depends(get_db)):
    return cascade_svc.issue_consumable(db, consumable_id, data.employee_id, data.quantity, data.remarks)


@router.post("/{consumable_id}/issues/{issue_id}/revoke", response_model=ConsumableChangeResponse)
def revoke_issue(consumable_id: int, issue_id: str, db: Session = Depends(get_db)):
    return cascade_svc.revoke_consumable_issue(db, consumable_id, issue_id)


@router.post("/{consumable_id}/restock", response_model=ConsumableResponse)
def restock_consumable(consumable_id: int, data: RestockRequest, db: Session = Depends(get_db)):
    return svc.restock_consumable(db, consumable_id, data.amount)
