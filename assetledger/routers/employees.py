from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from assetledger.database import get_db
from assetledger.models.employee import EmployeeStatus
from assetledger.schemas.asset import AssetResponse
from assetledger.schemas.cascade import CascadeReport
from assetledger.schemas.employee import (
    EmployeeCreate,
    EmployeeUpdate,
    EmployeeResponse,
    EmployeeExitRequest,
    EmployeeExitResponse,
    BulkDeleteRequest,
)
from assetledger.schemas.ledger import CommentCreate
from assetledger.schemas.pagination import Page
import assetledger.services.employee_service as svc
import assetledger.services.cascade_service as cascade_svc

router = APIRouter(prefix="/api/employees", tags=["employees"])


@router.get("", response_model=Page[EmployeeResponse])
def list_employees(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    search: str = Query(""),
    status: EmployeeStatus | None = Query(None),
    db: Session = Depends(get_db),
):
    return svc.get_employees(db, page=page, size=size, search=search, status=status.value if status else "")


@router.post("", response_model=EmployeeResponse, status_code=201)
def create_employee(data: EmployeeCreate, db: Session = Depends(get_db)):
    return svc.create_employee(db, data)


@router.post("/bulk-delete", response_model=CascadeReport)
def bulk_delete(data: BulkDeleteRequest, db: Session = Depends(get_db)):
    return cascade_svc.delete_employees(db, data.employee_ids)["cascade"]


@router.get("/{employee_id}", response_model=EmployeeResponse)
def get_employee(employee_id: int, db: Session = Depends(get_db)):
    return svc.get_employee(db, employee_id)


@router.put("/{employee_id}", response_model=EmployeeResponse)
def update_employee(employee_id: int, data: EmployeeUpdate, db: Session = Depends(get_db)):
    return svc.update_employee(db, employee_id, data)


@router.delete("/{employee_id}", response_model=CascadeReport)
def delete_employee(employee_id: int, db: Session = Depends(get_db)):
    return cascade_svc.delete_employee(db, employee_id)["cascade"]


@router.post("/{employee_id}/exit", response_model=EmployeeExitResponse)
def exit_employee(employee_id: int, data: EmployeeExitRequest, db: Session = Depends(get_db)):
    return cascade_svc.process_employee_exit(db, employee_id, data.exit_date, data.exit_reason, data.notes)


@router.post("/{employee_id}/comments", response_model=EmployeeResponse, status_code=201)
def add_comment(employee_id: int, data: CommentCreate, db: Session = Depends(get_db)):
    return svc.add_employee_comment(db, employee_id, data.text)


@router.get("/{employee_id}/assets", response_model=list[AssetResponse])
def employee_assets(employee_id: int, db: Session = Depends(get_db)):
    return svc.get_employee_assets(db, employee_id)
