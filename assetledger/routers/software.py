from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from assetledger.database import get_db
from assetledger.schemas.software import (
    SoftwareCreate,
    SoftwareResponse,
    SoftwareChangeResponse,
    AssigneesRequest,
)
import assetledger.services.software_service as svc
import assetledger.services.cascade_service as cascade_svc

router = APIRouter(prefix="/api/software", tags=["software"])


@router.get("", response_model=list[SoftwareResponse])
def list_software(search: str = Query(""), db: Session = Depends(get_db)):
    return svc.get_software_list(db, search=search)


@router.post("", response_model=SoftwareChangeResponse, status_code=201)
def create_software(data: SoftwareCreate, db: Session = Depends(get_db)):
    return svc.create_software(db, data)


@router.get("/{software_id}", response_model=SoftwareResponse)
def get_software(software_id: int, db: Session = Depends(get_db)):
    return svc.get_software(db, software_id)


@router.delete("/{software_id}", status_code=204)
def delete_software(software_id: int, db: Session = Depends(get_db)):
    svc.delete_software(db, software_id)


@router.put("/{software_id}/assignees", response_model=SoftwareChangeResponse)
def set_assignees(software_id: int, data: AssigneesRequest, db: Session = Depends(get_db)):
    return cascade_svc.set_software_assignees(db, software_id, data.employee_ids)
