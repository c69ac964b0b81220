from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from assetledger.database import get_db
from assetledger.models.cascade import CascadeRun
from assetledger.schemas.cascade import CascadeReport, CascadeRunResponse
from assetledger.store import RecordStore
import assetledger.services.cascade_service as svc

router = APIRouter(prefix="/api/cascades", tags=["cascades"])


@router.get("", response_model=list[CascadeRunResponse])
def list_runs(status: str | None = Query(None), db: Session = Depends(get_db)):
    return svc.get_runs(db, status=status)


@router.get("/{run_id}", response_model=CascadeRunResponse)
def get_run(run_id: int, db: Session = Depends(get_db)):
    return RecordStore(db, CascadeRun).require(run_id)


@router.post("/{run_id}/resume", response_model=CascadeReport)
def resume_run(run_id: int, db: Session = Depends(get_db)):
    return svc.resume_cascade(db, run_id)
