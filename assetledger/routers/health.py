from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
from assetledger.database import get_db
from assetledger.store import RecordStore
from assetledger.models.cascade import CascadeRun

router = APIRouter(tags=["health"])


@router.get("/api/health")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    unfinished = len(RecordStore(db, CascadeRun).get_all(CascadeRun.status.in_(("partial", "aborted"))))
    return {"status": "ok", "unfinished_cascades": unfinished}
