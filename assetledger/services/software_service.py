from sqlalchemy import select
from sqlalchemy.orm import Session
from assetledger.models.software import Software
from assetledger.schemas.software import SoftwareCreate
from assetledger.services import cascade_service as cascades
from assetledger.services import ledger_service as ledger
from assetledger.store import RecordStore


def get_software_list(db: Session, search: str = "") -> list[Software]:
    query = select(Software)
    if search:
        query = query.where(Software.name.ilike(f"%{search}%"))
    return list(db.scalars(query.order_by(Software.name)).all())


def get_software(db: Session, software_id: int) -> Software:
    return RecordStore(db, Software).require(software_id)


def create_software(db: Session, data: SoftwareCreate) -> dict:
    assignees = cascades.check_license_assignees(db, data.assigned_to, data.total_licenses)
    software = Software(
        **data.model_dump(exclude={"assigned_to"}),
        assigned_to=sorted(e.id for e in assignees),
        audit_log=[],
    )
    software.audit_log = ledger.append_entry(
        [], ledger.new_entry("Created", f"License created with {data.total_licenses} seat(s)"),
    )
    software = RecordStore(db, Software).insert(software)
    report = cascades.start_cascade(
        db, "software_create", software.id, cascades.license_comments(software, assignees, []),
    )
    return {"software": get_software(db, software.id), "cascade": report}


def delete_software(db: Session, software_id: int) -> None:
    store = RecordStore(db, Software)
    store.delete(store.require(software_id))
