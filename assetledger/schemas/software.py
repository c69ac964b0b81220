from datetime import datetime, date
from pydantic import BaseModel, Field
from assetledger.schemas.cascade import CascadeReport
from assetledger.schemas.ledger import Entry


class SoftwareBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    version: str | None = None
    license_key: str | None = None
    expiry_date: date | None = None
    total_licenses: int = Field(0, ge=0)


class SoftwareCreate(SoftwareBase):
    assigned_to: list[int] = []


class AssigneesRequest(BaseModel):
    employee_ids: list[int]


class SoftwareResponse(SoftwareBase):
    id: int
    assigned_to: list[int]
    audit_log: list[Entry]
    created_at: datetime

    model_config = {"from_attributes": True}


class SoftwareChangeResponse(BaseModel):
    software: SoftwareResponse
    cascade: CascadeReport
