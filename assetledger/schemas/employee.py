from datetime import datetime, date
from pydantic import BaseModel, Field
from assetledger.models.employee import EmployeeStatus
from assetledger.schemas.cascade import CascadeReport
from assetledger.schemas.ledger import Comment, Entry


class EmployeeBase(BaseModel):
    employee_code: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    department: str | None = None
    designation: str | None = None
    email: str | None = None
    phone: str | None = None
    joining_date: date | None = None


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(BaseModel):
    # status and exit fields change only through the exit cascade
    employee_code: str | None = None
    name: str | None = None
    department: str | None = None
    designation: str | None = None
    email: str | None = None
    phone: str | None = None
    joining_date: date | None = None


class EmployeeExitRequest(BaseModel):
    exit_date: date
    exit_reason: str = Field(..., min_length=1, max_length=255)
    notes: str | None = None


class BulkDeleteRequest(BaseModel):
    employee_ids: list[int] = Field(..., min_length=1)


class EmployeeResponse(EmployeeBase):
    id: int
    status: EmployeeStatus
    exit_date: date | None
    exit_reason: str | None
    comments: list[Comment]
    audit_log: list[Entry]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EmployeeExitResponse(BaseModel):
    employee: EmployeeResponse
    cascade: CascadeReport
