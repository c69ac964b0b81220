import enum
from datetime import datetime
from pydantic import BaseModel, Field, model_validator
from assetledger.models.asset import AssetStatus, Ownership
from assetledger.schemas.cascade import CascadeReport
from assetledger.schemas.ledger import Comment, Entry


class SettableStatus(str, enum.Enum):
    """Statuses a caller may request. Assigned is always derived from the assignee."""

    available = "Available"
    donated = "Donated"
    e_waste = "E-Waste"


class RetiredKind(str, enum.Enum):
    donated = "Donated"
    e_waste = "E-Waste"


class AssetBase(BaseModel):
    asset_tag: str = Field(..., min_length=1, max_length=64)
    serial_number: str = Field(..., min_length=1, max_length=128)
    make: str | None = None
    model: str | None = None
    asset_type: str | None = None
    ownership: Ownership = Ownership.own
    purchase_from: str | None = None
    processor: str | None = None
    ram: str | None = None
    storage: str | None = None


class AssetCreate(AssetBase):
    assigned_to: int | None = None
    status: SettableStatus | None = None


class AssetUpdate(BaseModel):
    asset_tag: str | None = None
    serial_number: str | None = None
    make: str | None = None
    model: str | None = None
    asset_type: str | None = None
    ownership: Ownership | None = None
    purchase_from: str | None = None
    processor: str | None = None
    ram: str | None = None
    storage: str | None = None
    assigned_to: int | None = None
    status: SettableStatus | None = None


class AssignRequest(BaseModel):
    employee_id: int


class RetireRequest(BaseModel):
    kind: RetiredKind


class MassUpdateFields(BaseModel):
    status: SettableStatus | None = None
    asset_type: str | None = None
    ownership: Ownership | None = None
    purchase_from: str | None = None
    processor: str | None = None
    ram: str | None = None
    storage: str | None = None


class MassUpdateRequest(BaseModel):
    asset_ids: list[int] = Field(..., min_length=1)
    changes: MassUpdateFields

    @model_validator(mode="after")
    def _changes_not_empty(self):
        if not self.changes.model_dump(exclude_unset=True):
            raise ValueError("changes must set at least one field")
        return self


class AssetResponse(AssetBase):
    id: int
    status: AssetStatus
    assigned_to: int | None
    comments: list[Comment]
    audit_log: list[Entry]
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AssetChangeResponse(BaseModel):
    asset: AssetResponse
    cascade: CascadeReport
