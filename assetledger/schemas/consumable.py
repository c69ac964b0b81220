from datetime import datetime, date
from decimal import Decimal
from pydantic import BaseModel, Field
from assetledger.schemas.cascade import CascadeReport
from assetledger.schemas.ledger import Entry, IssueLogEntry


class ConsumableBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str | None = None
    unit_type: str | None = None
    purchase_date: date | None = None
    cost_per_item: Decimal | None = None
    remarks: str | None = None


class ConsumableCreate(ConsumableBase):
    quantity: int = Field(..., ge=0)


class ConsumableUpdate(BaseModel):
    # quantity moves only through issue, revoke and restock
    name: str | None = None
    category: str | None = None
    unit_type: str | None = None
    purchase_date: date | None = None
    cost_per_item: Decimal | None = None
    remarks: str | None = None


class IssueRequest(BaseModel):
    employee_id: int
    # Range checks happen in inventory_service so they map to domain errors
    quantity: int
    remarks: str | None = None


class RestockRequest(BaseModel):
    amount: int


class ConsumableResponse(ConsumableBase):
    id: int
    quantity: int
    initial_quantity: int
    issue_log: list[IssueLogEntry]
    audit_log: list[Entry]
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ConsumableChangeResponse(BaseModel):
    consumable: ConsumableResponse
    cascade: CascadeReport
