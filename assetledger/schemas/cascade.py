from datetime import datetime
from typing import Literal
from pydantic import BaseModel


class StepResult(BaseModel):
    index: int
    op: str
    target_id: int | None
    best_effort: bool = False
    status: Literal["done", "skipped", "failed"]
    error: str | None = None
    detail: str | None = None


class CascadeReport(BaseModel):
    run_id: int | None = None
    kind: str
    status: str
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    results: list[StepResult] = []


class CascadeRunResponse(BaseModel):
    id: int
    kind: str
    subject_id: int | None
    status: str
    cursor: int
    steps: list[dict]
    results: list[StepResult | None]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
