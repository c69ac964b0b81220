from datetime import datetime
from typing import Annotated, Literal, Union
from pydantic import BaseModel, Discriminator, Field, Tag, TypeAdapter, computed_field
from assetledger.models.consumable import IssueStatus


class Comment(BaseModel):
    id: str
    text: str
    date: datetime


class EmployeeRef(BaseModel):
    id: int
    name: str
    code: str | None = None


class LedgerEntry(BaseModel):
    kind: Literal["note"] = "note"
    id: str
    action: str
    date: datetime
    details: str


class AssignmentChanged(BaseModel):
    """Assignee transition with typed endpoints. The text form is rendered on read."""

    kind: Literal["assignment_changed"] = "assignment_changed"
    id: str
    action: str
    date: datetime
    from_employee: EmployeeRef | None = None
    to_employee: EmployeeRef | None = None
    reason: str | None = None

    @computed_field
    @property
    def details(self) -> str:
        if self.reason:
            return self.reason
        old_name = self.from_employee.name if self.from_employee else "Unassigned"
        new_name = self.to_employee.name if self.to_employee else "Unassigned"
        code = self.to_employee.code if self.to_employee and self.to_employee.code else "null"
        return f"'assignedTo' from '{old_name}' to '{new_name}' (Employee ID: {code})"


def _entry_kind(value) -> str:
    # Entries written before the kind tag existed are plain notes
    if isinstance(value, dict):
        return value.get("kind", "note")
    return getattr(value, "kind", "note")


Entry = Annotated[
    Union[
        Annotated[LedgerEntry, Tag("note")],
        Annotated[AssignmentChanged, Tag("assignment_changed")],
    ],
    Discriminator(_entry_kind),
]

entry_list = TypeAdapter(list[Entry])
comment_list = TypeAdapter(list[Comment])


class IssueLogEntry(BaseModel):
    id: str
    employee_id: int
    quantity: int = Field(..., ge=1)
    issue_date: datetime
    remarks: str = ""
    status: IssueStatus = IssueStatus.active


issue_list = TypeAdapter(list[IssueLogEntry])


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)
