from assetledger.schemas.employee import EmployeeCreate, EmployeeUpdate, EmployeeResponse
from assetledger.schemas.asset import AssetCreate, AssetUpdate, AssetResponse
from assetledger.schemas.consumable import ConsumableCreate, ConsumableUpdate, ConsumableResponse
from assetledger.schemas.software import SoftwareCreate, SoftwareResponse
from assetledger.schemas.cascade import CascadeReport, StepResult
from assetledger.schemas.ledger import Comment, Entry, IssueLogEntry
from assetledger.schemas.pagination import Page

__all__ = [
    "EmployeeCreate", "EmployeeUpdate", "EmployeeResponse",
    "AssetCreate", "AssetUpdate", "AssetResponse",
    "ConsumableCreate", "ConsumableUpdate", "ConsumableResponse",
    "SoftwareCreate", "SoftwareResponse",
    "CascadeReport", "StepResult",
    "Comment", "Entry", "IssueLogEntry",
    "Page",
]
