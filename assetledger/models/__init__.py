from assetledger.models.employee import Employee, EmployeeStatus
from assetledger.models.asset import Asset, AssetStatus, Ownership, RETIRED_STATUSES
from assetledger.models.consumable import Consumable, IssueStatus
from assetledger.models.software import Software
from assetledger.models.cascade import CascadeRun

__all__ = [
    "Employee", "EmployeeStatus",
    "Asset", "AssetStatus", "Ownership", "RETIRED_STATUSES",
    "Consumable", "IssueStatus",
    "Software",
    "CascadeRun",
]
