"""
Asset assignment state machine.

An asset is in exactly one of three states, which makes the illegal
status/assignee combinations unrepresentable:

    Available | Assigned(employee_id) | Retired(kind)

The Asset row still stores ``status`` and ``assigned_to`` as two columns;
``apply_state`` is the only code that writes them and always writes both.
"""
from dataclasses import dataclass
from datetime import datetime

from assetledger.errors import ValidationError
from assetledger.models.asset import Asset, AssetStatus, RETIRED_STATUSES
from assetledger.models.employee import Employee
from assetledger.services import ledger_service as ledger

# Descriptive columns diffed on every edit, in display order
TRACKED_FIELDS = (
    "asset_tag", "serial_number", "make", "model", "asset_type", "ownership",
    "purchase_from", "processor", "ram", "storage",
)


@dataclass(frozen=True)
class Available:
    @property
    def status(self) -> AssetStatus:
        return AssetStatus.available


@dataclass(frozen=True)
class Assigned:
    employee_id: int

    @property
    def status(self) -> AssetStatus:
        return AssetStatus.assigned


@dataclass(frozen=True)
class Retired:
    kind: AssetStatus  # donated or e_waste

    def __post_init__(self):
        if self.kind not in RETIRED_STATUSES:
            raise ValidationError(f"'{self.kind.value}' is not a retirement status")

    @property
    def status(self) -> AssetStatus:
        return self.kind


AssetState = Available | Assigned | Retired


def as_status(value) -> AssetStatus:
    """Coerce request enums or raw strings to AssetStatus by value."""
    return AssetStatus(getattr(value, "value", value))


def assignee_of(state: AssetState) -> int | None:
    return state.employee_id if isinstance(state, Assigned) else None


def state_of(asset: Asset) -> AssetState:
    if asset.assigned_to is not None:
        return Assigned(asset.assigned_to)
    status = as_status(asset.status)
    if status in RETIRED_STATUSES:
        return Retired(status)
    return Available()


def apply_state(asset: Asset, state: AssetState) -> Asset:
    asset.status = state.status
    asset.assigned_to = assignee_of(state)
    return asset


def initial_state(assigned_to: int | None, status: str | None) -> AssetState:
    """State for a brand new asset: an assignee wins, otherwise the requested status."""
    if assigned_to is not None:
        return Assigned(assigned_to)
    if status is not None and as_status(status) in RETIRED_STATUSES:
        return Retired(as_status(status))
    return Available()


# ─── Transitions ──────────────────────────────────────────────────────────────

def assign(state: AssetState, employee_id: int) -> AssetState:
    if isinstance(state, Retired):
        raise ValidationError(
            f"Asset is retired ({state.kind.value}); restore it before assigning"
        )
    return Assigned(employee_id)


def unassign(state: AssetState) -> AssetState:
    if isinstance(state, Assigned):
        return Available()
    return state


def retire(state: AssetState, kind: AssetStatus) -> AssetState:
    return Retired(as_status(kind))


def restore(state: AssetState) -> AssetState:
    if isinstance(state, Assigned):
        raise ValidationError("Asset is assigned; unassign it instead of restoring")
    return Available()


def state_for_edit(current: AssetState, changes: dict) -> AssetState:
    """
    Target state for an edit carrying ``assigned_to`` and/or ``status``.

    ``changes`` holds only the keys the caller actually sent. A supplied
    assignee always wins over a supplied status.
    """
    status = changes.get("status")
    if status is not None:
        try:
            status = as_status(status)
        except ValueError:
            raise ValidationError(f"Unknown asset status '{status}'") from None
        if status == AssetStatus.assigned:
            raise ValidationError("'Assigned' follows from assigned_to; set the assignee instead")
    retiring = status in RETIRED_STATUSES

    if "assigned_to" in changes:
        employee_id = changes["assigned_to"]
        if employee_id is not None:
            if isinstance(current, Retired) and status == AssetStatus.available:
                current = restore(current)
            return assign(current, employee_id)
        if retiring:
            return retire(current, status)
        if isinstance(current, Retired) and status != AssetStatus.available:
            return current
        return Available()

    if status is None:
        return current
    if retiring:
        return retire(current, status)
    if isinstance(current, Assigned):
        raise ValidationError(
            "Status of an assigned asset is derived from its assignee; clear assigned_to instead"
        )
    return restore(current)


# ─── Diff ─────────────────────────────────────────────────────────────────────

def snapshot(asset: Asset) -> dict:
    return {field: _plain(getattr(asset, field)) for field in TRACKED_FIELDS}


def _plain(value):
    return value.value if hasattr(value, "value") else value


def diff_asset(
    before: dict,
    after: Asset,
    old_state: AssetState,
    new_state: AssetState,
    old_employee: Employee | None = None,
    new_employee: Employee | None = None,
    at: datetime | None = None,
) -> list:
    """One ledger entry per logical change between ``before`` and ``after``."""
    entries = []
    for field in TRACKED_FIELDS:
        old, new = before.get(field), _plain(getattr(after, field))
        if old != new:
            entries.append(ledger.new_entry("Updated", f"'{field}' from '{old}' to '{new}'", at=at))

    if assignee_of(old_state) != assignee_of(new_state):
        entries.append(ledger.assignment_changed(old_employee, new_employee, at=at))

    # Assignment-implied status flips are covered by the entry above
    if old_state.status != new_state.status and (
        isinstance(old_state, Retired) or isinstance(new_state, Retired)
    ):
        entries.append(ledger.new_entry(
            "Updated", f"'status' from '{old_state.status.value}' to '{new_state.status.value}'", at=at,
        ))
    return entries
