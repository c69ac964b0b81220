from sqlalchemy import select, func
from sqlalchemy.orm import Session
from assetledger.errors import ValidationError
from assetledger.models.consumable import Consumable
from assetledger.schemas.consumable import ConsumableCreate, ConsumableUpdate
from assetledger.schemas.pagination import Page, paginate
from assetledger.services import inventory_service as inventory
from assetledger.services import ledger_service as ledger
from assetledger.store import RecordStore


def get_consumables(db: Session, page: int = 1, size: int = 50, search: str = "", category: str = "") -> Page:
    query = select(Consumable)
    if search:
        query = query.where(Consumable.name.ilike(f"%{search}%"))
    if category:
        query = query.where(Consumable.category == category)
    total = db.scalar(select(func.count()).select_from(query.subquery()))
    rows = db.scalars(query.order_by(Consumable.name).offset((page - 1) * size).limit(size)).all()
    return paginate(rows, total, page, size)


def get_consumable(db: Session, consumable_id: int) -> Consumable:
    return RecordStore(db, Consumable).require(consumable_id)


def create_consumable(db: Session, data: ConsumableCreate) -> Consumable:
    consumable = Consumable(
        **data.model_dump(),
        initial_quantity=data.quantity,
        issue_log=[],
        audit_log=[],
    )
    consumable.audit_log = ledger.append_entry(
        [], ledger.new_entry("Created", f"Item created with {data.quantity} unit(s)"),
    )
    return RecordStore(db, Consumable).insert(consumable)


def update_consumable(db: Session, consumable_id: int, data: ConsumableUpdate) -> Consumable:
    store = RecordStore(db, Consumable)
    consumable = store.require(consumable_id)
    changes = data.model_dump(exclude_unset=True)
    if "name" in changes and changes["name"] is None:
        raise ValidationError("'name' cannot be cleared")
    entries = []
    for field, value in changes.items():
        old = getattr(consumable, field)
        if old == value:
            continue
        setattr(consumable, field, value)
        entries.append(ledger.new_entry("Updated", f"'{field}' from '{old}' to '{value}'"))
    if not entries:
        return consumable
    consumable.audit_log = ledger.append_entries(consumable.audit_log, entries)
    return store.update(consumable)


def restock_consumable(db: Session, consumable_id: int, amount: int) -> Consumable:
    store = RecordStore(db, Consumable)
    return store.update(inventory.restock(store.require(consumable_id), amount))


def delete_consumable(db: Session, consumable_id: int) -> None:
    store = RecordStore(db, Consumable)
    store.delete(store.require(consumable_id))
