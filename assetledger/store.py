"""
Record store: keyed durable storage per entity kind.

Every write commits exactly one record (or one batch for ``bulk_insert``).
There is no cross-record atomicity; cascades build on top of that guarantee
and nothing more.
"""
import logging
from contextlib import contextmanager
from typing import Generic, Iterable, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from assetledger.database import Base
from assetledger.errors import ConcurrentModification, ConflictError, NotFound, StoreUnavailable

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Base)


class RecordStore(Generic[M]):
    def __init__(self, db: Session, model: type[M]):
        self.db = db
        self.model = model

    @property
    def kind(self) -> str:
        return self.model.__name__

    def get(self, record_id) -> M | None:
        with self._reading():
            return self.db.get(self.model, record_id)

    def require(self, record_id) -> M:
        record = self.get(record_id)
        if record is None:
            raise NotFound(f"{self.kind} {record_id} not found")
        return record

    def get_all(self, *criteria, order_by=None) -> list[M]:
        query = select(self.model).where(*criteria)
        query = query.order_by(order_by if order_by is not None else self.model.id)
        with self._reading():
            return list(self.db.scalars(query).all())

    def insert(self, record: M) -> M:
        self.db.add(record)
        self._commit()
        self.db.refresh(record)
        return record

    def bulk_insert(self, records: Iterable[M]) -> list[M]:
        records = list(records)
        self.db.add_all(records)
        self._commit()
        for record in records:
            self.db.refresh(record)
        return records

    def update(self, record: M) -> M:
        self.db.add(record)
        self._commit()
        self.db.refresh(record)
        return record

    def delete(self, record: M) -> None:
        self.db.delete(record)
        self._commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError(f"{self.kind} violates a uniqueness or integrity rule") from exc
        except StaleDataError as exc:
            self.db.rollback()
            raise ConcurrentModification(f"{self.kind} was modified by another request, reload and retry") from exc
        except DBAPIError as exc:
            self.db.rollback()
            logger.error("Store write failed for %s: %s", self.kind, exc)
            raise StoreUnavailable(f"Record store unavailable while writing {self.kind}") from exc

    @contextmanager
    def _reading(self):
        try:
            yield
        except DBAPIError as exc:
            self.db.rollback()
            logger.error("Store read failed for %s: %s", self.kind, exc)
            raise StoreUnavailable(f"Record store unavailable while reading {self.kind}") from exc
