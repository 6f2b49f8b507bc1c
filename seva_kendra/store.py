# seva_kendra/store.py

"""Persistence behind a small, backend-agnostic interface.

Records travel as plain dicts keyed by snake_case field names.  Every
collection has an integer ``id`` generated by the store.  Uniqueness of
``users.phone`` and ``requests.registration_no`` is enforced here, on
write, and surfaces as :class:`ConflictError`.
"""

import itertools
import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Protocol

from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .database import init_db
from .exceptions import ConflictError, StoreError
from .models import Service, ServiceRequest, User

logger = logging.getLogger(__name__)

USERS = "users"
SERVICES = "services"
REQUESTS = "requests"

UNIQUE_FIELDS = {
    USERS: ("phone",),
    SERVICES: (),
    REQUESTS: ("registration_no",),
}

Record = Dict[str, Any]


class Store(Protocol):
    def setup(self) -> None: ...

    def ping(self) -> None: ...

    def insert(self, collection: str, record: Record) -> Record: ...

    def get(self, collection: str, key: int) -> Optional[Record]: ...

    def find_one(self, collection: str, **criteria: Any) -> Optional[Record]: ...

    def find(
        self,
        collection: str,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        **criteria: Any,
    ) -> List[Record]: ...

    def update(self, collection: str, key: int, changes: Record) -> Optional[Record]: ...

    def count(self, collection: str, **criteria: Any) -> int: ...


def _conflict(collection: str, field: str) -> ConflictError:
    return ConflictError(f"A {collection[:-1]} with this {field} already exists", field=field)


# ────────────────────────────── IN-MEMORY ──────────────────────────────

class MemoryStore:
    """Non-durable store for tests and local runs; safe across threads."""

    def __init__(self):
        self._lock = threading.Lock()
        self._data: Dict[str, Dict[int, Record]] = {name: {} for name in UNIQUE_FIELDS}
        self._ids = {name: itertools.count(1) for name in UNIQUE_FIELDS}

    def setup(self) -> None:
        pass

    def ping(self) -> None:
        pass

    def _table(self, collection: str) -> Dict[int, Record]:
        try:
            return self._data[collection]
        except KeyError:
            raise StoreError(f"Unknown collection {collection!r}")

    def _check_unique(self, collection: str, record: Record, skip_id: Optional[int] = None) -> None:
        for field in UNIQUE_FIELDS[collection]:
            value = record.get(field)
            if value is None:
                continue
            for row in self._data[collection].values():
                if row["id"] != skip_id and row.get(field) == value:
                    raise _conflict(collection, field)

    def insert(self, collection: str, record: Record) -> Record:
        with self._lock:
            table = self._table(collection)
            self._check_unique(collection, record)
            row = dict(record)
            row["id"] = next(self._ids[collection])
            table[row["id"]] = row
            return dict(row)

    def get(self, collection: str, key: int) -> Optional[Record]:
        with self._lock:
            row = self._table(collection).get(key)
            return dict(row) if row is not None else None

    def find_one(self, collection: str, **criteria: Any) -> Optional[Record]:
        rows = self.find(collection, order_by="id", **criteria)
        return rows[0] if rows else None

    def find(self, collection, *, order_by=None, descending=False, limit=None, **criteria):
        with self._lock:
            rows = [
                dict(row)
                for row in self._table(collection).values()
                if all(row.get(k) == v for k, v in criteria.items())
            ]
        if order_by:
            rows.sort(key=lambda r: (r.get(order_by), r["id"]), reverse=descending)
        if limit:
            rows = rows[:limit]
        return rows

    def update(self, collection: str, key: int, changes: Record) -> Optional[Record]:
        with self._lock:
            table = self._table(collection)
            row = table.get(key)
            if row is None:
                return None
            candidate = {**row, **changes, "id": key}
            self._check_unique(collection, candidate, skip_id=key)
            table[key] = candidate
            return dict(candidate)

    def count(self, collection: str, **criteria: Any) -> int:
        return len(self.find(collection, **criteria))


# ────────────────────────────── SQLALCHEMY ──────────────────────────────

MODELS = {
    USERS: User,
    SERVICES: Service,
    REQUESTS: ServiceRequest,
}


def _as_utc(value: Any) -> Any:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_record(obj) -> Record:
    return {c.name: _as_utc(getattr(obj, c.name)) for c in obj.__table__.columns}


def _conditions(model, criteria: Record) -> list:
    return [getattr(model, field) == value for field, value in criteria.items()]


class SqlStore:
    """SQLAlchemy-backed store, one session per operation."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @property
    def engine(self):
        return self._session_factory.kw["bind"]

    def setup(self) -> None:
        try:
            init_db(self.engine)
        except SQLAlchemyError:
            logger.exception("Could not create database schema")
            raise StoreError()

    @contextmanager
    def _session(self, collection: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except IntegrityError as exc:
            db.rollback()
            raise self._integrity_conflict(collection, exc)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Store operation on %s failed", collection)
            raise StoreError()
        finally:
            db.close()

    @staticmethod
    def _integrity_conflict(collection: str, exc: IntegrityError) -> ConflictError:
        fields = UNIQUE_FIELDS.get(collection, ())
        detail = str(exc.orig).lower()
        for field in fields:
            if field in detail:
                return _conflict(collection, field)
        logger.warning("Integrity error on %s: %s", collection, exc.orig)
        return ConflictError("Record violates a store constraint")

    @staticmethod
    def _model(collection: str):
        try:
            return MODELS[collection]
        except KeyError:
            raise StoreError(f"Unknown collection {collection!r}")

    def ping(self) -> None:
        with self._session("ping") as db:
            db.execute(text("SELECT 1"))

    def insert(self, collection: str, record: Record) -> Record:
        model = self._model(collection)
        with self._session(collection) as db:
            obj = model(**{k: v for k, v in record.items() if k != "id"})
            db.add(obj)
            db.commit()
            db.refresh(obj)
            return _to_record(obj)

    def get(self, collection: str, key: int) -> Optional[Record]:
        model = self._model(collection)
        with self._session(collection) as db:
            obj = db.get(model, key)
            return _to_record(obj) if obj is not None else None

    def find_one(self, collection: str, **criteria: Any) -> Optional[Record]:
        rows = self.find(collection, order_by="id", limit=1, **criteria)
        return rows[0] if rows else None

    def find(self, collection, *, order_by=None, descending=False, limit=None, **criteria):
        model = self._model(collection)
        stmt = select(model).where(*_conditions(model, criteria))
        if order_by:
            columns = [getattr(model, order_by), model.id]
            stmt = stmt.order_by(*(c.desc() if descending else c.asc() for c in columns))
        if limit:
            stmt = stmt.limit(limit)
        with self._session(collection) as db:
            return [_to_record(obj) for obj in db.scalars(stmt).all()]

    def update(self, collection: str, key: int, changes: Record) -> Optional[Record]:
        model = self._model(collection)
        with self._session(collection) as db:
            obj = db.get(model, key)
            if obj is None:
                return None
            for field, value in changes.items():
                if field != "id":
                    setattr(obj, field, value)
            db.commit()
            db.refresh(obj)
            return _to_record(obj)

    def count(self, collection: str, **criteria: Any) -> int:
        model = self._model(collection)
        stmt = select(func.count()).select_from(model).where(*_conditions(model, criteria))
        with self._session(collection) as db:
            return db.scalar(stmt)
