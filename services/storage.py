"""
Storage backends.

Two interchangeable implementations of the same record store:
- SqlStorage: durable, on SQLAlchemy (a SQLite file unless DATABASE_URL says otherwise).
- MemoryStorage: volatile, plain dicts, for short-lived processes and tests.

Records cross this boundary as plain dicts keyed by column name. Both backends
return copies, so callers can never mutate stored state in place.
"""
import copy
import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.session import Base, build_engine, build_session_factory
from models.assessment import Assessment
from models.assessment_response import AssessmentResponse
from models.candidate import Candidate
from models.job import Job
from models.timeline import TimelineEntry
from services.errors import StorageError

logger = logging.getLogger(__name__)

# Collection name -> ORM model. Also defines the export layout.
COLLECTIONS = {
    "jobs": Job,
    "candidates": Candidate,
    "assessments": Assessment,
    "timeline": TimelineEntry,
    "responses": AssessmentResponse,
}


class StorageBackend(ABC):
    """Contract shared by every backend."""

    collections: Tuple[str, ...] = tuple(COLLECTIONS)

    @abstractmethod
    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def put(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert or replace the record with the same id."""

    @abstractmethod
    def bulk_insert(self, collection: str, records: Iterable[Dict[str, Any]]) -> int:
        """Insert new records; fails as a whole if any id already exists."""

    @abstractmethod
    def all(self, collection: str) -> List[Dict[str, Any]]:
        """Every record in the collection, ordered by id."""

    @abstractmethod
    def find(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def count(self, collection: str) -> int:
        ...

    @abstractmethod
    def clear(self, collection: Optional[str] = None) -> None:
        """Remove every record from one collection, or from all of them."""

    @abstractmethod
    def transaction(self):
        """
        Context manager grouping writes into one all-or-nothing unit.
        Nested use joins the outermost transaction.
        """

    def _model(self, collection: str):
        model = COLLECTIONS.get(collection)
        if model is None:
            raise ValueError(f"Unknown collection: {collection}")
        return model

    def _check_field(self, collection: str, field: str) -> None:
        model = self._model(collection)
        if field not in model.__table__.columns:
            raise ValueError(f"Invalid filter column '{field}' for {collection}")

    @staticmethod
    def _check_id(record: Dict[str, Any]) -> str:
        record_id = record.get("id")
        if not record_id:
            raise StorageError("Record has no id")
        return record_id


class MemoryStorage(StorageBackend):
    """Volatile store. Rolls back through an undo log kept for the open transaction."""

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in COLLECTIONS}
        self._undo: Optional[List[Tuple[str, str, Optional[Dict[str, Any]]]]] = None

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._undo is not None:
            yield
            return

        self._undo = []
        try:
            yield
        except BaseException:
            for collection, record_id, previous in reversed(self._undo):
                if previous is None:
                    self._data[collection].pop(record_id, None)
                else:
                    self._data[collection][record_id] = previous
            raise
        finally:
            self._undo = None

    def _remember(self, collection: str, record_id: str) -> None:
        if self._undo is not None:
            self._undo.append((collection, record_id, self._data[collection].get(record_id)))

    def get(self, collection, record_id):
        self._model(collection)
        record = self._data[collection].get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def put(self, collection, record):
        self._model(collection)
        record_id = self._check_id(record)
        stored = copy.deepcopy(dict(record))
        with self.transaction():
            self._remember(collection, record_id)
            self._data[collection][record_id] = stored
        return copy.deepcopy(stored)

    def bulk_insert(self, collection, records):
        self._model(collection)
        inserted = 0
        with self.transaction():
            for record in records:
                record_id = self._check_id(record)
                if record_id in self._data[collection]:
                    raise StorageError(f"Duplicate id '{record_id}' in {collection}")
                self._remember(collection, record_id)
                self._data[collection][record_id] = copy.deepcopy(dict(record))
                inserted += 1
        return inserted

    def all(self, collection):
        self._model(collection)
        rows = self._data[collection]
        return [copy.deepcopy(rows[key]) for key in sorted(rows)]

    def find(self, collection, field, value):
        self._check_field(collection, field)
        return [r for r in self.all(collection) if r.get(field) == value]

    def count(self, collection):
        self._model(collection)
        return len(self._data[collection])

    def clear(self, collection=None):
        names = [collection] if collection else list(COLLECTIONS)
        with self.transaction():
            for name in names:
                self._model(name)
                for record_id in list(self._data[name]):
                    self._remember(name, record_id)
                self._data[name].clear()


class SqlStorage(StorageBackend):
    """Durable store on SQLAlchemy. Each operation outside a transaction commits on its own."""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.engine = build_engine(database_url)
        self._session_factory = build_session_factory(self.engine)
        self._local = threading.local()
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            logger.exception("Database error during initialization")
            raise StorageError(f"Could not initialise database: {e}") from e

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if getattr(self._local, "session", None) is not None:
            yield
            return

        session = self._session_factory()
        self._local.session = session
        try:
            yield
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Storage operation failed, rolled back")
            raise StorageError(str(e)) from e
        except BaseException:
            session.rollback()
            raise
        finally:
            self._local.session = None
            session.close()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with self.transaction():
            yield self._local.session

    def get(self, collection, record_id):
        model = self._model(collection)
        with self._session() as db:
            row = db.get(model, record_id)
            return row.to_dict() if row else None

    def put(self, collection, record):
        model = self._model(collection)
        self._check_id(record)
        with self._session() as db:
            row = db.merge(model.from_dict(copy.deepcopy(dict(record))))
            db.flush()
            return row.to_dict()

    def bulk_insert(self, collection, records):
        model = self._model(collection)
        rows = [model.from_dict(copy.deepcopy(dict(r))) for r in records]
        for row in rows:
            if not row.id:
                raise StorageError("Record has no id")
        with self._session() as db:
            db.add_all(rows)
            db.flush()
        return len(rows)

    def all(self, collection):
        model = self._model(collection)
        with self._session() as db:
            return [row.to_dict() for row in db.query(model).order_by(model.id).all()]

    def find(self, collection, field, value):
        self._check_field(collection, field)
        model = self._model(collection)
        with self._session() as db:
            rows = (
                db.query(model)
                .filter(getattr(model, field) == value)
                .order_by(model.id)
                .all()
            )
            return [row.to_dict() for row in rows]

    def count(self, collection):
        model = self._model(collection)
        with self._session() as db:
            return db.query(model).count()

    def clear(self, collection=None):
        names = [collection] if collection else list(COLLECTIONS)
        with self._session() as db:
            for name in names:
                db.query(self._model(name)).delete()


def create_storage(persistent: bool, database_url: Optional[str] = None) -> StorageBackend:
    """
    Pick the backend from an explicit capability flag.
    persistent=True needs a database_url; False gives a fresh in-memory store.
    """
    if persistent:
        if not database_url:
            raise ValueError("A database URL is required for persistent storage.")
        logger.info("Using durable storage at %s", database_url)
        return SqlStorage(database_url)
    logger.info("Using volatile in-memory storage")
    return MemoryStorage()
