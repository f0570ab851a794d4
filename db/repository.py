"""
Thin table-level CRUD over SQLAlchemy sessions.

This is the "remote data collaborator": every call takes a wire table name and
plain column dictionaries and returns the persisted row as a dictionary, or
raises :class:`RemoteStoreError`.
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from db.engine import db_path, get_engine, init_db
from db.models import TABLES

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

_engine = None
_SessionLocal = None
_engine_path: Optional[Path] = None


class RemoteStoreError(RuntimeError):
    """A read or write the backing store rejected or failed."""

    def __init__(self, message: str, *, table: str | None = None, code: str = "error"):
        super().__init__(message)
        self.table = table
        self.code = code


class RecordMissing(RemoteStoreError):
    def __init__(self, table: str, row_id: str):
        super().__init__(f"No row {row_id!r} in {table}", table=table, code="not_found")
        self.row_id = row_id


class DuplicateRecord(RemoteStoreError):
    def __init__(self, table: str, detail: str):
        super().__init__(f"Duplicate row in {table}: {detail}", table=table, code="duplicate")


@contextmanager
def session_scope():
    """
    Provide a transactional session bound to the current database file.

    If ``MATRI_DB_PATH`` (or, without it, the working directory) changed since the
    last call, the engine and session factory are rebuilt and the tables created
    before yielding. Commits on success, rolls back and re-raises on error, and
    always closes the session.
    """
    global _engine, _SessionLocal, _engine_path

    desired_path = db_path()
    if _engine is None or desired_path != _engine_path:
        _engine = get_engine(desired_path)
        _SessionLocal = sessionmaker(bind=_engine, expire_on_commit=False)
        _engine_path = desired_path
        init_db(_engine)

    db = _SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _model(table: str):
    try:
        return TABLES[table]
    except KeyError:
        raise RemoteStoreError(f"Unknown table {table!r}", table=table) from None


def _as_dict(obj) -> Row:
    return {col.name: getattr(obj, col.name) for col in obj.__table__.columns}


@contextmanager
def _translate_errors(table: str, action: str):
    try:
        yield
    except RemoteStoreError:
        raise
    except IntegrityError as exc:
        logger.error("%s on %s violated a constraint: %s", action, table, exc.orig)
        if "unique" in str(exc.orig).lower():
            raise DuplicateRecord(table, str(exc.orig)) from exc
        raise RemoteStoreError(f"{action} on {table} rejected", table=table, code="constraint") from exc
    except SQLAlchemyError as exc:
        logger.error("%s on %s failed: %s", action, table, exc)
        raise RemoteStoreError(f"{action} on {table} failed", table=table) from exc


# ---------- CRUD -----------------------------------------------------

def list_by_owner(table: str, owner_id: str) -> List[Row]:
    """Return every row of ``table`` whose ``user_id`` is ``owner_id``."""
    model = _model(table)
    with _translate_errors(table, "list"), session_scope() as db:
        rows: Iterable = db.query(model).filter(model.user_id == owner_id).all()
        return [_as_dict(row) for row in rows]


def get_by_id(table: str, row_id: str) -> Optional[Row]:
    model = _model(table)
    with _translate_errors(table, "get"), session_scope() as db:
        row = db.get(model, row_id)
        return _as_dict(row) if row else None


def find_one(table: str, **filters: Any) -> Optional[Row]:
    """Return the first row matching all column ``filters``, if any."""
    model = _model(table)
    with _translate_errors(table, "find"), session_scope() as db:
        row = db.query(model).filter_by(**filters).first()
        return _as_dict(row) if row else None


def insert(table: str, values: Row) -> Row:
    """Insert one row and return it as persisted (defaults filled in)."""
    return insert_many(table, [values])[0]


def insert_many(table: str, rows: List[Row]) -> List[Row]:
    """Insert ``rows`` in a single transaction: all land or none do."""
    model = _model(table)
    with _translate_errors(table, "insert"), session_scope() as db:
        objs = [model(**values) for values in rows]
        db.add_all(objs)
        db.flush()
        return [_as_dict(obj) for obj in objs]


def update_by_id(table: str, row_id: str, values: Row) -> Row:
    """Apply ``values`` to the row ``row_id`` and return the updated row."""
    model = _model(table)
    with _translate_errors(table, "update"), session_scope() as db:
        row = db.get(model, row_id)
        if row is None:
            raise RecordMissing(table, row_id)
        for key, value in values.items():
            setattr(row, key, value)
        db.flush()
        return _as_dict(row)


def delete_by_id(table: str, row_id: str) -> None:
    model = _model(table)
    with _translate_errors(table, "delete"), session_scope() as db:
        row = db.get(model, row_id)
        if row is None:
            raise RecordMissing(table, row_id)
        db.delete(row)
