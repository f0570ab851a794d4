from .engine import Base, get_engine, init_db  # noqa: F401
from .repository import (  # noqa: F401
    RemoteStoreError,
    RecordMissing,
    DuplicateRecord,
    session_scope,
    list_by_owner,
    get_by_id,
    find_one,
    insert,
    insert_many,
    update_by_id,
    delete_by_id,
)

__all__ = [
    "Base",
    "get_engine",
    "init_db",
    "RemoteStoreError",
    "RecordMissing",
    "DuplicateRecord",
    "session_scope",
    "list_by_owner",
    "get_by_id",
    "find_one",
    "insert",
    "insert_many",
    "update_by_id",
    "delete_by_id",
]
