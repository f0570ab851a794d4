"""SQLAlchemy engine utilities."""

import os
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


def db_path() -> Path:
    """Return the SQLite file backing the remote store.

    ``MATRI_DB_PATH`` wins; otherwise ``matri.db`` in the current working directory.
    """

    env_path = os.environ.get("MATRI_DB_PATH")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return (Path.cwd() / "matri.db").resolve()


def get_engine(path: Path | None = None) -> Engine:
    """Return an engine bound to ``path`` (defaults to :func:`db_path`)."""

    path = path or db_path()
    return create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
        echo=False,
    )


def init_db(engine: Engine) -> Engine:
    """Create any missing tables on ``engine``."""

    from db import models  # noqa: F401 – side-effect import

    Base.metadata.create_all(engine)
    return engine
