from __future__ import annotations

# projects/db.py
import logging
import os
import sqlite3
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator

import yaml

from .exceptions import DbException

logger = logging.getLogger(__name__)

# DB path resolution order:
# 1) env PROJECTS_DB_PATH (highest priority)
# 2) config.yaml test_db_path (when running under test)
# 3) config.yaml db_path
# 4) fallback: projects.db at the project root
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "projects.db")
SCHEMA_PATH = os.path.join(_PROJECT_ROOT, "schema.sql")


def _adapt_decimal(value: Decimal) -> str:
    return str(value)


def _convert_decimal(raw: bytes) -> Decimal:
    return Decimal(raw.decode("utf-8")).quantize(Decimal("0.01"))


# DECIMAL(7,2) columns round-trip as Decimal instead of float
sqlite3.register_adapter(Decimal, _adapt_decimal)
sqlite3.register_converter("DECIMAL", _convert_decimal)


def _read_config_yaml() -> dict:
    cfg_path = os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("config.yaml unreadable, using defaults: %s", e)
        return {}
    out = {}
    for k in ("db_path", "test_db_path", "log_level"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    return out


def get_db_path() -> str:
    env_path = os.environ.get("PROJECTS_DB_PATH")
    cfg = _read_config_yaml()
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and cfg.get("test_db_path"):
        path = cfg["test_db_path"]
    elif cfg.get("db_path"):
        path = cfg["db_path"]
    else:
        path = _ROOT_DB

    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


def get_log_level() -> str:
    return _read_config_yaml().get("log_level", "INFO").upper()


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Open a SQLite connection, preferring an explicit db_path over get_db_path().
    Foreign keys are on and rows come back as sqlite3.Row. Transactions are
    explicit (see transaction()); the connection is closed on every exit path.
    """
    path = db_path or get_db_path()
    try:
        conn = sqlite3.connect(
            path,
            detect_types=sqlite3.PARSE_DECLTYPES,
            isolation_level=None,
        )
    except sqlite3.Error as e:
        raise DbException(f"cannot open {path}: {e}") from e
    try:
        try:
            conn.execute("PRAGMA foreign_keys = ON;")
        except sqlite3.Error as e:
            raise DbException(f"cannot open {path}: {e}") from e
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """
    BEGIN ... COMMIT around the block. Any exception rolls back first and is
    re-raised as DbException with the original error as its cause.
    """
    try:
        conn.execute("BEGIN")
    except sqlite3.Error as e:
        raise DbException(str(e)) from e
    try:
        yield conn
    except DbException:
        conn.rollback()
        raise
    except Exception as e:
        conn.rollback()
        logger.warning("transaction rolled back: %s", e)
        raise DbException(str(e)) from e
    else:
        try:
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise DbException(str(e)) from e


def ensure_schema(db_path: str | None = None) -> None:
    with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
        ddl = f.read()
    with get_conn(db_path) as conn:
        conn.executescript(ddl)
