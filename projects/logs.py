import datetime as dt
import json
import time
import uuid
from typing import Optional

from .db import get_conn
from .models import Project

# One row per menu operation. Project rows keep the name next to the id so a
# deleted project is still recognisable in the history.
DDL = """
CREATE TABLE IF NOT EXISTS operation_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  user TEXT NOT NULL,
  action TEXT NOT NULL,
  entity_type TEXT,
  entity_id TEXT,
  project_name TEXT,
  before_json TEXT,
  after_json TEXT,
  result TEXT NOT NULL,
  err_msg TEXT,
  latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_log_ts ON operation_log(ts);
CREATE INDEX IF NOT EXISTS idx_log_entity ON operation_log(entity_type, entity_id);
"""


def ensure_log_schema():
    with get_conn() as conn:
        conn.executescript(DDL)


def _snapshot(obj) -> Optional[str]:
    if isinstance(obj, Project):
        obj = obj.fields()
    # Decimal hours are stored as their string form
    return json.dumps(obj, ensure_ascii=False, default=str) if obj is not None else None


class LogContext:
    """
    Audit entry for one operation, usually on a project.

    Used as a context manager: the row is written on exit with result OK, or
    ERROR plus the message when the block raised (the exception propagates).
    """

    def __init__(self, action: str, user: str = "owner"):
        self.action = action
        self.user = user
        self.start = time.perf_counter()
        self.entity_type = None
        self.entity_id = None
        self.project_name = None
        self.before = None
        self.after = None

    def set_entity(self, etype: str, eid):
        self.entity_type = etype
        self.entity_id = None if eid is None else str(eid)

    def set_project(self, project: Project):
        self.set_entity("PROJECT", project.project_id)
        self.project_name = project.project_name

    def set_before(self, obj): self.before = obj
    def set_after(self, obj): self.after = obj

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc is None:
            self.write("OK")
        else:
            self.write("ERROR", str(exc))
        return False

    def write(self, result: str = "OK", err: Optional[str] = None):
        rec = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "user": self.user,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "project_name": self.project_name,
            "before_json": _snapshot(self.before),
            "after_json": _snapshot(self.after),
            "result": result,
            "err_msg": err,
            "latency_ms": int((time.perf_counter() - self.start) * 1000),
        }
        with get_conn() as conn:
            conn.execute(
                """INSERT INTO operation_log
                (ts,user,action,entity_type,entity_id,project_name,before_json,after_json,result,err_msg,latency_ms)
                VALUES(:ts,:user,:action,:entity_type,:entity_id,:project_name,:before_json,:after_json,:result,:err_msg,:latency_ms)""",
                rec
            )


def recent_logs(limit: int = 20, project_id: Optional[int] = None) -> list[dict]:
    """Newest first; optionally only the history of one project."""
    sql = "SELECT * FROM operation_log"
    params: list = []
    if project_id is not None:
        sql += " WHERE entity_type='PROJECT' AND entity_id=?"
        params.append(str(project_id))
    sql += " ORDER BY id DESC LIMIT ?"
    params.append(limit)
    with get_conn() as conn:
        return [dict(r) for r in conn.execute(sql, params).fetchall()]
