import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "projects_test.db"
    # Point the app to this temp DB
    os.environ["PROJECTS_DB_PATH"] = str(path)
    schema = Path(_PROJECT_ROOT / "schema.sql").read_text(encoding="utf-8")
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(schema)
        conn.commit()
    finally:
        conn.close()
    from projects.logs import ensure_log_schema
    ensure_log_schema()
    return str(path)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Safety: only ever wipe the temp DB
    assert os.environ.get("PROJECTS_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    tables = [
        "project_category",
        "material",
        "step",
        "category",
        "project",
        "operation_log",
    ]
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in tables:
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    yield


@pytest.fixture()
def seeded_project(tmp_db_path):
    """A project with two materials, two steps and two categories attached."""
    from projects.db import get_conn
    with get_conn() as conn:
        cur = conn.execute(
            "INSERT INTO project(project_name, estimated_hours, actual_hours, difficulty, notes) "
            "VALUES('Hang a door', '4.00', '3.50', 3, 'Use the new hinges')"
        )
        pid = cur.lastrowid
        conn.execute(
            "INSERT INTO material(project_id, material_name, num_required, cost) VALUES(?, 'Door hinges', 3, '12.99')",
            (pid,),
        )
        conn.execute(
            "INSERT INTO material(project_id, material_name, num_required, cost) VALUES(?, 'Screws', 20, '4.50')",
            (pid,),
        )
        conn.execute("INSERT INTO step(project_id, step_text, step_order) VALUES(?, 'Screw hinges to frame', 2)", (pid,))
        conn.execute("INSERT INTO step(project_id, step_text, step_order) VALUES(?, 'Align hinges', 1)", (pid,))
        c1 = conn.execute("INSERT INTO category(category_name) VALUES('Doors and Windows')").lastrowid
        c2 = conn.execute("INSERT INTO category(category_name) VALUES('Repairs')").lastrowid
        conn.execute("INSERT INTO category(category_name) VALUES('Gardening')")
        conn.execute("INSERT INTO project_category(project_id, category_id) VALUES(?, ?)", (pid, c1))
        conn.execute("INSERT INTO project_category(project_id, category_id) VALUES(?, ?)", (pid, c2))
    return pid
