from __future__ import annotations

from sqlite3 import Connection, Row
from typing import List, Optional

from ..models import Category, Material, Project, Step

PROJECT_COLS = "project_id, project_name, estimated_hours, actual_hours, difficulty, notes"


def _to_project(row: Row) -> Project:
    return Project(
        project_id=row["project_id"],
        project_name=row["project_name"],
        estimated_hours=row["estimated_hours"],
        actual_hours=row["actual_hours"],
        difficulty=row["difficulty"],
        notes=row["notes"],
    )


def get_project(conn: Connection, project_id: int) -> Optional[Project]:
    row = conn.execute(
        f"SELECT {PROJECT_COLS} FROM project WHERE project_id=?",
        (project_id,),
    ).fetchone()
    return _to_project(row) if row else None


def list_projects(conn: Connection) -> List[Project]:
    rows = conn.execute(f"SELECT {PROJECT_COLS} FROM project ORDER BY project_name").fetchall()
    return [_to_project(r) for r in rows]


def insert_project(conn: Connection, project: Project) -> int:
    cur = conn.execute(
        "INSERT INTO project(project_name, estimated_hours, actual_hours, difficulty, notes) "
        "VALUES(?,?,?,?,?)",
        (project.project_name, project.estimated_hours, project.actual_hours, project.difficulty, project.notes),
    )
    return int(cur.lastrowid)


def update_project(conn: Connection, project: Project) -> int:
    """Full-row update keyed by project_id. Returns affected row count."""
    cur = conn.execute(
        "UPDATE project SET project_name=?, estimated_hours=?, actual_hours=?, difficulty=?, notes=? "
        "WHERE project_id=?",
        (
            project.project_name,
            project.estimated_hours,
            project.actual_hours,
            project.difficulty,
            project.notes,
            project.project_id,
        ),
    )
    return cur.rowcount


def delete_project(conn: Connection, project_id: int) -> int:
    return conn.execute("DELETE FROM project WHERE project_id=?", (project_id,)).rowcount


def list_materials_for_project(conn: Connection, project_id: int) -> List[Material]:
    rows = conn.execute(
        "SELECT material_id, project_id, material_name, num_required, cost "
        "FROM material WHERE project_id=? ORDER BY material_id",
        (project_id,),
    ).fetchall()
    return [Material(**dict(r)) for r in rows]


def list_steps_for_project(conn: Connection, project_id: int) -> List[Step]:
    rows = conn.execute(
        "SELECT step_id, project_id, step_text, step_order "
        "FROM step WHERE project_id=? ORDER BY step_order, step_id",
        (project_id,),
    ).fetchall()
    return [Step(**dict(r)) for r in rows]


def list_categories_for_project(conn: Connection, project_id: int) -> List[Category]:
    # many-to-many through project_category
    rows = conn.execute(
        "SELECT c.category_id, c.category_name FROM category c "
        "JOIN project_category pc USING (category_id) "
        "WHERE pc.project_id=? ORDER BY c.category_id",
        (project_id,),
    ).fetchall()
    return [Category(**dict(r)) for r in rows]
