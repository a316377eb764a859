"""
Record access layer.

Each call opens its own connection and runs inside one explicit transaction
(db.transaction): commit on success, rollback + DbException on failure.
Nothing is kept between calls.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .db import get_conn, transaction
from .models import Project
from .repository import project_repo

logger = logging.getLogger(__name__)


def fetch_project_by_id(project_id: int) -> Optional[Project]:
    """Project with its materials, steps and categories, or None if the id is unknown."""
    with get_conn() as conn, transaction(conn):
        project = project_repo.get_project(conn, project_id)
        if project is not None:
            project.materials.extend(project_repo.list_materials_for_project(conn, project_id))
            project.steps.extend(project_repo.list_steps_for_project(conn, project_id))
            project.categories.extend(project_repo.list_categories_for_project(conn, project_id))
    return project


def fetch_all_projects() -> List[Project]:
    """All projects by name; child collections are left empty."""
    with get_conn() as conn, transaction(conn):
        return project_repo.list_projects(conn)


def insert_project(project: Project) -> Project:
    with get_conn() as conn, transaction(conn):
        project_id = project_repo.insert_project(conn, project)
    project.project_id = project_id
    logger.debug("inserted project id=%s", project_id)
    return project


def modify_project_details(project: Project) -> bool:
    with get_conn() as conn, transaction(conn):
        updated = project_repo.update_project(conn, project) == 1
    return updated


def delete_project(project_id: int) -> bool:
    with get_conn() as conn, transaction(conn):
        deleted = project_repo.delete_project(conn, project_id) == 1
    return deleted
