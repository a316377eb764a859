from __future__ import annotations

# projects/services/project_svc.py
import logging
from typing import List, Optional

from .. import store
from ..exceptions import ProjectNotFoundError
from ..logs import LogContext
from ..models import Project

logger = logging.getLogger(__name__)


def add_project(project: Project, log: Optional[LogContext] = None) -> Project:
    db_project = store.insert_project(project)
    if log is not None:
        log.set_project(db_project)
        log.set_after(db_project)
    return db_project


def list_projects() -> List[Project]:
    return store.fetch_all_projects()


def get_project(project_id: int) -> Project:
    project = store.fetch_project_by_id(project_id)
    if project is None:
        logger.info("project not found: id=%s", project_id)
        raise ProjectNotFoundError(project_id)
    return project


def update_project(project: Project, log: Optional[LogContext] = None) -> None:
    """Resend every field of an existing project. Unknown ids raise ProjectNotFoundError."""
    if log is not None:
        log.set_project(project)
    if not store.modify_project_details(project):
        logger.info("update matched no project: id=%s", project.project_id)
        raise ProjectNotFoundError(project.project_id)
    if log is not None:
        log.set_after(project)


def remove_project(project_id: int, log: Optional[LogContext] = None) -> None:
    if log is not None:
        log.set_entity("PROJECT", project_id)
    if not store.delete_project(project_id):
        logger.info("delete matched no project: id=%s", project_id)
        raise ProjectNotFoundError(project_id)
