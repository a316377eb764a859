from __future__ import annotations


class DbException(Exception):
    """Any failure raised while talking to the store. The driver error, if any, is __cause__."""


class ProjectNotFoundError(DbException):
    def __init__(self, project_id):
        super().__init__(f"Project with ID={project_id} does not exist.")
        self.project_id = project_id


class InputFormatError(ValueError):
    """User input that could not be coerced to the expected type."""
