#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DIY Projects (SQLite)

Commands:
  init                Create tables and seed categories from CSV
  menu                Interactive menu: add / list / select / update / delete projects (default)
  logs                Print the most recent operation log entries

Notes:
- Materials, steps and categories are shown on the selected project but are not edited here.
- Updates resend every field; press Enter at a prompt to keep the current value.
"""
from __future__ import annotations

import argparse
import logging
import os
from decimal import Decimal
from typing import Callable, Optional

import pandas as pd
from pydantic import BaseModel, ValidationError, condecimal

from projects.db import ensure_schema, get_log_level
from projects.exceptions import DbException, InputFormatError
from projects.logs import LogContext, ensure_log_schema, recent_logs
from projects.models import Project
from projects.services import project_svc
from projects.services.seed_svc import seed_load

_BASE = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CATEGORIES_CSV = os.path.join(_BASE, "seeds", "categories.csv")

Hours = condecimal(max_digits=7, decimal_places=2)

OPERATIONS = [
    "1) Add a project",
    "2) List projects",
    "3) Select a project",
    "4) Update project details",
    "5) Delete a project",
]


class ProjectForm(BaseModel):
    project_name: str
    estimated_hours: Optional[Hours] = None
    actual_hours: Optional[Hours] = None
    difficulty: Optional[int] = None
    notes: Optional[str] = None


def _format_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


def parse_project(raw: dict, project_id: Optional[int] = None) -> Project:
    """Coerce raw menu strings into a Project. Hours are scaled to 2 places."""
    try:
        form = ProjectForm.model_validate(raw)
    except ValidationError as e:
        raise InputFormatError(_format_errors(e)) from e
    data = form.model_dump()
    for k in ("estimated_hours", "actual_hours"):
        if data[k] is not None:
            data[k] = Decimal(data[k]).quantize(Decimal("0.01"))
    return Project(project_id=project_id, **data)


def describe(project: Project) -> str:
    lines = [
        f"   ID={project.project_id}",
        f"   name={project.project_name}",
        f"   estimatedHours={project.estimated_hours}",
        f"   actualHours={project.actual_hours}",
        f"   difficulty={project.difficulty}",
        f"   notes={project.notes}",
        "   Materials:",
    ]
    lines += [f"      {m.material_name} x{m.num_required} @ {m.cost}" for m in project.materials]
    lines.append("   Steps:")
    lines += [f"      {s.step_order}. {s.step_text}" for s in project.steps]
    lines.append("   Categories:")
    lines += [f"      {c.category_name}" for c in project.categories]
    return "\n".join(lines)


class ProjectsMenu:
    """Numbered menu over project_svc. Errors are reported and the loop continues."""

    def __init__(self, read: Callable[[str], str] = input, write: Callable[[str], None] = print):
        self.read = read
        self.write = write
        self.cur_project: Optional[Project] = None

    # ---------------- input ----------------

    def get_string_input(self, prompt: str) -> Optional[str]:
        value = self.read(prompt + ": ")
        return value.strip() if value and value.strip() else None

    def get_int_input(self, prompt: str) -> Optional[int]:
        value = self.get_string_input(prompt)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            raise InputFormatError(f"{value} is not a valid number.") from None

    # ---------------- loop ----------------

    def run(self) -> None:
        done = False
        while not done:
            try:
                selection = self.get_user_selection()
                if selection == -1:
                    done = self.exit_menu()
                elif selection == 1:
                    self.create_project()
                elif selection == 2:
                    self.list_projects()
                elif selection == 3:
                    self.select_project()
                elif selection == 4:
                    self.update_project_details()
                elif selection == 5:
                    self.delete_project()
                else:
                    self.write(f"\n{selection} is not a valid selection. Try again.")
            except (DbException, InputFormatError) as e:
                self.write(f"\nError: {e} Try again.")
            except EOFError:
                done = self.exit_menu()

    def get_user_selection(self) -> int:
        self.print_operations()
        value = self.get_int_input("Enter a menu selection")
        return -1 if value is None else value

    def print_operations(self) -> None:
        self.write("\nThese are the available selections. Press the Enter key to quit:")
        for line in OPERATIONS:
            self.write("   " + line)
        if self.cur_project is None:
            self.write("\nYou are not working with a project.")
        else:
            self.write("\nYou are working with project:\n" + describe(self.cur_project))

    def exit_menu(self) -> bool:
        self.write("\nExiting the menu.")
        return True

    # ---------------- operations ----------------

    def create_project(self) -> None:
        raw = {
            "project_name": self.get_string_input("Enter the project name"),
            "estimated_hours": self.get_string_input("Enter the estimated hours"),
            "actual_hours": self.get_string_input("Enter the actual hours"),
            "difficulty": self.get_string_input("Enter the project difficulty (1-5)"),
            "notes": self.get_string_input("Enter the project notes"),
        }
        project = parse_project(raw)
        with LogContext("PROJECT_CREATE") as log:
            db_project = project_svc.add_project(project, log=log)
        self.write(f"You have successfully created project: {db_project.project_id}: {db_project.project_name}")

    def list_projects(self) -> None:
        projects = project_svc.list_projects()
        self.write("\nProjects:")
        for p in projects:
            self.write(f"   {p.project_id}: {p.project_name}")

    def select_project(self) -> None:
        self.list_projects()
        project_id = self.get_int_input("Enter a project ID to select a project")
        # cleared first so a failed lookup leaves no stale selection
        self.cur_project = None
        if project_id is None:
            self.write("Invalid project ID selected.")
            return
        self.cur_project = project_svc.get_project(project_id)

    def update_project_details(self) -> None:
        cur = self.cur_project
        if cur is None:
            self.write("\nPlease select a project.")
            return

        def ask(prompt: str, current):
            value = self.get_string_input(f"{prompt} [{current}]")
            return current if value is None else value

        raw = {
            "project_name": ask("Enter the project name", cur.project_name),
            "estimated_hours": ask("Enter the estimated hours", cur.estimated_hours),
            "actual_hours": ask("Enter the actual hours", cur.actual_hours),
            "difficulty": ask("Enter the project difficulty", cur.difficulty),
            "notes": ask("Enter the project notes", cur.notes),
        }
        project = parse_project(raw, project_id=cur.project_id)

        with LogContext("PROJECT_UPDATE") as log:
            log.set_before(cur)
            project_svc.update_project(project, log=log)
        self.cur_project = project_svc.get_project(cur.project_id)

    def delete_project(self) -> None:
        self.list_projects()
        project_id = self.get_int_input("Enter the project ID to delete")
        if project_id is None:
            self.write("No project ID entered.")
            return
        with LogContext("PROJECT_DELETE") as log:
            project_svc.remove_project(project_id, log=log)
        self.write(f"Project ID={project_id} was deleted.")
        if self.cur_project is not None and self.cur_project.project_id == project_id:
            self.cur_project = None


# ---------------- Commands ----------------

def cmd_init(args):
    ensure_schema()
    ensure_log_schema()
    with LogContext("SEED_LOAD") as log:
        res = seed_load(args.categories, log)
    print(f"Schema ready. Categories created: {res['created_category']}")


def cmd_menu(args):
    ensure_schema()
    ensure_log_schema()
    ProjectsMenu().run()


def cmd_logs(args):
    ensure_log_schema()
    df = pd.DataFrame(recent_logs(args.limit, project_id=args.project))
    if df.empty:
        print("(empty)")
        return
    pd.set_option("display.width", 160)
    print(df[["ts", "action", "entity_type", "entity_id", "project_name", "result", "err_msg", "latency_ms"]])


# ---------------- Entry ----------------

def main(argv=None):
    parser = argparse.ArgumentParser(description="DIY projects (SQLite)")
    parser.add_argument("--db", default=None, help="SQLite file (overrides config.yaml)")
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init", help="create tables and seed categories")
    p_init.add_argument("--categories", default=DEFAULT_CATEGORIES_CSV)
    p_init.set_defaults(func=cmd_init)

    p_menu = sub.add_parser("menu", help="interactive project menu")
    p_menu.set_defaults(func=cmd_menu)

    p_logs = sub.add_parser("logs", help="show recent operation log")
    p_logs.add_argument("--limit", type=int, default=20)
    p_logs.add_argument("--project", type=int, default=None, help="only this project id")
    p_logs.set_defaults(func=cmd_logs)

    args = parser.parse_args(argv)
    if args.db:
        os.environ["PROJECTS_DB_PATH"] = args.db
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    func = getattr(args, "func", cmd_menu)
    func(args)


if __name__ == "__main__":
    main()
