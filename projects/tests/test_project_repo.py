"""
Repository layer tests: SQL helpers over an open connection.
"""
from decimal import Decimal

from projects.db import get_conn
from projects.models import Project
from projects.repository import project_repo


class TestProjectRepo:

    def test_insert_and_get(self):
        with get_conn() as conn:
            pid = project_repo.insert_project(
                conn,
                Project(project_name="Paint fence", estimated_hours=Decimal("6.5"),
                        actual_hours=Decimal("0"), difficulty=2, notes=None),
            )
            got = project_repo.get_project(conn, pid)

        assert got is not None
        assert got.project_id == pid
        assert got.project_name == "Paint fence"
        assert got.estimated_hours == Decimal("6.50")
        assert str(got.actual_hours) == "0.00"
        assert got.difficulty == 2
        assert got.notes is None
        assert got.materials == [] and got.steps == [] and got.categories == []

    def test_get_missing_returns_none(self):
        with get_conn() as conn:
            assert project_repo.get_project(conn, 424242) is None

    def test_list_ordered_by_name(self):
        with get_conn() as conn:
            for name in ("Shelves", "Bird house", "Mailbox"):
                project_repo.insert_project(conn, Project(project_name=name))
            names = [p.project_name for p in project_repo.list_projects(conn)]
        assert names == ["Bird house", "Mailbox", "Shelves"]

    def test_update_and_delete_rowcount(self):
        with get_conn() as conn:
            pid = project_repo.insert_project(conn, Project(project_name="Old"))
            assert project_repo.update_project(conn, Project(project_id=pid, project_name="New", difficulty=4)) == 1
            assert project_repo.update_project(conn, Project(project_id=pid + 1000, project_name="X")) == 0
            assert project_repo.get_project(conn, pid).project_name == "New"
            assert project_repo.delete_project(conn, pid) == 1
            assert project_repo.delete_project(conn, pid) == 0

    def test_children_for_project(self, seeded_project):
        with get_conn() as conn:
            materials = project_repo.list_materials_for_project(conn, seeded_project)
            steps = project_repo.list_steps_for_project(conn, seeded_project)
            cats = project_repo.list_categories_for_project(conn, seeded_project)

        assert {m.material_name for m in materials} == {"Door hinges", "Screws"}
        assert {m.cost for m in materials} == {Decimal("12.99"), Decimal("4.50")}
        assert all(m.project_id == seeded_project for m in materials)
        assert [s.step_text for s in steps] == ["Align hinges", "Screw hinges to frame"]
        assert {c.category_name for c in cats} == {"Doors and Windows", "Repairs"}

    def test_delete_cascades_to_children(self, seeded_project):
        with get_conn() as conn:
            project_repo.delete_project(conn, seeded_project)
            left = conn.execute(
                "SELECT (SELECT COUNT(1) FROM material) + (SELECT COUNT(1) FROM step) "
                "+ (SELECT COUNT(1) FROM project_category) AS c"
            ).fetchone()["c"]
            cats = conn.execute("SELECT COUNT(1) AS c FROM category").fetchone()["c"]
        assert left == 0
        assert cats == 3
