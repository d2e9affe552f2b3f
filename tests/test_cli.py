from datetime import datetime, timedelta, timezone

from achievements.__main__ import main
from achievements.extensions import Database
from achievements.models import AcademicYear, Grade, Student
from achievements.repository import SchoolStore


def test_create_db_then_run(tmp_path):
    url = f"sqlite:///{tmp_path / 'cli.db'}"

    assert main(["--database-url", url, "create-db"]) == 0

    database = Database(url)
    with database.session() as session, session.begin():
        session.add_all([
            AcademicYear(id="y1", app_id="cli", is_current=True),
            Student(app_id="cli", academic_year_id="y1", id="s1", classroom_ids=[], total_xp=0),
            Grade(
                app_id="cli", academic_year_id="y1", student_id="s1", subject="Math", type="test",
                grade="20", date=datetime.now(timezone.utc) - timedelta(days=1),
            ),
        ])

    assert main(["--database-url", url, "--app-id", "cli", "run", "--workers", "2", "--timeout", "0"]) == 0

    assert SchoolStore(database, app_id="cli").get_student("y1", "s1").total_xp == 150
    database.dispose()


def test_run_against_missing_tables_fails(tmp_path):
    url = f"sqlite:///{tmp_path / 'empty.db'}"

    assert main(["--database-url", url, "run"]) == 2
