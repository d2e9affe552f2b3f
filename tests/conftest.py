import pytest

from achievements.extensions import Database
from achievements.models import AcademicYear, Student
from achievements.repository import SchoolStore

APP_ID = "test-app"
YEAR = "2023-2024"


@pytest.fixture(name="database")
def database_fixture(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'achievements.db'}")
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture(name="store")
def store_fixture(database: Database):
    return SchoolStore(database, app_id=APP_ID)


@pytest.fixture(name="seed")
def seed_fixture(database: Database):
    """Insert ORM rows, filling in the test app/year scope when left blank."""

    def add(*rows):
        with database.session() as session, session.begin():
            for row in rows:
                if getattr(row, "app_id", None) is None:
                    row.app_id = APP_ID
                if hasattr(row, "academic_year_id") and row.academic_year_id is None:
                    row.academic_year_id = YEAR
                session.add(row)
        return rows

    return add


@pytest.fixture(name="current_year")
def current_year_fixture(seed):
    seed(AcademicYear(id=YEAR, app_id=APP_ID, label="2023-2024", is_current=True))
    return YEAR


@pytest.fixture(name="student")
def student_fixture(seed, current_year):
    def make(student_id: str = "s1", classroom_ids=(), total_xp: int = 0) -> Student:
        (row,) = seed(Student(id=student_id, classroom_ids=list(classroom_ids), total_xp=total_xp))
        return row

    return make
