# /tests/conftest.py

"""
Shared fixtures. Every test gets its own file-backed SQLite database under
pytest's tmp_path, so tests never see each other's rows and the concurrency
tests can open several real connections.
"""

from datetime import datetime, timedelta
from typing import List, Tuple

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.security import TokenCodec
from app.db.database import Database
from app.main import create_app
from app.models.student_model import StudentCreate
from app.models.teacher_model import SubjectAssignment, TeacherCreate
from app.services.database_service import DatabaseService
from app.services.notifier import Notifier, NotifierError
from app.services.roster_service import RosterService

TEST_SECRET = "test-secret-key"


class FixedClock:
    """A controllable stand-in for utcnow()."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class RecordingNotifier(Notifier):
    def __init__(self):
        self.sent: List[Tuple[str, str]] = []

    def deliver(self, email: str, code: str) -> None:
        self.sent.append((email, code))

    def last_code_for(self, email: str) -> str:
        return [code for to, code in self.sent if to == email][-1]


class FailingNotifier(RecordingNotifier):
    """Records the code it was handed, then reports a delivery failure."""

    def deliver(self, email: str, code: str) -> None:
        super().deliver(email, code)
        raise NotifierError("SMTP relay refused the message")


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'ratings_test.db'}")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    with database.session_scope() as s:
        yield s


@pytest.fixture
def db_service(session):
    return DatabaseService(session)


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 3, 14, 10, 30, 0))


@pytest.fixture
def codec():
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_student(db_service):
    roster = RosterService(db_service)

    def _make(name="Ava Reyes", grade=3, access_code=None):
        result = roster.create_student(StudentCreate(name=name, grade=grade, access_code=access_code))
        assert result.ok, result.message
        return result.value

    return _make


@pytest.fixture
def make_teacher(db_service):
    roster = RosterService(db_service)

    def _make(name="Mr. Okafor", subjects=(("Math", 3),)):
        result = roster.create_teacher(TeacherCreate(
            name=name,
            subjects=[SubjectAssignment(subject=s, grade=g) for s, g in subjects],
        ))
        assert result.ok, result.message
        return result.value

    return _make


@pytest.fixture
def app_notifier():
    return RecordingNotifier()


@pytest.fixture
def client(tmp_path, app_notifier):
    settings = Settings(
        database_url=f"sqlite:///{tmp_path / 'api_test.db'}",
        jwt_secret=TEST_SECRET,
        log_level="WARNING",
    )
    app = create_app(settings=settings, notifier=app_notifier)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def failing_notifier():
    return FailingNotifier()
