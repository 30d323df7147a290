import os, sys
import pytest
from fastapi.testclient import TestClient
import tempfile

# Ensure app import path
backend_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if backend_root not in sys.path:
    sys.path.insert(0, backend_root)

# Point the engine at a throwaway SQLite file before the app is imported
_db_dir = tempfile.mkdtemp(prefix="workforce-tests-")
os.environ["DATABASE_URL"] = f"sqlite+pysqlite:///{os.path.join(_db_dir, 'test.db')}"

from workforce.main import app  # noqa: E402
from workforce.db.session import engine, Base, SessionLocal  # noqa: E402
from workforce.db import models  # noqa: E402

@pytest.fixture(scope="function")  # fresh DB per test
def client():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    return TestClient(app)

@pytest.fixture
def db(client):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

class FakeTaskRepository:
    """In-memory Task Store; lists come back in insertion order."""

    def __init__(self):
        self.tasks = {}
        self.saved = []
        self._next_id = 1

    def find_by_id(self, db, task_id):
        return self.tasks.get(task_id)

    def save(self, db, task):
        if task.id is None:
            task.id = self._next_id
            self._next_id += 1
        self.tasks[task.id] = task
        self.saved.append(task.id)
        return task

    def find_by_reference_id_and_reference_type(self, db, reference_id, reference_type):
        return [
            t for t in self.tasks.values()
            if t.reference_id == reference_id and t.reference_type == reference_type
        ]

    def find_by_assignee_id_in(self, db, assignee_ids):
        return [t for t in self.tasks.values() if t.assignee_id in assignee_ids]

    def find_by_priority(self, db, priority):
        return [t for t in self.tasks.values() if t.priority == priority]

    def seed(self, **fields):
        fields.setdefault("description", "seeded")
        task = models.Task(**fields)
        return self.save(None, task)


class StepClock:
    """Deterministic clock: starts at `start` and advances by `step` per call."""

    def __init__(self, start=1_700_000_000_000, step=1):
        self.now = start
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def fake_repo():
    return FakeTaskRepository()

@pytest.fixture
def clock():
    return StepClock()
