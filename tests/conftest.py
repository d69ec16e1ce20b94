import os
import tempfile

import pytest

# Must run before db.py is imported anywhere: point the app at a throwaway SQLite file.
_TMP_DIR = tempfile.mkdtemp(prefix="quiz-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'quiz.db')}"
os.environ.setdefault("ADMIN_TOKEN", "test-admin")
os.environ.pop("OPENAI_API_KEY", None)

ADMIN_HEADERS = {"x-admin-token": os.environ["ADMIN_TOKEN"]}


@pytest.fixture(scope="session", autouse=True)
def _database():
    from bank import seed_questions
    from db import init_db

    init_db()
    seed_questions()
    yield


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)
