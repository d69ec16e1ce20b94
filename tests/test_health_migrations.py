from fastapi.testclient import TestClient

from main import app
from tools.check_alembic_single_head import main as check_single_head

client = TestClient(app)


def test_health_db():
    r = client.get("/health/db")
    assert r.status_code == 200
    b = r.json()
    assert b["ok"] is True and b["questions"] >= 30


def test_health_migrations_basic():
    r = client.get("/health/migrations")
    assert r.status_code == 200
    b = r.json()
    assert "code_heads" in b and isinstance(b["code_heads"], list)
    assert "db_version" in b


def test_migration_tree_has_single_head():
    assert check_single_head() == 0
