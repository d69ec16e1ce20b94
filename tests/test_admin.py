
from types import SimpleNamespace

from fastapi.testclient import TestClient

import generator
from main import app

client = TestClient(app)


def test_admin_reload_unauthorized(monkeypatch):
    monkeypatch.setenv("ADMIN_TOKEN", "secret")
    r = client.post("/admin/reload")
    assert r.status_code == 200 and r.json()["ok"] is False


def test_admin_reload_not_configured(monkeypatch):
    monkeypatch.setenv("ADMIN_TOKEN", "")
    r = client.post("/admin/reload", headers={"x-admin-token": "anything"})
    assert r.json()["ok"] is False
    assert "not configured" in r.json()["error"]


def test_admin_reload_ok(monkeypatch):
    monkeypatch.setenv("ADMIN_TOKEN", "secret")
    r = client.post("/admin/reload", headers={"x-admin-token": "secret"})
    assert r.status_code == 200 and r.json()["ok"] is True
    assert r.json()["count"] >= 30


def test_admin_questions_requires_token():
    assert client.get("/admin/questions").status_code == 401
    assert client.get("/admin/questions", headers={"x-admin-token": "wrong"}).status_code == 401


def test_admin_list_includes_answers(admin_headers):
    r = client.get("/admin/questions", headers=admin_headers)
    assert r.status_code == 200
    by_id = {q["id"]: q for q in r.json()}
    assert by_id["gen-01"]["correct_index"] == 0
    assert "Seoul" in by_id["gen-fb-01"]["accepted_answers"]
    assert by_id["gen-01"]["source"] == "seed"


def test_admin_add_fill_blank_and_mark_it(admin_headers):
    new_q = {
        "type": "fill_blank",
        "category": "science",
        "prompt": "빛의 삼원색은 빨강, 초록, ______ 입니다.",
        "accepted_answers": ["파랑", "파란색", "Blue"],
        "hints": ["하늘의 색"],
    }
    r = client.post("/admin/questions", json=new_q, headers=admin_headers)
    assert r.status_code == 201
    created = r.json()
    assert created["id"].startswith("science-")
    assert created["source"] == "admin"

    marked = client.post("/mark", json={"id": created["id"], "answer": "blue"}).json()
    assert marked["correct"] is True and marked["score"] == 100


def test_admin_add_rejects_invalid_payload(admin_headers):
    bad = {
        "type": "multiple_choice",
        "category": "general",
        "prompt": "2 + 2 = ?",
        "options": ["3", "4"],
        "correct_index": 5,
    }
    r = client.post("/admin/questions", json=bad, headers=admin_headers)
    assert r.status_code == 422

    no_answers = {"type": "fill_blank", "category": "general", "prompt": "x ______", "accepted_answers": []}
    assert client.post("/admin/questions", json=no_answers, headers=admin_headers).status_code == 422


def test_admin_add_duplicate_id(admin_headers):
    dup = {
        "id": "gen-01",
        "type": "multiple_choice",
        "category": "general",
        "prompt": "dup",
        "options": ["a", "b"],
        "correct_index": 0,
    }
    r = client.post("/admin/questions", json=dup, headers=admin_headers)
    assert r.status_code == 409


def test_admin_delete_question(admin_headers):
    q = {
        "id": "tmp-delete-me",
        "type": "multiple_choice",
        "category": "general",
        "prompt": "temporary",
        "options": ["a", "b"],
        "correct_index": 1,
    }
    assert client.post("/admin/questions", json=q, headers=admin_headers).status_code == 201
    r = client.delete("/admin/questions/tmp-delete-me", headers=admin_headers)
    assert r.status_code == 200 and r.json()["ok"] is True
    assert client.get("/questions/tmp-delete-me").status_code == 404
    assert client.delete("/admin/questions/tmp-delete-me", headers=admin_headers).status_code == 404


# ---------- generation ----------


def _fake_generate(category, qtype, existing, client=None):
    assert existing, "existing prompts should be passed to avoid duplicates"
    return generator.parse_generated(
        category,
        qtype,
        {
            "question": "태양계에서 가장 작은 행성은?",
            "options": ["수성", "금성", "화성", "지구"],
            "correctAnswer": 0,
        },
    )


def test_admin_generate_preview(monkeypatch, admin_headers):
    monkeypatch.setattr(generator, "generate_question", _fake_generate)
    r = client.post("/admin/generate", json={"category": "science"}, headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["saved"] is False
    assert body["question"]["options"][0] == "수성"
    assert body["question"]["source"] == "generated"


def test_admin_generate_and_save(monkeypatch, admin_headers):
    monkeypatch.setattr(generator, "generate_question", _fake_generate)
    r = client.post(
        "/admin/generate", json={"category": "science", "save": True}, headers=admin_headers
    )
    body = r.json()
    assert body["saved"] is True
    qid = body["question"]["id"]
    assert client.get(f"/questions/{qid}").status_code == 200


def test_admin_generate_without_api_key(monkeypatch, admin_headers):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    r = client.post("/admin/generate", json={"category": "general"}, headers=admin_headers)
    assert r.status_code == 503


def test_admin_generate_failure_is_502(monkeypatch, admin_headers):
    def boom(*args, **kwargs):
        raise generator.GenerationError("bad payload")

    monkeypatch.setattr(generator, "generate_question", boom)
    r = client.post("/admin/generate", json={"category": "general"}, headers=admin_headers)
    assert r.status_code == 502


def test_admin_generate_empty_model_reply_is_502(monkeypatch, admin_headers):
    empty = SimpleNamespace(
        chat=SimpleNamespace(
            completions=SimpleNamespace(create=lambda **kw: SimpleNamespace(choices=[]))
        )
    )
    monkeypatch.setattr(generator, "make_client", lambda: empty)
    r = client.post("/admin/generate", json={"category": "general"}, headers=admin_headers)
    assert r.status_code == 502
