import json
from types import SimpleNamespace

import pytest

import generator
from schemas.questions import FillBlankQuestion, MultipleChoiceQuestion


class FakeClient:
    """Just enough of the OpenAI client surface for chat completions."""

    def __init__(self, content):
        self.content = content
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def test_generate_multiple_choice(monkeypatch):
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    fake = FakeClient(
        json.dumps(
            {"question": "물의 끓는점은?", "options": ["90도", "100도", "110도", "120도"], "correctAnswer": 1}
        )
    )
    q = generator.generate_question("science", "multiple_choice", ["물의 화학식은?"], client=fake)
    assert isinstance(q, MultipleChoiceQuestion)
    assert q.correct_index == 1 and q.category == "science"

    call = fake.calls[0]
    assert call["response_format"] == {"type": "json_object"}
    assert call["model"] == generator.DEFAULT_MODEL
    assert "물의 화학식은?" in call["messages"][1]["content"]


def test_generate_fill_blank():
    fake = FakeClient(
        json.dumps(
            {"question": "지구는 ______ 을 돈다.", "correctAnswers": ["태양", "해"], "hints": ["낮에 보임"]}
        )
    )
    q = generator.generate_question("general", "fill_blank", client=fake)
    assert isinstance(q, FillBlankQuestion)
    assert q.accepted_answers == ["태양", "해"]
    assert q.hints == ["낮에 보임"]
    assert "빈칸채우기" in fake.calls[0]["messages"][0]["content"]


def test_generate_uses_configured_model(monkeypatch):
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
    fake = FakeClient(json.dumps({"question": "q", "correctAnswers": ["a"]}))
    generator.generate_question("general", "fill_blank", client=fake)
    assert fake.calls[0]["model"] == "gpt-4o-mini"


@pytest.mark.parametrize(
    "qtype,payload",
    [
        ("multiple_choice", {"question": "q", "options": ["a", "b", "c"], "correctAnswer": 0}),
        ("multiple_choice", {"question": "q", "options": ["a", "b", "c", "d"], "correctAnswer": 4}),
        ("multiple_choice", {"question": "", "options": ["a", "b", "c", "d"], "correctAnswer": 0}),
        ("fill_blank", {"question": "q", "correctAnswers": []}),
        ("fill_blank", {"question": "q"}),
        ("fill_blank", {"question": "q", "correctAnswers": ["a"], "hints": "abc"}),
    ],
)
def test_generate_rejects_bad_payloads(qtype, payload):
    fake = FakeClient(json.dumps(payload))
    with pytest.raises(generator.GenerationError):
        generator.generate_question("general", qtype, client=fake)


def test_generate_rejects_non_json():
    with pytest.raises(generator.GenerationError):
        generator.generate_question("general", client=FakeClient("not json"))


def test_make_client_requires_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(generator.GeneratorNotConfigured):
        generator.make_client()


def test_build_messages_caps_existing_prompts():
    existing = [f"문제 {i}" for i in range(200)]
    messages = generator.build_messages("history", "multiple_choice", existing)
    user = messages[1]["content"]
    assert f"{generator.MAX_EXISTING_IN_PROMPT}. 문제 {generator.MAX_EXISTING_IN_PROMPT - 1}" in user
    assert "문제 199" not in user


def test_generate_rejects_empty_choices():
    class NoChoices(FakeClient):
        def _create(self, **kwargs):
            self.calls.append(kwargs)
            return SimpleNamespace(choices=[])

    with pytest.raises(generator.GenerationError):
        generator.generate_question("general", client=NoChoices("{}"))
