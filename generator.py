# generator.py
# Drafts new quiz questions with a chat-completion model for the admin panel.

from __future__ import annotations

import json
import logging
import os
from typing import Any, Optional, Sequence

from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from schemas.questions import FillBlankQuestion, MultipleChoiceQuestion, Question

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
MAX_EXISTING_IN_PROMPT = 50

CATEGORY_PROMPTS = {
    "general": (
        "일반상식에 관한 퀴즈 문제를 생성해주세요. 한국어로 작성하고, "
        "다양한 주제(지리, 상식, 문화, 스포츠 등)를 포함해주세요."
    ),
    "history": "역사에 관한 퀴즈 문제를 생성해주세요. 한국사, 세계사를 포함하여 한국어로 작성해주세요.",
    "science": (
        "과학에 관한 퀴즈 문제를 생성해주세요. 물리, 화학, 생물, 지구과학 등을 "
        "포함하여 한국어로 작성해주세요."
    ),
}

_SYSTEM_FILL_BLANK = """당신은 한국어 퀴즈 문제 제작 전문가입니다. 다음 조건에 맞는 빈칸채우기 문제를 생성해주세요:
1. 문제는 명확하고 이해하기 쉬워야 합니다
2. 빈칸 위치에 반드시 ______ (언더바 6개)를 사용해주세요
3. 여러 개의 가능한 정답을 제공해주세요 (동의어, 다른 표현 포함)
4. 2-3개의 힌트를 제공해주세요
5. 난이도는 일반인이 도전할 만한 수준으로 해주세요
6. 기존 문제들과 완전히 다른 새로운 문제를 만들어주세요
7. JSON 형식으로 응답해주세요: {"question": "빈칸이 포함된 문제내용", "correctAnswers": ["정답1", "정답2", "정답3"], "hints": ["힌트1", "힌트2"]}"""

_SYSTEM_MULTIPLE_CHOICE = """당신은 한국어 퀴즈 문제 제작 전문가입니다. 다음 조건에 맞는 객관식 문제를 생성해주세요:
1. 문제는 명확하고 이해하기 쉬워야 합니다
2. 4개의 선택지를 제공해주세요
3. 정답은 하나만 있어야 합니다
4. 난이도는 일반인이 도전할 만한 수준으로 해주세요
5. 기존 문제들과 완전히 다른 새로운 문제를 만들어주세요
6. JSON 형식으로 응답해주세요: {"question": "문제내용", "options": ["선택지1", "선택지2", "선택지3", "선택지4"], "correctAnswer": 정답번호(0-3)}"""


class GenerationError(RuntimeError):
    """The model call failed or returned something that is not a usable question."""


class GeneratorNotConfigured(GenerationError):
    pass


def make_client() -> OpenAI:
    api_key = os.getenv("OPENAI_API_KEY", "").strip()
    if not api_key:
        raise GeneratorNotConfigured("OPENAI_API_KEY not set.")
    base_url = os.getenv("OPENAI_BASE_URL", "").strip() or None
    return OpenAI(api_key=api_key, base_url=base_url) if base_url else OpenAI(api_key=api_key)


def build_messages(category: str, qtype: str, existing: Sequence[str] = ()) -> list[dict]:
    prompt = CATEGORY_PROMPTS.get(category, CATEGORY_PROMPTS["general"])
    existing = list(existing)[:MAX_EXISTING_IN_PROMPT]
    if existing:
        listed = "\n".join(f"{i}. {q}" for i, q in enumerate(existing, 1))
        prompt += f"\n\n다음 기존 문제들과 중복되지 않도록 완전히 새로운 문제를 생성해주세요:\n{listed}"

    system = _SYSTEM_FILL_BLANK if qtype == "fill_blank" else _SYSTEM_MULTIPLE_CHOICE
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": prompt},
    ]


def parse_generated(category: str, qtype: str, payload: dict[str, Any]) -> Question:
    """Turn the model's JSON into a validated question."""
    try:
        if qtype == "fill_blank":
            answers = payload.get("correctAnswers")
            if not isinstance(answers, list) or not answers:
                raise GenerationError("fill_blank response has no correctAnswers")
            hints = payload.get("hints") or []
            if not isinstance(hints, list):
                raise GenerationError("fill_blank response hints must be a list")
            return FillBlankQuestion(
                category=category,
                prompt=payload.get("question") or "",
                accepted_answers=[str(a) for a in answers],
                hints=[str(h) for h in hints],
            )

        options = payload.get("options")
        if not isinstance(options, list) or len(options) != 4:
            raise GenerationError("multiple_choice response needs exactly 4 options")
        index = payload.get("correctAnswer")
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index <= 3:
            raise GenerationError("multiple_choice response has no valid correctAnswer")
        return MultipleChoiceQuestion(
            category=category,
            prompt=payload.get("question") or "",
            options=[str(o) for o in options],
            correct_index=index,
        )
    except ValidationError as e:
        raise GenerationError(f"invalid {qtype} response: {e.error_count()} errors") from e


def generate_question(
    category: str,
    qtype: str = "multiple_choice",
    existing: Sequence[str] = (),
    client: Optional[Any] = None,
) -> Question:
    """
    Ask the model for one new question of the given category and type.

    `existing` holds prompts already in the bank so the model avoids repeats.
    Raises GenerationError on any failure.
    """
    client = client or make_client()
    model = os.getenv("OPENAI_MODEL", DEFAULT_MODEL)

    try:
        response = client.chat.completions.create(
            model=model,
            messages=build_messages(category, qtype, existing),
            response_format={"type": "json_object"},
        )
    except OpenAIError as e:
        logger.error("question generation failed: %s", e)
        raise GenerationError(f"model call failed: {e}") from e
    if not response.choices:
        raise GenerationError("model returned no choices")
    content = response.choices[0].message.content or "{}"

    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        raise GenerationError("model returned invalid JSON") from e
    if not isinstance(payload, dict):
        raise GenerationError("model returned a non-object JSON root")

    q = parse_generated(category, qtype, payload)
    logger.info("generated %s question for %s", qtype, category)
    return q
