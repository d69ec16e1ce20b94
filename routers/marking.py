from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from fastapi import APIRouter

import store
from db import SessionLocal
from grader import Verdict, best_similarity, grade
from schemas.marking import GradeRequest, GradeResponse, MarkRequest, MarkResponse
from schemas.questions import MultipleChoiceQuestion, Question

logger = logging.getLogger(__name__)

# --- Game policy ------------------------------------------------------------------
QUESTION_TIME_LIMIT_S = 30
# Verdicts produced here on top of the grader's own.
TIMEOUT = "timeout"
UNANSWERED = "unanswered"

_ANSWER_REQUIRED_MSG = "Answer required."
_BAD_OPTION_MSG = "Pick one of the listed options."
_UNKNOWN_QUESTION_MSG = "unknown question id"

FEEDBACK = {
    Verdict.EXACT.value: "Correct!",
    Verdict.FUZZY_CORRECT.value: "Correct! (close enough to an accepted answer)",
    Verdict.CLOSE.value: "So close. Check the hints and try again next time!",
    Verdict.INCORRECT.value: "Incorrect.",
    TIMEOUT: "Time's up.",
    UNANSWERED: "No answer given.",
}

router = APIRouter(tags=["marking"])


# --- Helpers ----------------------------------------------------------------------


def expected_answers(q: Question) -> list[str]:
    if isinstance(q, MultipleChoiceQuestion):
        return [q.options[q.correct_index]]
    return list(q.accepted_answers)


def _result(q: Question, *, correct: bool, score: int, verdict: str) -> Dict[str, Any]:
    return {
        "ok": True,
        "graded": True,
        "correct": correct,
        "score": score,
        "verdict": verdict,
        "feedback": FEEDBACK.get(verdict, ""),
        "expected": None if correct else expected_answers(q),
    }


def _not_graded(feedback: str) -> Dict[str, Any]:
    return {
        "ok": False,
        "graded": False,
        "correct": False,
        "score": 0,
        "verdict": None,
        "feedback": feedback,
        "expected": None,
    }


def _parse_option(answer: Union[int, str], n_options: int) -> Optional[int]:
    if isinstance(answer, bool):
        return None
    if isinstance(answer, int):
        idx = answer
    else:
        s = answer.strip()
        try:
            idx = int(s)
        except ValueError:
            return None
    if 0 <= idx < n_options:
        return idx
    return None


# --- Core marking -----------------------------------------------------------------


def mark_answer(
    q: Question, answer: Union[int, str, None], elapsed_ms: Optional[int] = None
) -> Dict[str, Any]:
    """
    Mark one submission. A missing answer or one past the time limit counts as a
    wrong answer; a blank fill-in comes back ungraded so the player can retry.
    """
    if answer is None or (elapsed_ms is not None and elapsed_ms > QUESTION_TIME_LIMIT_S * 1000):
        return _result(q, correct=False, score=0, verdict=TIMEOUT)

    if isinstance(q, MultipleChoiceQuestion):
        idx = _parse_option(answer, len(q.options))
        if idx is None:
            return _not_graded(_BAD_OPTION_MSG)
        if idx == q.correct_index:
            return _result(q, correct=True, score=100, verdict=Verdict.EXACT.value)
        return _result(q, correct=False, score=0, verdict=Verdict.INCORRECT.value)

    outcome = grade(str(answer), q.accepted_answers)
    if outcome is None:
        return _not_graded(_ANSWER_REQUIRED_MSG)
    return _result(
        q, correct=outcome.is_correct, score=outcome.score, verdict=outcome.verdict.value
    )


# --- Endpoints --------------------------------------------------------------------


@router.post("/grade", response_model=GradeResponse)
def grade_text(req: GradeRequest):
    outcome = grade(req.answer, req.accepted_answers)
    if outcome is None:
        return {"ok": False, "feedback": _ANSWER_REQUIRED_MSG}
    sim = best_similarity(req.answer.strip().lower(), req.accepted_answers)
    return {
        "ok": True,
        "correct": outcome.is_correct,
        "score": outcome.score,
        "verdict": outcome.verdict.value,
        "similarity": round(sim, 4),
        "feedback": FEEDBACK[outcome.verdict.value],
    }


@router.post("/mark", response_model=MarkResponse)
def mark(req: MarkRequest):
    with SessionLocal() as db:
        q = store.get_question(db, req.id)
    if q is None:
        return _not_graded(_UNKNOWN_QUESTION_MSG)
    res = mark_answer(q, req.answer, req.elapsed_ms)
    logger.debug("marked %s -> %s", req.id, res["verdict"])
    return res

