# Free-text grading for fill-in-the-blank questions.
# Pure functions only: no I/O, no shared state, safe to call from any thread.

from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict

# --- Grading policy ---------------------------------------------------------------
# Fixed calibration values; stored game history depends on them.
EXACT_SCORE = 100
FUZZY_CORRECT_SCORE = 80
CLOSE_SCORE = 50
INCORRECT_SCORE = 0

FUZZY_CORRECT_THRESHOLD = 0.8  # similarity must be strictly greater
CLOSE_THRESHOLD = 0.6  # similarity must be strictly greater


class Verdict(str, Enum):
    EXACT = "exact"
    FUZZY_CORRECT = "fuzzy-correct"
    CLOSE = "close"
    INCORRECT = "incorrect"


class GradeOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_correct: bool
    score: int
    verdict: Verdict


def similarity(a: str, b: str) -> float:
    """
    Normalized Levenshtein similarity in [0, 1].

    1.0 means identical, 0.0 means every position has to change. Characters
    are compared as-is; callers fold case before calling.
    """
    len_a, len_b = len(a), len(b)
    max_len = max(len_a, len_b)
    if max_len == 0:
        return 1.0

    # table[j][i] = edits needed to turn a[:i] into b[:j]
    table = [[0] * (len_a + 1) for _ in range(len_b + 1)]
    for i in range(len_a + 1):
        table[0][i] = i
    for j in range(len_b + 1):
        table[j][0] = j

    for j in range(1, len_b + 1):
        for i in range(1, len_a + 1):
            if a[i - 1] == b[j - 1]:
                table[j][i] = table[j - 1][i - 1]
            else:
                table[j][i] = 1 + min(
                    table[j - 1][i],  # delete
                    table[j][i - 1],  # insert
                    table[j - 1][i - 1],  # substitute
                )

    return (max_len - table[len_b][len_a]) / max_len


def best_similarity(candidate: str, accepted_answers: Sequence[str]) -> float:
    """Highest similarity of an already-normalized candidate over the accepted set."""
    best = 0.0
    for accepted in accepted_answers:
        best = max(best, similarity(candidate, accepted.lower()))
    return best


def grade(candidate: str, accepted_answers: Sequence[str]) -> Optional[GradeOutcome]:
    """
    Grade a typed answer against the accepted answers of one question.

    Returns None when the candidate is blank after trimming: there is nothing
    to grade and the caller should ask again instead of scoring it as wrong.
    """
    normalized = candidate.strip().lower()
    if not normalized:
        return None

    for accepted in accepted_answers:
        if normalized == accepted.lower():
            return GradeOutcome(is_correct=True, score=EXACT_SCORE, verdict=Verdict.EXACT)

    best = best_similarity(normalized, accepted_answers)

    if best > FUZZY_CORRECT_THRESHOLD:
        return GradeOutcome(
            is_correct=True, score=FUZZY_CORRECT_SCORE, verdict=Verdict.FUZZY_CORRECT
        )
    if best > CLOSE_THRESHOLD:
        return GradeOutcome(is_correct=False, score=CLOSE_SCORE, verdict=Verdict.CLOSE)
    return GradeOutcome(is_correct=False, score=INCORRECT_SCORE, verdict=Verdict.INCORRECT)
