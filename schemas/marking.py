# schemas/marking.py
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field

# ---------- Ad-hoc grading ----------


class GradeRequest(BaseModel):
    answer: str = Field(max_length=500)
    accepted_answers: List[str] = Field(default_factory=list, max_length=50)


class GradeResponse(BaseModel):
    ok: bool
    correct: bool = False
    score: int = 0
    verdict: Optional[str] = None
    similarity: Optional[float] = None
    feedback: Optional[str] = None


# ---------- Mark single ----------


class MarkRequest(BaseModel):
    id: str
    # option index for multiple choice, typed text for fill blank, null on timeout
    answer: Union[int, str, None] = None
    elapsed_ms: Optional[int] = Field(default=None, ge=0)


class MarkResponse(BaseModel):
    ok: bool
    graded: bool
    correct: bool
    score: int
    verdict: Optional[str] = None
    feedback: str = ""
    # only filled in when the answer was not correct
    expected: Optional[List[str]] = None
