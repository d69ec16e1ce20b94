from __future__ import annotations

import random as _rnd
from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException, Query

import store
from db import SessionLocal
from schemas.questions import CATEGORIES, QuestionOut, to_public

GAME_LENGTH = 10

router = APIRouter(tags=["questions"])


@router.get("/quiz/{category}", response_model=List[QuestionOut])
def quiz_questions(category: str, limit: int = Query(default=GAME_LENGTH, ge=1, le=100)):
    """Questions for one game: shuffled, answers stripped."""
    if category not in CATEGORIES:
        raise HTTPException(status_code=400, detail="Invalid category")

    with SessionLocal() as db:
        qs = store.list_questions(db, category=category)

    _rnd.shuffle(qs)
    return [to_public(q) for q in qs[:limit]]


@router.get("/questions", response_model=List[QuestionOut])
def list_questions(
    category: Optional[str] = None,
    type: Optional[Literal["multiple_choice", "fill_blank"]] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    random: bool = Query(default=False, description="If true, shuffle before limiting"),
):
    with SessionLocal() as db:
        qs = store.list_questions(db, category=category, qtype=type)

    if random:
        _rnd.shuffle(qs)

    if limit is not None:
        qs = qs[:limit]

    return [to_public(q) for q in qs]


@router.get("/questions/{qid}", response_model=QuestionOut)
def get_question_detail(qid: str):
    with SessionLocal() as db:
        q = store.get_question(db, qid)
    if not q:
        raise HTTPException(status_code=404, detail="question not found")
    return to_public(q)
