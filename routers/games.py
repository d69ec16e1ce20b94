# routers/games.py

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError

import store
from db import SessionLocal
from routers.marking import FEEDBACK, UNANSWERED, expected_answers, mark_answer
from schemas.games import (
    GameCompleteRequest,
    GameCompleteResponse,
    GameOut,
    GameSummaryOut,
    StatsOut,
)
from schemas.questions import CATEGORIES, Question

logger = logging.getLogger(__name__)

router = APIRouter(tags=["games"])


def _final_result(q: Question, res: Dict[str, Any]) -> Dict[str, Any]:
    # At the end of a game there is no retry: an ungraded answer is a zero.
    if res["graded"]:
        return res
    return {
        **res,
        "ok": True,
        "graded": True,
        "verdict": UNANSWERED,
        "feedback": FEEDBACK[UNANSWERED],
        "expected": expected_answers(q),
    }


@router.post("/games", response_model=GameCompleteResponse)
def complete_game(req: GameCompleteRequest):
    if req.category not in CATEGORIES:
        raise HTTPException(status_code=400, detail="Invalid category")
    if not req.answers:
        raise HTTPException(status_code=400, detail="No answers submitted")

    with SessionLocal() as db:
        ids = {a.question_id for a in req.answers}
        questions = {qid: store.get_question(db, qid) for qid in ids}

    results: List[Dict[str, Any]] = []
    graded: List[Dict[str, Any]] = []
    for it in req.answers:
        q = questions.get(it.question_id)
        if q is None:
            raise HTTPException(
                status_code=400, detail=f"unknown question id: {it.question_id}"
            )
        res = _final_result(q, mark_answer(q, it.answer, it.elapsed_ms))
        results.append({"question_id": it.question_id, "response": res})
        graded.append(
            {
                "question_id": it.question_id,
                "answer": None if it.answer is None else str(it.answer),
                "is_correct": res["correct"],
                "score": res["score"],
                "verdict": res["verdict"],
            }
        )

    totals = store.game_totals(graded)
    if req.time_spent is not None:
        time_spent = req.time_spent
    else:
        # fall back to the per-question timers the client reported
        time_spent = sum(a.elapsed_ms or 0 for a in req.answers) // 1000

    game_id = None
    try:
        with SessionLocal() as db:
            game = store.save_game(
                db, category=req.category, time_spent=time_spent, answers=graded
            )
            db.commit()
            game_id = game.id
    except SQLAlchemyError:
        logger.exception("failed to save game for category %s", req.category)
        game_id = None

    return {
        "ok": True,
        "game_id": game_id,
        **totals,
        "time_spent": time_spent,
        "results": results,
    }


@router.get("/games/{game_id}", response_model=GameOut)
def get_game(game_id: int):
    with SessionLocal() as db:
        game = store.get_game(db, game_id)
        if not game:
            raise HTTPException(status_code=404, detail="Game not found")
        return GameOut.model_validate(game)


@router.get("/history")
def history(limit: int = Query(default=5, ge=1, le=100)):
    with SessionLocal() as db:
        games = store.recent_games(db, limit)
        rows = [GameSummaryOut.model_validate(g).model_dump() for g in games]
    return {"ok": True, "items": rows, "count": len(rows)}


@router.get("/stats", response_model=StatsOut)
def stats():
    with SessionLocal() as db:
        return store.quiz_stats(db)
