# store.py
# Database access for questions and game history. Every function takes an open
# Session; callers decide when to commit.

from __future__ import annotations

import uuid
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from models import Game, GameAnswer, QuestionRow
from schemas.questions import (
    CATEGORIES,
    FillBlankQuestion,
    MultipleChoiceQuestion,
    Question,
    QuestionAdminOut,
    to_admin,
)

# ---------- Questions ----------


def row_to_question(row: QuestionRow) -> Question:
    """Resolve a stored row into its tagged variant."""
    if row.type == "fill_blank":
        return FillBlankQuestion(
            id=row.id,
            category=row.category,
            prompt=row.prompt,
            accepted_answers=list(row.accepted_answers or []),
            hints=list(row.hints or []),
        )
    return MultipleChoiceQuestion(
        id=row.id,
        category=row.category,
        prompt=row.prompt,
        options=list(row.options or []),
        correct_index=row.correct_index or 0,
    )


def row_to_admin(row: QuestionRow) -> QuestionAdminOut:
    return to_admin(row_to_question(row), row.source)


def _apply(row: QuestionRow, q: Question) -> None:
    row.category = q.category
    row.type = q.type
    row.prompt = q.prompt
    if isinstance(q, MultipleChoiceQuestion):
        row.options = list(q.options)
        row.correct_index = q.correct_index
        row.accepted_answers = None
        row.hints = None
    else:
        row.options = None
        row.correct_index = None
        row.accepted_answers = list(q.accepted_answers)
        row.hints = list(q.hints)


def new_question_id(category: str) -> str:
    return f"{category}-{uuid.uuid4().hex[:8]}"


def list_question_rows(
    db: Session, category: Optional[str] = None, qtype: Optional[str] = None
) -> List[QuestionRow]:
    stmt = select(QuestionRow).order_by(QuestionRow.id)
    if category:
        stmt = stmt.where(QuestionRow.category == category)
    if qtype:
        stmt = stmt.where(QuestionRow.type == qtype)
    return list(db.scalars(stmt))


def list_questions(
    db: Session, category: Optional[str] = None, qtype: Optional[str] = None
) -> List[Question]:
    return [row_to_question(r) for r in list_question_rows(db, category, qtype)]


def get_question(db: Session, qid: str) -> Optional[Question]:
    row = db.get(QuestionRow, qid)
    return row_to_question(row) if row else None


def add_question(db: Session, q: Question, source: str = "admin") -> QuestionRow:
    """Insert one question. Raises KeyError when the id is already taken."""
    qid = q.id or new_question_id(q.category)
    if db.get(QuestionRow, qid) is not None:
        raise KeyError(qid)
    row = QuestionRow(id=qid, source=source)
    _apply(row, q)
    db.add(row)
    db.flush()
    return row


def delete_question(db: Session, qid: str) -> bool:
    row = db.get(QuestionRow, qid)
    if row is None:
        return False
    db.delete(row)
    return True


def insert_missing(db: Session, questions: Iterable[Question], source: str) -> int:
    existing = set(db.scalars(select(QuestionRow.id)))
    added = 0
    for q in questions:
        if q.id in existing:
            continue
        row = QuestionRow(id=q.id, source=source)
        _apply(row, q)
        db.add(row)
        existing.add(q.id)
        added += 1
    return added


def upsert_questions(db: Session, questions: Iterable[Question], source: str) -> int:
    n = 0
    for q in questions:
        row = db.get(QuestionRow, q.id)
        if row is None:
            row = QuestionRow(id=q.id, source=source)
            db.add(row)
        _apply(row, q)
        n += 1
    return n


def question_prompts(db: Session, category: str) -> List[str]:
    return list(db.scalars(select(QuestionRow.prompt).where(QuestionRow.category == category)))


# ---------- Games ----------


def game_totals(answers: List[Dict]) -> Dict[str, int]:
    """Correct count, summed points and rounded accuracy for graded answers."""
    total = len(answers)
    correct = sum(1 for a in answers if a["is_correct"])
    return {
        "total": total,
        "correct": correct,
        "points": sum(int(a["score"]) for a in answers),
        "accuracy": round(correct / total * 100) if total else 0,
    }


def save_game(
    db: Session,
    *,
    category: str,
    time_spent: int,
    answers: List[Dict],
) -> Game:
    """
    Persist one finished game. `answers` are graded results with keys
    question_id, answer, is_correct, score, verdict.
    """
    totals = game_totals(answers)
    game = Game(
        category=category,
        score=totals["correct"],
        points=totals["points"],
        total_questions=totals["total"],
        time_spent=time_spent,
        accuracy=totals["accuracy"],
    )
    game.answers = [
        GameAnswer(
            question_id=a["question_id"],
            answer=a.get("answer"),
            is_correct=bool(a["is_correct"]),
            score=int(a["score"]),
            verdict=a["verdict"],
        )
        for a in answers
    ]
    db.add(game)
    db.flush()
    return game


def get_game(db: Session, game_id: int) -> Optional[Game]:
    stmt = select(Game).options(selectinload(Game.answers)).where(Game.id == game_id)
    return db.scalars(stmt).first()


def recent_games(db: Session, limit: int = 5) -> List[Game]:
    stmt = select(Game).order_by(Game.created_at.desc(), Game.id.desc()).limit(limit)
    return list(db.scalars(stmt))


def best_score(db: Session, category: Optional[str] = None) -> int:
    stmt = select(func.max(Game.score))
    if category:
        stmt = stmt.where(Game.category == category)
    return db.scalar(stmt) or 0


def quiz_stats(db: Session) -> Dict:
    total_games, avg = db.execute(select(func.count(Game.id), func.avg(Game.score))).one()
    if not total_games:
        return {
            "best_score": 0,
            "average_score": 0,
            "total_games": 0,
            "best_scores": {c: 0 for c in CATEGORIES},
        }
    return {
        "best_score": best_score(db),
        "average_score": round(float(avg)),
        "total_games": total_games,
        "best_scores": {c: best_score(db, c) for c in CATEGORIES},
    }
