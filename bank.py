# bank.py
# Seed questions shipped with the service. The database is the source of truth
# at runtime; these files only populate it (startup) or refresh it (admin reload).

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from schemas.questions import Question, question_adapter

logger = logging.getLogger(__name__)

_BASE = Path(__file__).resolve().parent
_DATA_DIR = _BASE / "data" / "questions"


def _iter_jsonl(p: Path) -> Iterable[Dict[str, Any]]:
    with p.open("r", encoding="utf-8") as f:
        for idx, line in enumerate(f, 1):
            s = line.strip()
            if not s or s.startswith("#") or s.startswith("//"):
                continue
            try:
                yield json.loads(s)
            except json.JSONDecodeError:
                logger.warning("skipping malformed row %s:%d", p.name, idx)
                continue


def _iter_json(p: Path) -> Iterable[Dict[str, Any]]:
    with p.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("skipping malformed file %s", p.name)
            data = []
    if isinstance(data, list):
        for obj in data:
            yield obj


def load_questions_from(data_dir: Path) -> List[Question]:
    """Read every .json / .jsonl file under data_dir; invalid records are skipped."""
    questions: List[Question] = []
    if not data_dir.exists():
        return questions

    for p in sorted(data_dir.rglob("*")):
        if not p.is_file():
            continue
        suf = p.suffix.lower()
        if suf == ".jsonl":
            source = _iter_jsonl(p)
        elif suf == ".json":
            source = _iter_json(p)
        else:
            continue

        for raw in source:
            try:
                q = question_adapter.validate_python(raw)
            except ValidationError as e:
                logger.warning("skipping invalid question in %s: %s", p.name, e.error_count())
                continue
            if not q.id:
                logger.warning("skipping question without id in %s", p.name)
                continue
            questions.append(q)

    return questions


class QuestionBank:
    _questions: Optional[List[Question]] = None
    data_dir: Path = _DATA_DIR

    @classmethod
    def load(cls) -> List[Question]:
        if cls._questions is None:
            cls.reload()
        return cls._questions

    @classmethod
    def reload(cls) -> int:
        cls._questions = load_questions_from(cls.data_dir)
        logger.info("loaded %d seed questions from %s", len(cls._questions), cls.data_dir)
        return len(cls._questions)


# Public API
def get_seed_questions() -> List[Question]:
    return QuestionBank.load()


def seed_questions() -> int:
    """Insert seed questions whose ids are not in the database yet."""
    import store
    from db import SessionLocal

    with SessionLocal() as session:
        added = store.insert_missing(session, get_seed_questions(), source="seed")
        session.commit()
    if added:
        logger.info("seeded %d questions", added)
    return added


def reload_bank() -> int:
    """Re-read the seed files and overwrite their rows in the database."""
    import store
    from db import SessionLocal

    QuestionBank.reload()
    with SessionLocal() as session:
        n = store.upsert_questions(session, get_seed_questions(), source="seed")
        session.commit()
    return n
