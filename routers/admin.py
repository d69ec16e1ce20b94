from __future__ import annotations

import logging
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

import generator
import store
from bank import reload_bank
from db import SessionLocal
from deps.auth import admin_token, require_admin
from schemas.questions import Category, Question, QuestionAdminOut, to_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


class GenerateRequest(BaseModel):
    category: Category
    type: Literal["multiple_choice", "fill_blank"] = "multiple_choice"
    save: bool = False


class GenerateResponse(BaseModel):
    ok: bool
    saved: bool
    question: QuestionAdminOut


@router.post("/reload")
def reload_questions(request: Request):
    expected = admin_token()
    provided = request.headers.get("x-admin-token")

    if not expected:
        return {"ok": False, "error": "ADMIN_TOKEN not configured on server."}
    if provided != expected:
        return {"ok": False, "error": "unauthorized"}

    n = reload_bank()
    logger.info("admin reload: %d seed questions", n)
    return {"ok": True, "count": n}


@router.get(
    "/questions", response_model=List[QuestionAdminOut], dependencies=[Depends(require_admin)]
)
def admin_list_questions():
    with SessionLocal() as db:
        return [store.row_to_admin(r) for r in store.list_question_rows(db)]


@router.post(
    "/questions",
    response_model=QuestionAdminOut,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def admin_add_question(q: Question):
    with SessionLocal() as db:
        try:
            row = store.add_question(db, q, source="admin")
        except KeyError:
            raise HTTPException(status_code=409, detail="question id already exists")
        db.commit()
        return store.row_to_admin(row)


@router.delete("/questions/{qid}", dependencies=[Depends(require_admin)])
def admin_delete_question(qid: str):
    with SessionLocal() as db:
        if not store.delete_question(db, qid):
            raise HTTPException(status_code=404, detail="question not found")
        db.commit()
    return {"ok": True, "id": qid}


@router.post(
    "/generate", response_model=GenerateResponse, dependencies=[Depends(require_admin)]
)
def admin_generate(req: GenerateRequest):
    with SessionLocal() as db:
        existing = store.question_prompts(db, req.category)

    try:
        q = generator.generate_question(req.category, req.type, existing)
    except generator.GeneratorNotConfigured as e:
        raise HTTPException(status_code=503, detail=str(e))
    except generator.GenerationError as e:
        raise HTTPException(status_code=502, detail=f"question generation failed: {e}")

    if not req.save:
        return {"ok": True, "saved": False, "question": to_admin(q, "generated")}

    with SessionLocal() as db:
        row = store.add_question(db, q, source="generated")
        db.commit()
        return {"ok": True, "saved": True, "question": store.row_to_admin(row)}
