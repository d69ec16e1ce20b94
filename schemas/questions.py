# schemas/questions.py
from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator

CATEGORIES = ("general", "history", "science")
Category = Literal["general", "history", "science"]

BLANK = "______"


class _QuestionBase(BaseModel):
    id: Optional[str] = Field(default=None, max_length=64)
    category: Category
    prompt: str = Field(min_length=1)

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("prompt must not be blank")
        return v


class MultipleChoiceQuestion(_QuestionBase):
    type: Literal["multiple_choice"] = "multiple_choice"
    options: List[str] = Field(min_length=2, max_length=6)
    correct_index: int = Field(ge=0)

    @field_validator("options")
    @classmethod
    def _options_not_blank(cls, v: List[str]) -> List[str]:
        if any(not o.strip() for o in v):
            raise ValueError("every option needs text")
        return v

    @model_validator(mode="after")
    def _index_in_range(self) -> "MultipleChoiceQuestion":
        if self.correct_index >= len(self.options):
            raise ValueError("correct_index is out of range for options")
        return self


class FillBlankQuestion(_QuestionBase):
    type: Literal["fill_blank"] = "fill_blank"
    accepted_answers: List[str] = Field(min_length=1)
    hints: List[str] = Field(default_factory=list)

    @field_validator("accepted_answers")
    @classmethod
    def _some_answer(cls, v: List[str]) -> List[str]:
        # kept as authored; grading lower-cases but never trims these
        if not any(a.strip() for a in v):
            raise ValueError("at least one accepted answer must be non-blank")
        return v


Question = Annotated[
    Union[MultipleChoiceQuestion, FillBlankQuestion], Field(discriminator="type")
]
question_adapter: TypeAdapter[Question] = TypeAdapter(Question)


# ---------- Outgoing ----------


class QuestionOut(BaseModel):
    """Play view: never carries the answers."""

    id: str
    category: str
    type: str
    prompt: str
    options: Optional[List[str]] = None
    hints: Optional[List[str]] = None


class QuestionAdminOut(QuestionOut):
    correct_index: Optional[int] = None
    accepted_answers: Optional[List[str]] = None
    source: Optional[str] = None


def to_public(q: Question) -> QuestionOut:
    if isinstance(q, MultipleChoiceQuestion):
        return QuestionOut(
            id=q.id or "", category=q.category, type=q.type, prompt=q.prompt, options=q.options
        )
    return QuestionOut(
        id=q.id or "", category=q.category, type=q.type, prompt=q.prompt, hints=q.hints
    )


def to_admin(q: Question, source: Optional[str] = None) -> QuestionAdminOut:
    if isinstance(q, MultipleChoiceQuestion):
        return QuestionAdminOut(
            **to_public(q).model_dump(), correct_index=q.correct_index, source=source
        )
    return QuestionAdminOut(
        **to_public(q).model_dump(), accepted_answers=q.accepted_answers, source=source
    )
