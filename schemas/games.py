from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from schemas.marking import MarkResponse


class GameAnswerIn(BaseModel):
    question_id: str
    answer: Union[int, str, None] = None
    elapsed_ms: Optional[int] = Field(default=None, ge=0)


class GameCompleteRequest(BaseModel):
    category: str
    answers: list[GameAnswerIn] = Field(max_length=100)
    # seconds; summed from elapsed_ms when absent
    time_spent: Optional[int] = Field(default=None, ge=0)


class GameResultItem(BaseModel):
    question_id: str
    response: MarkResponse


class GameCompleteResponse(BaseModel):
    ok: bool
    game_id: Optional[int] = None
    total: int
    correct: int
    points: int
    accuracy: int
    time_spent: int
    results: list[GameResultItem]


class GameAnswerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    question_id: str
    answer: Optional[str] = None
    is_correct: bool
    score: int
    verdict: str


class GameSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: datetime | None
    category: str
    score: int
    points: int
    total_questions: int
    time_spent: int
    accuracy: int


class GameOut(GameSummaryOut):
    answers: list[GameAnswerOut] = []


class StatsOut(BaseModel):
    best_score: int
    average_score: int
    total_games: int
    best_scores: dict[str, int]
