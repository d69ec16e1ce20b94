from __future__ import annotations

from datetime import UTC, datetime
from typing import List, Optional

import sqlalchemy as sa
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db import Base


class QuestionRow(Base):
    __tablename__ = "questions"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    category: Mapped[str] = mapped_column(String(32), index=True)
    type: Mapped[str] = mapped_column(String(32))
    prompt: Mapped[str] = mapped_column(Text)
    # multiple_choice payload
    options: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    correct_index: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    # fill_blank payload
    accepted_answers: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    hints: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    source: Mapped[str] = mapped_column(String(16), default="seed")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )


class Game(Base):
    __tablename__ = "games"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True
    )
    category: Mapped[str] = mapped_column(String(32), index=True)
    score: Mapped[int] = mapped_column(Integer)  # number of correct answers
    # sum of per-answer scores
    points: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    total_questions: Mapped[int] = mapped_column(Integer)
    time_spent: Mapped[int] = mapped_column(sa.Integer)  # seconds
    accuracy: Mapped[int] = mapped_column(Integer)  # percent

    answers: Mapped[List["GameAnswer"]] = relationship(
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="GameAnswer.id",
    )


class GameAnswer(Base):
    __tablename__ = "game_answers"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(ForeignKey("games.id", ondelete="CASCADE"), index=True)
    question_id: Mapped[str] = mapped_column(String(64))
    answer: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_correct: Mapped[bool] = mapped_column(Boolean)
    score: Mapped[int] = mapped_column(Integer)
    verdict: Mapped[str] = mapped_column(String(32))

    game: Mapped[Game] = relationship(back_populates="answers")
