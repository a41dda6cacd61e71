"""
Progress Models.

SQLAlchemy models for practice progress:
- Per-subject daily/session counters
- Per-(skill, subject) proficiency and streak
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Float, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SubjectProgressRow(Base):
    """Daily and lifetime counters for one practice subject."""

    __tablename__ = "subject_progress"

    subject_id: Mapped[str] = mapped_column(Text, primary_key=True)
    daily_exercise_count: Mapped[int] = mapped_column(Integer, default=0)
    total_sessions: Mapped[int] = mapped_column(Integer, default=0)
    total_correct_answers: Mapped[int] = mapped_column(Integer, default=0)
    last_exercise_date: Mapped[datetime | None] = mapped_column()

    def __repr__(self) -> str:
        return f"<SubjectProgressRow subject={self.subject_id} sessions={self.total_sessions}>"


class SkillProgressRow(Base):
    """Proficiency and streak for one skill within one subject."""

    __tablename__ = "skill_progress"

    skill_id: Mapped[str] = mapped_column(Text, primary_key=True)
    subject_id: Mapped[str] = mapped_column(Text, primary_key=True)
    proficiency: Mapped[float] = mapped_column(Float, default=0.0)
    streak: Mapped[int] = mapped_column(Integer, default=0)
    last_reviewed: Mapped[datetime | None] = mapped_column()

    def __repr__(self) -> str:
        return f"<SkillProgressRow skill={self.skill_id} subject={self.subject_id} proficiency={self.proficiency:.2f}>"
