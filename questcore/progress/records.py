"""Plain-data progress records exchanged between the Progress Store and its repository."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class SubjectProgress:
    """Daily and lifetime practice counters for one subject."""

    subject_id: str
    daily_exercise_count: int = 0
    total_sessions: int = 0
    total_correct_answers: int = 0
    last_exercise_date: datetime | None = None

    def reset_daily_count_if_needed(self, now: datetime) -> None:
        """Zero the daily counter unless the last exercise was on now's calendar day."""
        if self.last_exercise_date is None or self.last_exercise_date.date() != now.date():
            self.daily_exercise_count = 0


@dataclass
class SkillProgress:
    """Proficiency and streak for one (skill, subject) pair."""

    skill_id: str
    subject_id: str
    proficiency: float = 0.0
    streak: int = 0  # consecutive correct answers
    last_reviewed: datetime | None = None


@dataclass
class ProgressSnapshot:
    """Everything the Progress Store persists."""

    subjects: dict[str, SubjectProgress] = field(default_factory=dict)
    skills: dict[tuple[str, str], SkillProgress] = field(default_factory=dict)  # (skill_id, subject_id)

    def subject(self, subject_id: str) -> SubjectProgress:
        """Fetch or create the subject record."""
        if subject_id not in self.subjects:
            self.subjects[subject_id] = SubjectProgress(subject_id=subject_id)
        return self.subjects[subject_id]

    def skill(self, skill_id: str, subject_id: str) -> SkillProgress:
        """Fetch or create the skill record."""
        key = (skill_id, subject_id)
        if key not in self.skills:
            self.skills[key] = SkillProgress(skill_id=skill_id, subject_id=subject_id)
        return self.skills[key]

    def copy(self) -> ProgressSnapshot:
        return copy.deepcopy(self)
