"""Data models for curriculum levels and progression state."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum

from questcore.core.subjects import CurriculumGrade, CurriculumSubject


class LevelStatus(str, Enum):
    """Derived status of a level relative to its subject's cursor."""

    LOCKED = "locked"
    CURRENT = "current"
    COMPLETED = "completed"


@dataclass(frozen=True)
class CurriculumQuest:
    """One quest inside a level."""

    title: str
    topic: str
    reward: str = ""


@dataclass(frozen=True)
class CurriculumLevel:
    """Static content for one level of a subject path."""

    id: str
    subject: CurriculumSubject
    title: str
    grade: CurriculumGrade
    focus: str = ""
    overview: str = ""
    quests_required_for_mastery: int = 1
    quests: tuple[CurriculumQuest, ...] = ()
    reward: str = ""

    def __post_init__(self):
        if self.quests_required_for_mastery < 1:
            raise ValueError(f"Level {self.id} must require at least one quest")


@dataclass
class LevelRecord:
    """Progression record for a level, created on its first attempt."""

    attempts: int = 0
    best_completed_quest_count: int = 0
    assisted_unlock: bool = False  # one-way: marks "needs review together"

    def register_attempt(self, completed_quests: int, assisted: bool = False) -> None:
        self.attempts += 1
        self.best_completed_quest_count = max(self.best_completed_quest_count, completed_quests)
        self.assisted_unlock = self.assisted_unlock or assisted


@dataclass
class CurriculumState:
    """Everything the Curriculum Progression Engine persists."""

    highest_unlocked_index: dict[CurriculumSubject, int] = field(default_factory=dict)
    placement_grade: CurriculumGrade | None = None
    level_records: dict[CurriculumSubject, dict[str, LevelRecord]] = field(default_factory=dict)

    @classmethod
    def initial(cls, subjects) -> CurriculumState:
        return cls(
            highest_unlocked_index={subject: 0 for subject in subjects},
            placement_grade=None,
            level_records={subject: {} for subject in subjects},
        )

    def cursor(self, subject: CurriculumSubject) -> int:
        return self.highest_unlocked_index.get(subject, 0)

    def records_for(self, subject: CurriculumSubject) -> dict[str, LevelRecord]:
        return self.level_records.setdefault(subject, {})

    def record_for(self, subject: CurriculumSubject, level_id: str) -> LevelRecord:
        """Fetch or create the record for a level."""
        return self.records_for(subject).setdefault(level_id, LevelRecord())

    def copy(self) -> CurriculumState:
        return copy.deepcopy(self)


@dataclass(frozen=True)
class OverallProgress:
    """Single cross-subject level number for gamified overviews."""

    level_number: int
    progress_to_next: float
    completed_levels: int
    total_levels: int
