"""
Progress: practice counters and skill proficiency.

- records: Plain-data SubjectProgress / SkillProgress / ProgressSnapshot
- repository: Load/save of whole snapshots (SQL and in-memory)
- reporting: SessionReport and the achievement reporter seam
- store: ProgressStore
"""

from questcore.progress.records import ProgressSnapshot, SkillProgress, SubjectProgress
from questcore.progress.reporting import (
    AchievementReporter,
    LoggingAchievementReporter,
    NullAchievementReporter,
    SessionReport,
)
from questcore.progress.repository import (
    InMemoryProgressRepository,
    ProgressRepository,
    SqlProgressRepository,
)
from questcore.progress.store import ProgressStore

__all__ = [
    "ProgressSnapshot",
    "SubjectProgress",
    "SkillProgress",
    "SessionReport",
    "AchievementReporter",
    "NullAchievementReporter",
    "LoggingAchievementReporter",
    "ProgressRepository",
    "InMemoryProgressRepository",
    "SqlProgressRepository",
    "ProgressStore",
]
